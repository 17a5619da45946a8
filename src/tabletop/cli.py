"""
Command-line interface for terminal play.
"""

import argparse
import logging

from tabletop.api import run
from tabletop.core.rng import parse_seed, seed_from_query
from tabletop.core.types import Difficulty
from tabletop.utils.config import Config, GAMES, SIDES, DEFAULT_STORE_PATH


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Play board games and puzzles against heuristic and search bots"
    )
    parser.add_argument(
        "--game", "-g",
        choices=list(GAMES.keys()),
        default="tic_tac_toe",
        help="Game to play (default: tic_tac_toe)",
    )
    parser.add_argument(
        "--difficulty", "-d",
        default=Difficulty.MEDIUM.value,
        help="easy, medium (or normal) or hard (default: medium)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=str,
        default=None,
        help="Seed for reproducible bots and puzzles; numbers are used as-is, other text is hashed",
    )
    parser.add_argument(
        "--query",
        type=str,
        default=None,
        help="URL query string to read the seed from (e.g. '?seed=abc'). Ignored if --seed is given.",
    )
    parser.add_argument(
        "--bot-side",
        type=str,
        default=None,
        help="Side the bot plays: "
        + "; ".join(f"{game}: {'/'.join(sides)}" for game, sides in SIDES.items())
        + " (default: the side that moves second)",
    )
    parser.add_argument(
        "--self-play",
        action="store_true",
        help="Bot plays every side (no human players)",
    )
    parser.add_argument(
        "--store",
        nargs="?",
        const=str(DEFAULT_STORE_PATH),
        default=None,
        help=f"Keep the best guessing score in a sqlite file (default path: {DEFAULT_STORE_PATH})",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging verbosity (default: WARNING)",
    )
    return parser.parse_args(argv)


def resolve_seed(seed: str | None, query: str | None):
    """The explicit seed wins over the one carried by a query string."""
    raw = seed if seed is not None else seed_from_query(query)
    return None if raw is None else parse_seed(raw)


def main(argv=None) -> None:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        config = Config(
            game_name=args.game,
            difficulty=args.difficulty,
            seed=resolve_seed(args.seed, args.query),
            bot_side=args.bot_side,
            store_path=args.store,
        )
    except ValueError as e:
        raise SystemExit(f"error: {e}") from None

    run(config, self_play=args.self_play)


if __name__ == "__main__":
    main()
