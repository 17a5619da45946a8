"""
Configuration and game registry.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, NamedTuple, Optional

import chess

from tabletop.core.rng import Seed, create_rng
from tabletop.core.types import Difficulty, GameKind
from tabletop.games import Checkers, ChessVariant, Go, NumberGuess, Sudoku, TicTacToe
from tabletop.games import checkers, go, tic_tac_toe


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

PACKAGE_DIR = Path(__file__).parent.parent  # src/tabletop/
DATA_DIR = PACKAGE_DIR / "data"
DEFAULT_STORE_PATH = DATA_DIR / "scores.db"


# ---------------------------------------------------------------------------
# Game Registry
# ---------------------------------------------------------------------------

GAMES = {
    GameKind.TIC_TAC_TOE.value: TicTacToe,
    GameKind.CHECKERS.value: Checkers,
    GameKind.GO.value: Go,
    GameKind.CHESS.value: ChessVariant,
    GameKind.SUDOKU.value: Sudoku,
    GameKind.NUMBER_GUESS.value: NumberGuess,
}

# Side names accepted on the command line, per two-player game
SIDES: Dict[str, Dict[str, Any]] = {
    "tic_tac_toe": {"x": tic_tac_toe.X, "o": tic_tac_toe.O},
    "checkers": {"red": checkers.RED, "black": checkers.BLACK},
    "go": {"black": go.BLACK, "white": go.WHITE},
    "chess": {"white": chess.WHITE, "black": chess.BLACK},
}


class GameInfo(NamedTuple):
    title: str
    description: str
    level: str


CATALOG = {
    "number_guess": GameInfo(
        "Number Guess",
        "Guess the secret number within a range set by the difficulty, "
        "with warmer/colder hints from the second guess.",
        "Beginner",
    ),
    "tic_tac_toe": GameInfo(
        "Tic-Tac-Toe",
        "Classic 3x3 three-in-a-row against a heuristic bot, with undo/redo.",
        "Intermediate",
    ),
    "checkers": GameInfo(
        "Checkers",
        "8x8 checkers with mandatory captures, capture chains and kings.",
        "Intermediate",
    ),
    "go": GameInfo(
        "Go 9x9",
        "Territory game with captures, simple ko and area scoring.",
        "Advanced",
    ),
    "chess": GameInfo(
        "Chess",
        "Classic chess against a bot with Easy/Medium/Hard strength.",
        "Advanced",
    ),
    "sudoku": GameInfo(
        "Sudoku",
        "Generate and solve unique-solution puzzles with optional seeds.",
        "Advanced",
    ),
}


def resolve_side(game_name: str, name: Optional[str]) -> Any:
    """
    Side value for `name` in `game_name`.

    Without a name the bot takes the second side, so the human moves first.
    Single-player games have no sides and always resolve to None.
    """
    sides = SIDES.get(game_name)
    if sides is None:
        return None
    if name is None:
        return list(sides.values())[1]
    key = name.strip().lower()
    if key not in sides:
        available = ", ".join(sides)
        raise ValueError(f"Unknown side for {game_name}: {name}. Available: {available}")
    return sides[key]


def side_name(game_name: str, side: Any) -> str:
    for name, value in SIDES.get(game_name, {}).items():
        if value == side:
            return name
    return str(side)


# ---------------------------------------------------------------------------
# Default Settings
# ---------------------------------------------------------------------------

class Config:
    """Session configuration with sensible defaults."""

    def __init__(
        self,
        game_name: str = "tic_tac_toe",
        difficulty: "Difficulty | str" = Difficulty.MEDIUM,
        seed: Optional[Seed] = None,
        bot_side: Optional[str] = None,
        store_path: Optional[str | Path] = None,
    ):
        if game_name not in GAMES:
            available = ", ".join(GAMES.keys())
            raise ValueError(f"Unknown game: {game_name}. Available: {available}")

        self.game_name = game_name
        self.difficulty = Difficulty.parse(difficulty)
        self.seed = seed
        self.store_path = Path(store_path) if store_path is not None else None

        # Derive dependent values
        self.bot_side = resolve_side(game_name, bot_side)
        self.rng = create_rng(seed)

    @property
    def kind(self) -> GameKind:
        return GameKind(self.game_name)

    @property
    def info(self) -> GameInfo:
        return CATALOG[self.game_name]


# Default configuration
DEFAULT_CONFIG = Config()
