"""
Public API for terminal play.

Usage:
    from tabletop import run, Config

    run(Config(game_name="checkers", difficulty="hard", seed=42))

Input and output go through `prompt` / `out` callables (``input`` and
``print`` by default) so a session can be scripted.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Collection, Optional

from tabletop.core.errors import GameError
from tabletop.core.history import History
from tabletop.core.rng import Rng
from tabletop.core.types import Difficulty, GameKind
from tabletop.games.game_base import GameEngine, play
from tabletop.games.number_guess import GuessOutcome, NumberGuess
from tabletop.games.sudoku import Sudoku
from tabletop.utils.config import Config, side_name
from tabletop.utils.factory import create_engine, create_store
from tabletop.utils.format import (
    capitalize,
    format_elapsed_ms,
    format_list,
    format_ordinal,
    format_range,
    format_score,
    pluralize,
)

logger = logging.getLogger(__name__)

Prompt = Callable[[str], str]
Output = Callable[[str], None]

QUIT = ("quit", "exit", "q")
UNDO = "undo"
REDO = "redo"
MOVES = "moves"


class _Quit(Exception):
    pass


def _read(prompt: Prompt, text: str) -> str:
    try:
        raw = prompt(text).strip()
    except EOFError:
        raise _Quit() from None
    if raw.lower() in QUIT:
        raise _Quit()
    return raw


# ---------------------------------------------------------------------------
# Board games
# ---------------------------------------------------------------------------

def _step(engine: GameEngine, history: History, human_sides: Collection[Any], forward: bool) -> History:
    """Undo (or redo) until a human is on turn again, so bot replies go with the move."""
    moved = history.redo() if forward else history.undo()
    while moved is not history:
        history = moved
        if engine.current_side(history.present) in human_sides:
            break
        moved = history.redo() if forward else history.undo()
    return history


def _ai_turn(
    engine: GameEngine,
    history: History,
    difficulty: Difficulty,
    rng: Optional[Rng],
) -> tuple[History, Any]:
    """Bot selects and applies a move. The move is None if it had nothing to play."""
    state = history.present
    move = engine.choose_bot_move(state, engine.current_side(state), difficulty, rng)
    if move is None:
        return history, None
    return play(engine, history, move), move


def _human_turn(
    engine: GameEngine,
    history: History,
    human_sides: Collection[Any],
    prompt: Prompt,
    out: Output,
) -> History:
    """Prompt for a move or a history command and return the updated history."""
    while True:
        raw = _read(prompt, "Move: ")
        command = raw.lower()

        if command in (UNDO, REDO):
            forward = command == REDO
            if not (history.can_redo if forward else history.can_undo):
                out(f"Nothing to {command}.")
                continue
            return _step(engine, history, human_sides, forward)

        if command == MOVES:
            moves = [str(m) for m in engine.list_legal_moves(history.present)]
            out(format_list(moves) if moves else "No legal moves.")
            continue

        try:
            move = engine.parse_move(history.present, raw)
            return play(engine, history, move)
        except GameError as e:
            out(f"Illegal move: {e}")
        except ValueError as e:
            out(f"Invalid input: {e}")


def play_board_game(
    engine: GameEngine,
    difficulty: Difficulty,
    bot_side: Any,
    rng: Optional[Rng] = None,
    self_play: bool = False,
    prompt: Prompt = input,
    out: Output = print,
) -> History:
    """
    Play one two-player game in the terminal.

    Parameters
    ----------
    engine : GameEngine
        Any board-game engine.
    difficulty : Difficulty
        Bot strength.
    bot_side : Any
        Side the bot plays. Ignored with `self_play`.
    rng : Rng, optional
        Random source for the bot's random choices.
    self_play : bool
        If True, the bot plays every side.

    Returns the final history, so callers can inspect the game.
    """
    game_name = engine.game_id()
    bot_sides = set(engine.sides()) if self_play else {bot_side}
    human_sides = [s for s in engine.sides() if s not in bot_sides]
    history = History.start(engine.create_initial_state())

    out(
        f"Starting {game_name} ({difficulty.value}). "
        f"Bot plays {format_list([side_name(game_name, s) for s in engine.sides() if s in bot_sides])}."
    )
    if human_sides:
        out(f"Commands: {format_list([UNDO, REDO, MOVES, QUIT[0]])}")
    out(engine.state_string(history.present))

    try:
        while not engine.is_over(history.present):
            side = engine.current_side(history.present)
            if side in bot_sides:
                history, move = _ai_turn(engine, history, difficulty, rng)
                if move is None:
                    break
                out(f"\nBot ({side_name(game_name, side)}) played: {move}")
            else:
                out(f"\nYour turn ({side_name(game_name, side)})")
                history = _human_turn(engine, history, human_sides, prompt, out)
            out(engine.state_string(history.present))

        out("\n" + "=" * 40)
        out("GAME OVER")
        out("=" * 40)

    except _Quit:
        out("Bye.")
    except KeyboardInterrupt:
        out("\nInterrupted - shutting down...")
    except Exception:
        logger.exception("Fatal error in play loop")
        raise

    return history


# ---------------------------------------------------------------------------
# Sudoku
# ---------------------------------------------------------------------------

def play_sudoku(
    engine: Sudoku,
    difficulty: Difficulty,
    rng: Optional[Rng] = None,
    prompt: Prompt = input,
    out: Output = print,
) -> History:
    """Solve a generated puzzle. Enter 'row,col,value'; 'check' lists conflicts."""
    history = History.start(engine.new_game(difficulty, rng=rng))
    started = time.monotonic()

    out(f"Sudoku ({difficulty.value}). Enter row,col,value (value 0 clears).")
    out(f"Commands: {format_list(['check', UNDO, REDO, QUIT[0]])}")
    out(engine.state_string(history.present))

    try:
        while not engine.is_solved(history.present):
            raw = _read(prompt, "Cell: ")
            command = raw.lower()
            if command == UNDO:
                history = history.undo()
            elif command == REDO:
                history = history.redo()
            elif command == "check":
                mistakes = engine.find_mistakes(history.present)
                out(
                    f"{pluralize(len(mistakes), 'conflict')}"
                    + (f": {format_list([str(p) for p in mistakes])}" if mistakes else "")
                )
                continue
            else:
                try:
                    move = engine.parse_move(history.present, raw)
                    history = history.advance(engine.apply_move(history.present, move))
                except GameError as e:
                    out(f"Illegal entry: {e}")
                    continue
                except ValueError as e:
                    out(f"Invalid input: {e}")
                    continue
            out(engine.state_string(history.present))

        elapsed = (time.monotonic() - started) * 1000
        out(f"\nSolved in {format_elapsed_ms(elapsed)}!")

    except _Quit:
        out("Bye.")
    except KeyboardInterrupt:
        out("\nInterrupted - shutting down...")
    except Exception:
        logger.exception("Fatal error in sudoku loop")
        raise

    return history


# ---------------------------------------------------------------------------
# Number guessing
# ---------------------------------------------------------------------------

def play_number_guess(
    engine: NumberGuess,
    difficulty: Difficulty,
    prompt: Prompt = input,
    out: Output = print,
):
    """Guess rounds until the player quits. Returns the last state."""
    state = engine.create_initial_state(difficulty)
    out(f"Guess the number between {format_range(state.range.low, state.range.high)}.")

    try:
        while True:
            raw = _read(prompt, "Guess: ")
            try:
                guess = engine.parse_guess(state, raw)
            except GameError as e:
                out(str(e))
                continue

            result = engine.apply_guess(state, guess)
            state = result.state
            if result.outcome is GuessOutcome.CORRECT:
                out(
                    f"Correct! Got it on the {format_ordinal(state.attempts)} guess, "
                    f"score {format_score(result.score)}"
                    + (" (new best)" if result.is_new_best else "")
                )
                if _read(prompt, "Play again? [y/N] ").lower() not in ("y", "yes"):
                    break
                state = engine.start_new_round(state)
                out(f"New round: {format_range(state.range.low, state.range.high)}.")
                continue

            hint = "Too low" if result.outcome is GuessOutcome.TOO_LOW else "Too high"
            if result.trend is not None:
                hint += f", {result.trend.value}"
            out(hint + ".")

    except _Quit:
        out("Bye.")
    except KeyboardInterrupt:
        out("\nInterrupted - shutting down...")
    except Exception:
        logger.exception("Fatal error in guessing loop")
        raise

    out(engine.state_string(state))
    return state


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def run(
    config: Config,
    self_play: bool = False,
    prompt: Prompt = input,
    out: Output = print,
) -> Any:
    """Play the configured game and return its final history (or state)."""
    out(f"{config.info.title}: {capitalize(config.info.description)}")

    if config.kind is GameKind.NUMBER_GUESS:
        store = create_store(config.store_path)
        try:
            engine = create_engine(config.game_name, store=store, rng=config.rng)
            return play_number_guess(engine, config.difficulty, prompt, out)
        finally:
            store.close()

    engine = create_engine(config.game_name)
    if config.kind is GameKind.SUDOKU:
        return play_sudoku(engine, config.difficulty, config.rng, prompt, out)
    return play_board_game(
        engine,
        config.difficulty,
        config.bot_side,
        rng=config.rng,
        self_play=self_play,
        prompt=prompt,
        out=out,
    )


__all__ = [
    "run",
    "play_board_game",
    "play_sudoku",
    "play_number_guess",
]
