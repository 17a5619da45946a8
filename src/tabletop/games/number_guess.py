"""
Number-range guessing game.

A secret integer is drawn from a range set by the difficulty. Each guess is
answered too low / too high / correct, and from the second guess on with a
warmer / colder / same trend. Lower scores are better; the best one is kept
in an injected key-value store.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from tabletop.core.errors import IllegalMove, OutOfBounds
from tabletop.core.rng import Rng, create_rng
from tabletop.core.types import Difficulty
from tabletop.storage.kv_store import KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)

BEST_SCORE_KEY = "number-guess:best-score"
DEFAULT_DIFFICULTY = Difficulty.MEDIUM


@dataclass(frozen=True)
class Range:
    low: int
    high: int

    @property
    def size(self) -> int:
        return self.high - self.low + 1

    def __contains__(self, value: int) -> bool:
        return self.low <= value <= self.high

    def __str__(self) -> str:
        return f"{self.low}-{self.high}"


RANGES = {
    Difficulty.EASY: Range(1, 50),
    Difficulty.MEDIUM: Range(1, 100),
    Difficulty.HARD: Range(1, 500),
}


class GuessOutcome(Enum):
    TOO_LOW = "too_low"
    TOO_HIGH = "too_high"
    CORRECT = "correct"


class Trend(Enum):
    WARMER = "warmer"
    COLDER = "colder"
    SAME = "same"


@dataclass(frozen=True)
class NumberGuessState:
    difficulty: Difficulty
    range: Range
    secret: int
    attempts: int = 0
    previous_distance: Optional[int] = None
    best_score: Optional[int] = None
    running: bool = True


@dataclass(frozen=True)
class GuessResult:
    outcome: GuessOutcome
    # None on the first guess and on the winning guess
    trend: Optional[Trend]
    state: NumberGuessState
    score: Optional[int] = None
    is_new_best: bool = False


def range_for(difficulty: Difficulty) -> Range:
    return RANGES[Difficulty.parse(difficulty)]


def compute_distance(secret: int, guess: int) -> int:
    return abs(secret - guess)


def difficulty_bonus(rng_range: Range) -> int:
    return int(math.floor(math.log2(rng_range.size)))


def compute_score(attempts: int, rng_range: Range) -> int:
    """attempts * 100 minus a small bonus for wider ranges, never below 1."""
    return max(1, attempts * 100 - difficulty_bonus(rng_range))


def parse_guess(text: str, rng_range: Range) -> int:
    """
    Validate human input.

    Raises:
        IllegalMove: not an integer.
        OutOfBounds: outside the range.
    """
    try:
        value = int(text.strip())
    except ValueError as e:
        raise IllegalMove(f"Enter a whole number, got {text!r}") from e
    if value not in rng_range:
        raise OutOfBounds(f"{value} is outside {rng_range}")
    return value


class NumberGuess:
    """Guessing engine bound to a best-score store and a random source."""

    def __init__(self, store: Optional[KeyValueStore] = None, rng: Optional[Rng] = None):
        self.store = store if store is not None else MemoryStore()
        self.rng = rng or create_rng()

    def game_id(self) -> str:
        return "number_guess"

    # -- best score ---------------------------------------------------------

    def load_best_score(self) -> Optional[int]:
        raw = self.store.get(BEST_SCORE_KEY)
        if not raw:
            return None
        try:
            value = float(raw)
        except ValueError:
            logger.warning("Ignoring unreadable best score %r", raw)
            return None
        return int(value) if math.isfinite(value) else None

    def save_best_score(self, score: int) -> None:
        self.store.set(BEST_SCORE_KEY, str(score))

    # -- rounds -------------------------------------------------------------

    def pick_secret(self, difficulty: Difficulty) -> int:
        r = range_for(difficulty)
        return self.rng.randint(r.low, r.high)

    def create_initial_state(self, difficulty: Difficulty = DEFAULT_DIFFICULTY) -> NumberGuessState:
        difficulty = Difficulty.parse(difficulty)
        return NumberGuessState(
            difficulty=difficulty,
            range=range_for(difficulty),
            secret=self.pick_secret(difficulty),
            best_score=self.load_best_score(),
        )

    def start_new_round(self, state: NumberGuessState) -> NumberGuessState:
        """Same difficulty, new secret, counters cleared."""
        return replace(
            state,
            secret=self.pick_secret(state.difficulty),
            attempts=0,
            previous_distance=None,
            running=True,
        )

    def parse_guess(self, state: NumberGuessState, text: str) -> int:
        return parse_guess(text, state.range)

    def apply_guess(self, state: NumberGuessState, guess: int) -> GuessResult:
        """
        Score one guess.

        Raises:
            IllegalMove: the round is already won.
            OutOfBounds: the guess is outside the range.
        """
        if not state.running:
            raise IllegalMove("The round is over; start a new one")
        if guess not in state.range:
            raise OutOfBounds(f"{guess} is outside {state.range}")

        distance = compute_distance(state.secret, guess)
        attempts = state.attempts + 1

        if guess == state.secret:
            score = compute_score(attempts, state.range)
            current = self.load_best_score()
            is_new_best = current is None or score < current
            best = score if is_new_best else current
            if is_new_best:
                self.save_best_score(score)
                logger.info("New best score %d (%d attempts, range %s)", score, attempts, state.range)
            updated = replace(state, attempts=attempts, best_score=best, running=False)
            return GuessResult(GuessOutcome.CORRECT, None, updated, score, is_new_best)

        outcome = GuessOutcome.TOO_LOW if guess < state.secret else GuessOutcome.TOO_HIGH
        trend = None
        if state.previous_distance is not None:
            if distance < state.previous_distance:
                trend = Trend.WARMER
            elif distance > state.previous_distance:
                trend = Trend.COLDER
            else:
                trend = Trend.SAME
        updated = replace(state, attempts=attempts, previous_distance=distance)
        return GuessResult(outcome, trend, updated)

    def is_over(self, state: NumberGuessState) -> bool:
        return not state.running

    def state_string(self, state: NumberGuessState) -> str:
        best = "-" if state.best_score is None else str(state.best_score)
        status = "guessing" if state.running else "solved"
        return (
            f"Range {state.range} ({state.difficulty.value})  "
            f"Attempts: {state.attempts}  Best: {best}  [{status}]"
        )
