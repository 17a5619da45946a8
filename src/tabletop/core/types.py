"""
Core types and constants shared by every game.

This module contains the small closed sets the rest of the package branches on:
- Difficulty: the bot strength tier (never changes board size or rules)
- GameKind: tag for callers that must handle all games uniformly
- Point: a (row, col) board coordinate
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: "str | Difficulty") -> "Difficulty":
        """Accept an enum member or a case-insensitive name ("Easy", "hard", ...)."""
        if isinstance(value, Difficulty):
            return value
        key = value.strip().lower()
        # The guessing game historically calls the middle tier "normal"
        if key == "normal":
            return cls.MEDIUM
        try:
            return cls(key)
        except ValueError:
            options = ", ".join(d.value for d in cls)
            raise ValueError(f"Unknown difficulty: {value}. Available: {options}") from None


class GameKind(Enum):
    TIC_TAC_TOE = "tic_tac_toe"
    CHECKERS = "checkers"
    GO = "go"
    CHESS = "chess"
    SUDOKU = "sudoku"
    NUMBER_GUESS = "number_guess"


class Point(NamedTuple):
    """Board coordinate."""

    row: int
    col: int

    def __str__(self) -> str:
        return f"{self.row},{self.col}"
