"""
Grid utilities shared by the board games.

Boards are int8 NumPy arrays where 0 always means "empty".
"""

from __future__ import annotations

from typing import List

import numpy as np

from tabletop.core.errors import OutOfBounds
from tabletop.core.types import Point

ORTHOGONAL = ((-1, 0), (1, 0), (0, -1), (0, 1))


def in_bounds(rows: int, cols: int, r: int, c: int) -> bool:
    """Return True if (r, c) is inside a rows x cols board."""
    return 0 <= r < rows and 0 <= c < cols


def require_in_bounds(board: np.ndarray, r: int, c: int) -> None:
    """Raise OutOfBounds unless (r, c) is on `board`."""
    rows, cols = board.shape
    if not in_bounds(rows, cols, r, c):
        raise OutOfBounds(f"Cell ({r},{c}) is outside the {rows}x{cols} board")


def orthogonal_neighbors(size: int, r: int, c: int) -> List[Point]:
    """Up/down/left/right neighbours of (r, c) on a size x size board."""
    return [
        Point(r + dr, c + dc)
        for dr, dc in ORTHOGONAL
        if in_bounds(size, size, r + dr, c + dc)
    ]


def winning_lines(size: int) -> np.ndarray:
    """
    Flat-index lines (rows, cols, both diagonals) for a size x size board.

    For 3x3 that is the classic 8 three-in-a-row lines.
    """
    idx = np.arange(size * size).reshape(size, size)
    lines = [row for row in idx] + [col for col in idx.T]
    lines.append(idx.diagonal())
    lines.append(np.fliplr(idx).diagonal())
    return np.array(lines, dtype=np.int8)


def empty_cells(board: np.ndarray) -> List[Point]:
    """Row-major list of empty cells."""
    return [Point(int(r), int(c)) for r, c in np.argwhere(board == 0)]


def board_full(board: np.ndarray) -> bool:
    """Return True if the board has no empty cell."""
    return not np.any(board == 0)


def parse_ints(text: str, count: int) -> List[int]:
    """
    Parse `count` comma- or space-separated integers from user input.

    Raises ValueError with a readable message otherwise.
    """
    parts = [p for p in text.replace(",", " ").split() if p]
    if len(parts) != count:
        raise ValueError(f"Expected {count} numbers, got {len(parts)}")
    try:
        return [int(p) for p in parts]
    except ValueError as e:
        raise ValueError(f"Not a number in {text!r}") from e
