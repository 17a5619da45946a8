"""
GameState - immutable game state container.

Boards are int8 NumPy arrays frozen on construction, so a state can be shared
freely (history stacks, bot search, concurrent callers) without copying.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

import numpy as np

from tabletop.core.hashing import freeze, hash_board


@dataclass(frozen=True, eq=False)
class BoardValue:
    """
    Value semantics for frozen dataclasses that hold boards.

    Every ndarray field is copied to int8 (unless already a read-only int8
    array) and frozen.
    Equality compares arrays with np.array_equal and everything else with ==.
    """

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, np.ndarray):
                if value.flags.writeable or value.dtype != np.int8:
                    # Own a private int8 copy so hashes compare like for like
                    value = np.array(value, dtype=np.int8)
                    object.__setattr__(self, f.name, value)
                freeze(value)

    def _values(self) -> tuple:
        return tuple(getattr(self, f.name) for f in fields(self))

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        for a, b in zip(self._values(), other._values()):
            if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
                if a is None or b is None or not np.array_equal(a, b):
                    return False
            elif a != b:
                return False
        return True

    def __hash__(self) -> int:
        return hash(tuple(
            hash_board(v) if isinstance(v, np.ndarray) else v
            for v in self._values()
        ))


@dataclass(frozen=True, eq=False)
class GameState(BoardValue):
    """
    Board plus side to move.

    Engines with extra bookkeeping (forced capture origin, pass counter, ...)
    extend this with more fields.
    """

    board: np.ndarray
    current_player: int

    def __post_init__(self):
        if not isinstance(self.board, np.ndarray):
            object.__setattr__(self, "board", np.array(self.board, dtype=np.int8))
        super().__post_init__()

    def board_hash(self) -> str:
        return hash_board(self.board)
