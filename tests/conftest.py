"""
Shared test fixtures for tabletop tests.

Design principles:
- Seeded randomness only, so every test is reproducible
- Clean imports at module level
- Minimal, focused fixtures
"""

import tempfile
from pathlib import Path
from typing import Generator, List

import numpy as np
import pytest

from tabletop.core.rng import Rng, create_rng
from tabletop.games.checkers import Checkers
from tabletop.games.chess_variant import ChessVariant
from tabletop.games.go import Go
from tabletop.games.number_guess import NumberGuess
from tabletop.games.sudoku import Sudoku
from tabletop.games.tic_tac_toe import TicTacToe
from tabletop.storage.kv_store import MemoryStore


# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def temp_db_path() -> Generator[Path, None, None]:
    """Temporary database file with cleanup."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = Path(f.name)
    yield path
    for suffix in ["", "-wal", "-shm"]:
        p = Path(str(path) + suffix)
        if p.exists():
            p.unlink()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Temporary directory with cleanup."""
    with tempfile.TemporaryDirectory() as d:
        yield Path(d)


# =============================================================================
# Randomness
# =============================================================================

@pytest.fixture
def rng() -> Rng:
    """Seeded generator."""
    return create_rng(12345)


# =============================================================================
# Engine Fixtures
# =============================================================================

@pytest.fixture
def ttt() -> TicTacToe:
    return TicTacToe()


@pytest.fixture
def checkers_engine() -> Checkers:
    return Checkers()


@pytest.fixture
def go_engine() -> Go:
    return Go()


@pytest.fixture
def chess_engine() -> ChessVariant:
    return ChessVariant()


@pytest.fixture
def sudoku_engine() -> Sudoku:
    return Sudoku()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def guess_engine(store: MemoryStore, rng: Rng) -> NumberGuess:
    return NumberGuess(store=store, rng=rng)


# =============================================================================
# Sudoku Boards
# =============================================================================

SOLVED_SUDOKU: List[List[int]] = [
    [5, 3, 4, 6, 7, 8, 9, 1, 2],
    [6, 7, 2, 1, 9, 5, 3, 4, 8],
    [1, 9, 8, 3, 4, 2, 5, 6, 7],
    [8, 5, 9, 7, 6, 1, 4, 2, 3],
    [4, 2, 6, 8, 5, 3, 7, 9, 1],
    [7, 1, 3, 9, 2, 4, 8, 5, 6],
    [9, 6, 1, 5, 3, 7, 2, 8, 4],
    [2, 8, 7, 4, 1, 9, 6, 3, 5],
    [3, 4, 5, 2, 8, 6, 1, 7, 9],
]

CLASSIC_PUZZLE: List[List[int]] = [
    [5, 3, 0, 0, 7, 0, 0, 0, 0],
    [6, 0, 0, 1, 9, 5, 0, 0, 0],
    [0, 9, 8, 0, 0, 0, 0, 6, 0],
    [8, 0, 0, 0, 6, 0, 0, 0, 3],
    [4, 0, 0, 8, 0, 3, 0, 0, 1],
    [7, 0, 0, 0, 2, 0, 0, 0, 6],
    [0, 6, 0, 0, 0, 0, 2, 8, 0],
    [0, 0, 0, 4, 1, 9, 0, 0, 5],
    [0, 0, 0, 0, 8, 0, 0, 7, 9],
]


@pytest.fixture
def solved_sudoku() -> np.ndarray:
    return np.array(SOLVED_SUDOKU, dtype=np.int8)


@pytest.fixture
def classic_puzzle() -> np.ndarray:
    return np.array(CLASSIC_PUZZLE, dtype=np.int8)
