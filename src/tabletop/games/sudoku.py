"""
Sudoku puzzle engine: validation, solver, uniqueness counter, generator, and a
play session.

Board encoding (int8, 9x9):
    0 = empty
    1..9 = digit

The solver is a backtracking search that always branches on the most
constrained empty cell (fewest candidates). It stops scanning as soon as it
finds a cell with one candidate, and fails as soon as it finds one with none.
Without that heuristic generation would be far too slow.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Optional, Sequence, Union

import numpy as np

from tabletop.core.errors import CellOccupied, IllegalMove, OutOfBounds
from tabletop.core.rng import Rng, Seed, create_rng
from tabletop.core.types import Difficulty, Point
from tabletop.games.game_rules import parse_ints
from tabletop.games.game_state import BoardValue

logger = logging.getLogger(__name__)

Grid = List[List[int]]
BoardLike = Union[np.ndarray, Sequence[Sequence[int]]]

SIZE = 9
BOX = 3
DIGITS = range(1, 10)

# Clue-count floor per difficulty; removal stops once the floor is reached
MIN_CLUES = {
    Difficulty.EASY: 36,
    Difficulty.MEDIUM: 30,
    Difficulty.HARD: 24,
}


class Candidates(NamedTuple):
    row: int
    col: int
    values: List[int]


@dataclass(frozen=True)
class GeneratedPuzzle:
    puzzle: np.ndarray
    solution: np.ndarray
    difficulty: Difficulty
    seed: Optional[Seed] = None

    @property
    def clues(self) -> int:
        return int(np.count_nonzero(self.puzzle))


def _grid(board: BoardLike) -> Grid:
    if isinstance(board, np.ndarray):
        return board.tolist()
    return [list(row) for row in board]


def _array(grid: Grid) -> np.ndarray:
    return np.array(grid, dtype=np.int8)


def _require_cell(row: int, col: int) -> None:
    if not (0 <= row < SIZE and 0 <= col < SIZE):
        raise OutOfBounds(f"Cell out of bounds: ({row}, {col})")


def create_empty_board() -> np.ndarray:
    return np.zeros((SIZE, SIZE), dtype=np.int8)


def is_valid_placement(board: BoardLike, row: int, col: int, value: int) -> bool:
    """True if `value` does not repeat in the row, column or box of (row, col), ignoring the cell itself."""
    _require_cell(row, col)
    if not 1 <= value <= 9:
        return False
    grid = board.tolist() if isinstance(board, np.ndarray) else board

    for c in range(SIZE):
        if c != col and grid[row][c] == value:
            return False
    for r in range(SIZE):
        if r != row and grid[r][col] == value:
            return False
    br, bc = (row // BOX) * BOX, (col // BOX) * BOX
    for r in range(br, br + BOX):
        for c in range(bc, bc + BOX):
            if (r != row or c != col) and grid[r][c] == value:
                return False
    return True


def is_complete(board: BoardLike) -> bool:
    return all(v != 0 for row in _grid(board) for v in row)


def boards_equal(a: BoardLike, b: BoardLike) -> bool:
    return np.array_equal(np.asarray(a), np.asarray(b))


def has_conflicts(board: BoardLike) -> bool:
    """True if any filled cell repeats a digit in its row, column or box."""
    grid = _grid(board)
    return any(
        grid[r][c] != 0 and not is_valid_placement(grid, r, c, grid[r][c])
        for r in range(SIZE)
        for c in range(SIZE)
    )


def find_best_empty_cell(grid: Sequence[Sequence[int]]) -> Optional[Candidates]:
    """
    Most-constrained empty cell, or None when the grid is full.

    Returns immediately on a dead end (no candidates) or a forced cell
    (exactly one candidate).
    """
    rows = [set(row) for row in grid]
    cols = [set(grid[r][c] for r in range(SIZE)) for c in range(SIZE)]
    boxes = [
        set(grid[r][c] for r in range(br, br + BOX) for c in range(bc, bc + BOX))
        for br in range(0, SIZE, BOX)
        for bc in range(0, SIZE, BOX)
    ]

    best: Optional[Candidates] = None
    for r in range(SIZE):
        for c in range(SIZE):
            if grid[r][c] != 0:
                continue
            used = rows[r] | cols[c] | boxes[(r // BOX) * BOX + c // BOX]
            values = [v for v in DIGITS if v not in used]
            if not values:
                return Candidates(r, c, [])
            if best is None or len(values) < len(best.values):
                best = Candidates(r, c, values)
                if len(values) == 1:
                    return best
    return best


def solve(board: BoardLike) -> Optional[np.ndarray]:
    """Solved copy of `board`, or None if it has no solution."""
    working = _grid(board)
    if has_conflicts(working):
        return None

    def backtrack() -> bool:
        nxt = find_best_empty_cell(working)
        if nxt is None:
            return True
        if not nxt.values:
            return False
        for v in nxt.values:
            working[nxt.row][nxt.col] = v
            if backtrack():
                return True
        working[nxt.row][nxt.col] = 0
        return False

    return _array(working) if backtrack() else None


def count_solutions(board: BoardLike, limit: int = 2) -> int:
    """Number of solutions, counting no further than `limit` (2 is enough to test uniqueness)."""
    working = _grid(board)
    if has_conflicts(working):
        return 0
    found = 0

    def backtrack() -> bool:
        nonlocal found
        nxt = find_best_empty_cell(working)
        if nxt is None:
            found += 1
            return found >= limit
        if not nxt.values:
            return False
        for v in nxt.values:
            working[nxt.row][nxt.col] = v
            if backtrack():
                return True
        working[nxt.row][nxt.col] = 0
        return False

    if limit > 0:
        backtrack()
    return found


def generate_solved_board(rng: Rng) -> np.ndarray:
    """
    A random complete grid, built without search.

    Start from the Latin pattern (r*3 + r//3 + c) % 9 + 1 and relabel digits,
    then shuffle the bands, the rows within each band, the stacks and the
    columns within each stack. Every step preserves validity.
    """
    base = [[(r * 3 + r // 3 + c) % 9 + 1 for c in range(SIZE)] for r in range(SIZE)]

    digits = rng.shuffle(list(DIGITS))

    band_order = rng.shuffle([0, 1, 2])
    rows_within = [rng.shuffle([0, 1, 2]) for _ in range(3)]
    row_map = [b * 3 + r for b in band_order for r in rows_within[b]]

    stack_order = rng.shuffle([0, 1, 2])
    cols_within = [rng.shuffle([0, 1, 2]) for _ in range(3)]
    col_map = [s * 3 + c for s in stack_order for c in cols_within[s]]

    out = [[digits[base[row_map[r]][col_map[c]] - 1] for c in range(SIZE)] for r in range(SIZE)]
    return _array(out)


def generate_puzzle(
    difficulty: Difficulty = Difficulty.MEDIUM,
    seed: Optional[Seed] = None,
    rng: Optional[Rng] = None,
) -> GeneratedPuzzle:
    """
    Puzzle with exactly one solution.

    Clues are removed in random order; a removal that breaks uniqueness is
    reverted. Stops at the difficulty's clue floor or when the order is
    exhausted. The same seed and difficulty always yield the same puzzle.
    """
    difficulty = Difficulty.parse(difficulty)
    if rng is None:
        rng = create_rng(seed)
    solution = generate_solved_board(rng)
    puzzle = solution.tolist()

    floor = MIN_CLUES[difficulty]
    clues = SIZE * SIZE
    reverted = 0
    for idx in rng.shuffle(list(range(SIZE * SIZE))):
        if clues <= floor:
            break
        r, c = divmod(idx, SIZE)
        prev = puzzle[r][c]
        if prev == 0:
            continue
        puzzle[r][c] = 0
        if count_solutions(puzzle, 2) != 1:
            puzzle[r][c] = prev
            reverted += 1
        else:
            clues -= 1

    logger.info(
        "Generated %s sudoku: %d clues (floor %d, %d removals reverted)",
        difficulty.value, clues, floor, reverted,
    )
    return GeneratedPuzzle(_array(puzzle), solution, difficulty, seed)


# ---------------------------------------------------------------------------
# Play session
# ---------------------------------------------------------------------------

class SudokuStatus(Enum):
    IN_PROGRESS = "in_progress"
    SOLVED = "solved"


@dataclass(frozen=True)
class CellEntry:
    row: int
    col: int
    # 0 clears the cell
    value: int

    def __str__(self) -> str:
        return f"{self.row},{self.col},{self.value}"


@dataclass(frozen=True, eq=False)
class SudokuState(BoardValue):
    puzzle: np.ndarray
    solution: np.ndarray
    work: np.ndarray


class Sudoku:
    """Single-player puzzle session. Clues are fixed; other cells take 0-9."""

    SIZE = SIZE

    def game_id(self) -> str:
        return "sudoku"

    def new_game(
        self,
        difficulty: Difficulty = Difficulty.MEDIUM,
        seed: Optional[Seed] = None,
        rng: Optional[Rng] = None,
    ) -> SudokuState:
        generated = generate_puzzle(difficulty, seed=seed, rng=rng)
        return self.create_initial_state(generated.puzzle, generated.solution)

    def create_initial_state(
        self,
        puzzle: BoardLike,
        solution: Optional[BoardLike] = None,
    ) -> SudokuState:
        puzzle = _array(_grid(puzzle))
        if solution is None:
            solution = solve(puzzle)
            if solution is None:
                raise IllegalMove("The puzzle has no solution")
        return SudokuState(puzzle=puzzle, solution=np.asarray(solution, dtype=np.int8), work=puzzle.copy())

    def is_clue(self, state: SudokuState, row: int, col: int) -> bool:
        _require_cell(row, col)
        return state.puzzle[row, col] != 0

    def list_legal_moves(self, state: SudokuState, origin: Optional[Point] = None) -> List[CellEntry]:
        """Entries that do not conflict with the current work, for every editable empty cell (or just `origin`)."""
        if origin is not None:
            _require_cell(*origin)
        grid = state.work.tolist()
        cells = [Point(*origin)] if origin is not None else [
            Point(r, c) for r in range(SIZE) for c in range(SIZE)
        ]
        moves = []
        for p in cells:
            if state.puzzle[p.row, p.col] != 0 or grid[p.row][p.col] != 0:
                continue
            moves.extend(CellEntry(p.row, p.col, v) for v in DIGITS if is_valid_placement(grid, p.row, p.col, v))
        return moves

    def set_cell(self, state: SudokuState, row: int, col: int, value: int) -> SudokuState:
        """
        Write (or clear with 0) one cell of the working grid.

        Raises:
            OutOfBounds: (row, col) is off the grid.
            CellOccupied: the cell is a given clue.
            IllegalMove: value outside 0..9.
        """
        _require_cell(row, col)
        if state.puzzle[row, col] != 0:
            raise CellOccupied(f"Cell ({row},{col}) is a clue")
        if not 0 <= value <= 9:
            raise IllegalMove(f"Value must be 0-9, got {value}")
        work = state.work.copy()
        work[row, col] = value
        return SudokuState(puzzle=state.puzzle, solution=state.solution, work=work)

    def apply_move(self, state: SudokuState, move: CellEntry) -> SudokuState:
        return self.set_cell(state, move.row, move.col, move.value)

    def find_mistakes(self, state: SudokuState) -> List[Point]:
        """Filled cells whose digit repeats in their row, column or box."""
        grid = state.work.tolist()
        return [
            Point(r, c)
            for r in range(SIZE)
            for c in range(SIZE)
            if grid[r][c] != 0 and not is_valid_placement(grid, r, c, grid[r][c])
        ]

    def is_solved(self, state: SudokuState) -> bool:
        return boards_equal(state.work, state.solution)

    def digit_counts(self, state: SudokuState) -> List[int]:
        """counts[d] = how many times digit d (1-9) appears; counts[0] is unused."""
        counts = np.bincount(state.work.ravel().astype(np.intp), minlength=10)
        counts[0] = 0
        return [int(n) for n in counts[:10]]

    def get_status(self, state: SudokuState) -> SudokuStatus:
        return SudokuStatus.SOLVED if self.is_solved(state) else SudokuStatus.IN_PROGRESS

    def is_over(self, state: SudokuState) -> bool:
        return self.is_solved(state)

    def parse_move(self, state: SudokuState, text: str) -> CellEntry:
        """'row,col,value' (value 0 clears)."""
        r, c, v = parse_ints(text, 3)
        return CellEntry(r, c, v)

    def state_string(self, state: SudokuState) -> str:
        work = state.work
        lines = []
        for r in range(SIZE):
            if r and r % BOX == 0:
                lines.append("──────┼───────┼──────")
            chunks = []
            for bc in range(0, SIZE, BOX):
                chunks.append(" ".join(str(int(v)) if v else "." for v in work[r, bc:bc + BOX]))
            lines.append(" │ ".join(chunks))
        return "\n".join(lines)
