"""
Checkers (8x8 draughts) engine.

Board encoding (int8):
    0 = empty
    Positive = red:   1 = man, 2 = king
    Negative = black: -1 = man, -2 = king

This allows fast ownership checks: piece > 0 -> red, piece < 0 -> black.
Pieces only ever stand on dark squares (row + col odd). Red moves first and
advances toward row 0; black advances toward row 7.

Search and move generation work on plain nested lists (`Grid`), which are much
faster to index than NumPy arrays one cell at a time. States store int8 arrays.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from tabletop.core.errors import IllegalMove, NotYourTurn
from tabletop.core.rng import Rng, create_rng
from tabletop.core.types import Difficulty, Point
from tabletop.games.game_rules import in_bounds, parse_ints, require_in_bounds
from tabletop.games.game_state import GameState
from tabletop.selection.search import SearchStats, alphabeta

logger = logging.getLogger(__name__)

Grid = List[List[int]]

SIZE = 8

EMPTY = 0
RED = 1
BLACK = -1
MAN = 1
KING = 2

SIDE_NAMES = {RED: "red", BLACK: "black"}

CELL_STRINGS = {0: ".", 1: "r", 2: "R", -1: "b", -2: "B"}

# Evaluation weights
WEIGHT_MAN = 1.0
WEIGHT_KING = 1.7
WEIGHT_ADVANCE = 0.05

WIN_SCORE = 10000
STUCK_SCORE = 9999
HARD_DEPTH = 4


class WinReason(Enum):
    NO_PIECES = "no_pieces"
    NO_MOVES = "no_moves"


@dataclass(frozen=True)
class CheckersMove:
    origin: Point
    target: Point
    captured: Optional[Point] = None

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    def __str__(self) -> str:
        sep = "x" if self.is_capture else "-"
        return f"{self.origin}{sep}{self.target}"


@dataclass(frozen=True, eq=False)
class CheckersState(GameState):
    winner: int = 0
    forced_from: Optional[Point] = None


@dataclass(frozen=True)
class CheckersStatus:
    """Status snapshot: `winner` is 0 while the game is in progress."""

    turn: int
    winner: int = 0
    reason: Optional[WinReason] = None
    forced_from: Optional[Point] = None

    @property
    def in_progress(self) -> bool:
        return self.winner == 0


def side_of(piece: int) -> int:
    return RED if piece > 0 else BLACK


def is_king(piece: int) -> bool:
    return abs(piece) == KING


def create_initial_board() -> np.ndarray:
    """Black men on rows 0-2, red men on rows 5-7, dark squares only."""
    board = np.zeros((SIZE, SIZE), dtype=np.int8)
    for r in range(SIZE):
        for c in range(SIZE):
            if (r + c) % 2 == 1:
                if r < 3:
                    board[r, c] = BLACK * MAN
                elif r >= 5:
                    board[r, c] = RED * MAN
    return board


# ---------------------------------------------------------------------------
# Grid-level rules (shared by the engine and the search)
# ---------------------------------------------------------------------------

def _row_steps(piece: int) -> Tuple[int, ...]:
    if is_king(piece):
        return (1, -1)
    return (-1,) if piece > 0 else (1,)


def piece_moves(grid: Sequence[Sequence[int]], origin: Point) -> List[CheckersMove]:
    """Simple advances then captures for the piece on `origin`, ignoring the mandatory-capture rule."""
    r, c = origin
    if not in_bounds(SIZE, SIZE, r, c):
        return []
    piece = grid[r][c]
    if piece == EMPTY:
        return []

    steps = _row_steps(piece)
    moves: List[CheckersMove] = []

    for dr in steps:
        for dc in (-1, 1):
            tr, tc = r + dr, c + dc
            if in_bounds(SIZE, SIZE, tr, tc) and grid[tr][tc] == EMPTY:
                moves.append(CheckersMove(origin, Point(tr, tc)))

    for dr in steps:
        for dc in (-1, 1):
            mr, mc = r + dr, c + dc
            tr, tc = r + 2 * dr, c + 2 * dc
            if not in_bounds(SIZE, SIZE, tr, tc):
                continue
            mid = grid[mr][mc]
            if mid != EMPTY and side_of(mid) != side_of(piece) and grid[tr][tc] == EMPTY:
                moves.append(CheckersMove(origin, Point(tr, tc), captured=Point(mr, mc)))

    return moves


def side_moves(
    grid: Sequence[Sequence[int]],
    side: int,
    forced_from: Optional[Point] = None,
) -> List[CheckersMove]:
    """
    All legal moves for `side`.

    A pending capture chain limits play to captures from `forced_from`.
    Otherwise, if any capture exists, only captures are legal.
    """
    if forced_from is not None:
        return [m for m in piece_moves(grid, forced_from) if m.is_capture]

    moves: List[CheckersMove] = []
    for r in range(SIZE):
        row = grid[r]
        for c in range(SIZE):
            p = row[c]
            if p != EMPTY and side_of(p) == side:
                moves.extend(piece_moves(grid, Point(r, c)))

    captures = [m for m in moves if m.is_capture]
    return captures if captures else moves


def apply_on_grid(grid: Sequence[Sequence[int]], move: CheckersMove) -> Tuple[Grid, bool]:
    """Return (new grid, crowned) after moving, capturing and promoting."""
    nxt = [list(row) for row in grid]
    (fr, fc), (tr, tc) = move.origin, move.target
    piece = nxt[fr][fc]
    nxt[fr][fc] = EMPTY
    nxt[tr][tc] = piece
    if move.captured is not None:
        nxt[move.captured.row][move.captured.col] = EMPTY

    crowned = False
    if abs(piece) == MAN:
        far_row = 0 if piece > 0 else SIZE - 1
        if tr == far_row:
            nxt[tr][tc] = side_of(piece) * KING
            crowned = True
    return nxt, crowned


def count_pieces(grid: Sequence[Sequence[int]]) -> Tuple[int, int]:
    """(red, black) piece counts."""
    red = black = 0
    for row in grid:
        for p in row:
            if p > 0:
                red += 1
            elif p < 0:
                black += 1
    return red, black


def compute_winner(grid: Sequence[Sequence[int]]) -> int:
    """Winner by elimination, or 0."""
    red, black = count_pieces(grid)
    if red == 0:
        return BLACK
    if black == 0:
        return RED
    return 0


def evaluate_board(grid: Sequence[Sequence[int]], perspective: int) -> float:
    """Material plus a small bonus per row advanced by men. Positive favours `perspective`."""
    red_score = black_score = 0.0
    for r, row in enumerate(grid):
        for p in row:
            if p == EMPTY:
                continue
            if p > 0:
                red_score += WEIGHT_KING if p == KING else WEIGHT_MAN + (SIZE - 1 - r) * WEIGHT_ADVANCE
            else:
                black_score += WEIGHT_KING if p == -KING else WEIGHT_MAN + r * WEIGHT_ADVANCE
    score = red_score - black_score
    return score if perspective == RED else -score


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

Node = Tuple[Grid, int, Optional[Point]]


class _CheckersSearch:
    """Minimax view of checkers from one side. Inner plies simply alternate sides."""

    def __init__(self, perspective: int):
        self.perspective = perspective

    def terminal_score(self, node: Node) -> Optional[float]:
        winner = compute_winner(node[0])
        if winner == 0:
            return None
        return WIN_SCORE if winner == self.perspective else -WIN_SCORE

    def evaluate(self, node: Node) -> float:
        return evaluate_board(node[0], self.perspective)

    def children(self, node: Node) -> Iterator[Tuple[CheckersMove, Node]]:
        grid, player, forced = node
        for move in side_moves(grid, player, forced):
            nxt, _ = apply_on_grid(grid, move)
            yield move, (nxt, -player, None)

    def dead_end_score(self, node: Node) -> float:
        return -STUCK_SCORE if node[1] == self.perspective else STUCK_SCORE


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class Checkers:
    """Stateless checkers engine with mandatory captures and capture chains."""

    SIZE = SIZE

    def game_id(self) -> str:
        return "checkers"

    def sides(self) -> tuple:
        return (RED, BLACK)

    def create_initial_state(self) -> CheckersState:
        return CheckersState(create_initial_board(), current_player=RED)

    def current_side(self, state: CheckersState) -> int:
        return state.current_player

    def list_legal_moves(self, state: CheckersState, origin: Optional[Point] = None) -> List[CheckersMove]:
        """
        Legal moves for the side to move.

        With `origin`, only the moves of that piece survive, still subject to
        the mandatory-capture rule and any pending capture chain.
        """
        if state.winner:
            return []
        moves = side_moves(state.board.tolist(), state.current_player, state.forced_from)
        if origin is not None:
            origin = Point(*origin)
            moves = [m for m in moves if m.origin == origin]
        return moves

    def apply_move(self, state: CheckersState, move: CheckersMove) -> CheckersState:
        """
        Play one step (a single jump of a chain counts as one move).

        Raises:
            IllegalMove: game over, empty origin, or a move the rules forbid.
            OutOfBounds: origin or target off the board.
            NotYourTurn: the origin holds an opponent piece.
        """
        if state.winner:
            raise IllegalMove("The game is already over")
        origin, target = Point(*move.origin), Point(*move.target)
        require_in_bounds(state.board, *origin)
        require_in_bounds(state.board, *target)

        piece = int(state.board[origin.row, origin.col])
        if piece == EMPTY:
            raise IllegalMove(f"No piece on {origin}")
        if side_of(piece) != state.current_player:
            raise NotYourTurn(f"It is {SIDE_NAMES[state.current_player]}'s turn")

        legal = next(
            (m for m in self.list_legal_moves(state, origin) if m.target == target),
            None,
        )
        if legal is None:
            if state.forced_from is not None and origin != state.forced_from:
                raise IllegalMove(f"The capture chain must continue from {state.forced_from}")
            raise IllegalMove(f"Illegal move {origin}->{target}")

        player = state.current_player
        grid, crowned = apply_on_grid(state.board.tolist(), legal)

        next_player = -player
        forced_from: Optional[Point] = None
        # A freshly crowned piece ends the turn even if more jumps exist
        if legal.is_capture and not crowned:
            if any(m.is_capture for m in piece_moves(grid, target)):
                next_player = player
                forced_from = target

        winner = compute_winner(grid)
        if not winner and forced_from is None and not side_moves(grid, next_player):
            winner = player

        return CheckersState(
            np.array(grid, dtype=np.int8),
            current_player=player if winner else next_player,
            winner=winner,
            forced_from=forced_from,
        )

    def get_status(self, state: CheckersState) -> CheckersStatus:
        if not state.winner:
            return CheckersStatus(turn=state.current_player, forced_from=state.forced_from)
        red, black = count_pieces(state.board.tolist())
        reason = WinReason.NO_PIECES if red == 0 or black == 0 else WinReason.NO_MOVES
        return CheckersStatus(turn=state.current_player, winner=state.winner, reason=reason)

    def is_over(self, state: CheckersState) -> bool:
        return state.winner != 0

    def choose_bot_move(
        self,
        state: CheckersState,
        bot_side: int,
        difficulty: Difficulty,
        rng: Optional[Rng] = None,
    ) -> Optional[CheckersMove]:
        if state.winner or state.current_player != bot_side:
            return None
        grid = state.board.tolist()
        moves = side_moves(grid, bot_side, state.forced_from)
        if not moves:
            return None

        if difficulty is Difficulty.EASY:
            rng = rng or create_rng()
            return moves[rng.next_int(len(moves))]

        if difficulty is Difficulty.MEDIUM:
            best, best_score = moves[0], -float("inf")
            for m in moves:
                score = evaluate_board(apply_on_grid(grid, m)[0], bot_side)
                if score > best_score:
                    best, best_score = m, score
            return best

        stats = SearchStats()
        score, best = alphabeta(
            _CheckersSearch(bot_side),
            (grid, bot_side, state.forced_from),
            HARD_DEPTH + 1,
            stats=stats,
        )
        logger.debug("checkers hard bot: %s score=%.2f nodes=%d", best, score, stats.nodes)
        return best if best is not None else moves[0]

    def parse_move(self, state: CheckersState, text: str) -> CheckersMove:
        """'from_row,from_col,to_row,to_col'."""
        fr, fc, tr, tc = parse_ints(text, 4)
        origin, target = Point(fr, fc), Point(tr, tc)
        for m in self.list_legal_moves(state, origin):
            if m.target == target:
                return m
        return CheckersMove(origin, target)

    def state_string(self, state: CheckersState) -> str:
        board = state.board
        lines = ["    " + " ".join(str(c) for c in range(SIZE))]
        for r in range(SIZE):
            cells = []
            for c in range(SIZE):
                v = int(board[r, c])
                cells.append(CELL_STRINGS[v] if (r + c) % 2 == 1 else " ")
            lines.append(f"{r} │ " + " ".join(cells))
        status = f"Turn: {SIDE_NAMES[state.current_player]}"
        if state.forced_from is not None:
            status += f" (continue capturing from {state.forced_from})"
        if state.winner:
            status = f"Winner: {SIDE_NAMES[state.winner]}"
        lines.append("\n" + status)
        return "\n".join(lines)
