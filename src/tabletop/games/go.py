"""
Territory game on a fixed 9x9 grid (simplified Go).

Uses int8 board:
    0 = empty
    1 = black (moves first)
    2 = white

Rules implemented:
    - captures of adjacent opponent groups left without liberties
    - no suicide (checked after captures)
    - simple ko: a placement may not recreate the board as it stood right
      before the opponent's last move. This is NOT positional superko.
    - two consecutive passes end the game
    - area scoring: stones + empty regions bordered by one colour only
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from tabletop.core.errors import CellOccupied, GameError, IllegalMove, KoViolation, Suicide
from tabletop.core.hashing import hash_board
from tabletop.core.rng import Rng, create_rng
from tabletop.core.types import Difficulty, Point
from tabletop.games.game_rules import orthogonal_neighbors, parse_ints, require_in_bounds
from tabletop.games.game_state import GameState

logger = logging.getLogger(__name__)

Grid = List[List[int]]

SIZE = 9

EMPTY = 0
BLACK = 1
WHITE = 2

SIDE_NAMES = {BLACK: "black", WHITE: "white"}
CELL_STRINGS = {EMPTY: "·", BLACK: "●", WHITE: "○"}

PASSES_TO_END = 2


class GoMove(NamedTuple):
    row: int = -1
    col: int = -1
    is_pass: bool = False

    @classmethod
    def place(cls, row: int, col: int) -> "GoMove":
        return cls(row, col, False)

    @classmethod
    def pass_turn(cls) -> "GoMove":
        return cls(-1, -1, True)

    def __str__(self) -> str:
        return "pass" if self.is_pass else f"{self.row},{self.col}"


@dataclass(frozen=True, eq=False)
class GoState(GameState):
    consecutive_passes: int = 0
    # Hash of the board before the last move; the ko reference for the side to move
    ko_hash: Optional[str] = None


class Score(NamedTuple):
    black: int
    white: int

    def for_side(self, color: int) -> int:
        return self.black if color == BLACK else self.white


class GoEndReason(Enum):
    TWO_PASSES = "two_passes"


@dataclass(frozen=True)
class GoStatus:
    turn: int
    over: bool = False
    reason: Optional[GoEndReason] = None
    score: Optional[Score] = None
    # None on a tie or while in progress
    winner: Optional[int] = None


@dataclass(frozen=True)
class Group:
    stones: FrozenSet[Point] = field(default_factory=frozenset)
    liberties: FrozenSet[Point] = field(default_factory=frozenset)


class Placement(NamedTuple):
    grid: Grid
    captured: int
    suicide: bool


def other(color: int) -> int:
    return WHITE if color == BLACK else BLACK


# ---------------------------------------------------------------------------
# Board rules
# ---------------------------------------------------------------------------

def find_group(grid: Sequence[Sequence[int]], start: Point) -> Group:
    """Connected same-colour stones containing `start` and their liberties."""
    size = len(grid)
    color = grid[start[0]][start[1]]
    if color == EMPTY:
        return Group()

    stones = set()
    liberties = set()
    stack = [Point(*start)]
    while stack:
        p = stack.pop()
        if p in stones:
            continue
        stones.add(p)
        for n in orthogonal_neighbors(size, p.row, p.col):
            v = grid[n.row][n.col]
            if v == EMPTY:
                liberties.add(n)
            elif v == color and n not in stones:
                stack.append(n)
    return Group(frozenset(stones), frozenset(liberties))


def place_stone(grid: Sequence[Sequence[int]], row: int, col: int, color: int) -> Placement:
    """
    Put a stone on an empty point, remove captured opponent groups, then test for suicide.

    The input grid is not modified.
    """
    size = len(grid)
    nxt = [list(r) for r in grid]
    nxt[row][col] = color

    opponent = other(color)
    captured = 0
    seen = set()
    for n in orthogonal_neighbors(size, row, col):
        if nxt[n.row][n.col] != opponent or n in seen:
            continue
        group = find_group(nxt, n)
        seen |= group.stones
        if not group.liberties:
            captured += len(group.stones)
            for s in group.stones:
                nxt[s.row][s.col] = EMPTY

    suicide = not find_group(nxt, Point(row, col)).liberties
    return Placement(nxt, captured, suicide)


def score_board(board: "np.ndarray | Sequence[Sequence[int]]") -> Score:
    """Stones on the board plus territory fully enclosed by a single colour."""
    grid = board.tolist() if isinstance(board, np.ndarray) else board
    size = len(grid)
    stones = {BLACK: 0, WHITE: 0}
    territory = {BLACK: 0, WHITE: 0}

    for row in grid:
        for v in row:
            if v != EMPTY:
                stones[v] += 1

    visited = [[False] * size for _ in range(size)]
    for r in range(size):
        for c in range(size):
            if visited[r][c] or grid[r][c] != EMPTY:
                continue
            visited[r][c] = True
            stack = [Point(r, c)]
            region = 0
            borders = set()
            while stack:
                p = stack.pop()
                region += 1
                for n in orthogonal_neighbors(size, p.row, p.col):
                    v = grid[n.row][n.col]
                    if v == EMPTY:
                        if not visited[n.row][n.col]:
                            visited[n.row][n.col] = True
                            stack.append(n)
                    else:
                        borders.add(v)
            if len(borders) == 1:
                territory[borders.pop()] += region

    return Score(stones[BLACK] + territory[BLACK], stones[WHITE] + territory[WHITE])


def _to_array(grid: Grid) -> np.ndarray:
    return np.array(grid, dtype=np.int8)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class Go:
    """Stateless 9x9 territory engine."""

    SIZE = SIZE

    def game_id(self) -> str:
        return "go"

    def sides(self) -> tuple:
        return (BLACK, WHITE)

    def create_initial_state(self) -> GoState:
        return GoState(np.zeros((SIZE, SIZE), dtype=np.int8), current_player=BLACK)

    def current_side(self, state: GoState) -> int:
        return state.current_player

    def is_over(self, state: GoState) -> bool:
        return state.consecutive_passes >= PASSES_TO_END

    def _resolve(self, state: GoState, row: int, col: int, color: int) -> Placement:
        """Validate a placement and return its outcome, raising on any rule breach."""
        require_in_bounds(state.board, row, col)
        if state.board[row, col] != EMPTY:
            raise CellOccupied(f"Point ({row},{col}) is occupied")
        placement = place_stone(state.board.tolist(), row, col, color)
        if placement.suicide:
            raise Suicide(f"Placing at ({row},{col}) would leave the group without liberties")
        if state.ko_hash is not None and hash_board(_to_array(placement.grid)) == state.ko_hash:
            raise KoViolation(f"Placing at ({row},{col}) repeats the previous position")
        return placement

    def is_legal_placement(self, state: GoState, row: int, col: int) -> bool:
        try:
            self._resolve(state, row, col, state.current_player)
        except GameError:
            return False
        return True

    def _legal_placements(self, state: GoState) -> List[Tuple[GoMove, Placement]]:
        out = []
        for r in range(SIZE):
            for c in range(SIZE):
                if state.board[r, c] != EMPTY:
                    continue
                try:
                    out.append((GoMove.place(r, c), self._resolve(state, r, c, state.current_player)))
                except GameError:
                    continue
        return out

    def list_legal_moves(self, state: GoState, origin=None) -> List[GoMove]:
        """Every legal placement (row-major) followed by the pass move."""
        if self.is_over(state):
            return []
        moves = [move for move, _ in self._legal_placements(state)]
        moves.append(GoMove.pass_turn())
        return moves

    def apply_move(self, state: GoState, move: GoMove) -> GoState:
        """
        Place a stone or pass.

        Raises:
            IllegalMove: the game has ended.
            OutOfBounds, CellOccupied, Suicide, KoViolation: bad placement.
        """
        if self.is_over(state):
            raise IllegalMove("The game is already over")

        before = state.board_hash()
        if move.is_pass:
            return GoState(
                state.board,
                current_player=other(state.current_player),
                consecutive_passes=state.consecutive_passes + 1,
                ko_hash=before,
            )

        placement = self._resolve(state, move.row, move.col, state.current_player)
        return GoState(
            _to_array(placement.grid),
            current_player=other(state.current_player),
            consecutive_passes=0,
            ko_hash=before,
        )

    def get_status(self, state: GoState) -> GoStatus:
        if not self.is_over(state):
            return GoStatus(turn=state.current_player)
        score = score_board(state.board)
        winner = None
        if score.black > score.white:
            winner = BLACK
        elif score.white > score.black:
            winner = WHITE
        return GoStatus(
            turn=state.current_player,
            over=True,
            reason=GoEndReason.TWO_PASSES,
            score=score,
            winner=winner,
        )

    def evaluate(self, board: "np.ndarray | Grid", perspective: int) -> int:
        """Score differential (stones + territory) in favour of `perspective`."""
        s = score_board(board)
        diff = s.black - s.white
        return diff if perspective == BLACK else -diff

    def choose_bot_move(
        self,
        state: GoState,
        bot_side: int,
        difficulty: Difficulty,
        rng: Optional[Rng] = None,
    ) -> Optional[GoMove]:
        if self.is_over(state) or state.current_player != bot_side:
            return None

        placements = self._legal_placements(state)
        if not placements:
            return GoMove.pass_turn()

        if difficulty is Difficulty.EASY:
            rng = rng or create_rng()
            return placements[rng.next_int(len(placements))][0]

        if difficulty is Difficulty.MEDIUM:
            rng = rng or create_rng()
            most = max(p.captured for _, p in placements)
            best = [m for m, p in placements if p.captured == most]
            choice = rng.pick(best)
            logger.debug("go medium bot: %s captures=%d (of %d best)", choice, most, len(best))
            return choice

        baseline = self.evaluate(state.board, bot_side)
        best_move, best_score = None, baseline
        for move, placement in placements:
            score = self.evaluate(placement.grid, bot_side)
            if score > best_score:
                best_move, best_score = move, score
        if best_move is None:
            logger.debug("go hard bot: nothing beats %d, passing", baseline)
            return GoMove.pass_turn()
        logger.debug("go hard bot: %s diff=%d (was %d)", best_move, best_score, baseline)
        return best_move

    def parse_move(self, state: GoState, text: str) -> GoMove:
        """'row,col' or 'pass'."""
        if text.strip().lower() == "pass":
            return GoMove.pass_turn()
        r, c = parse_ints(text, 2)
        return GoMove.place(r, c)

    def state_string(self, state: GoState) -> str:
        board = state.board
        lines = ["  " + " ".join(str(c) for c in range(SIZE))]
        for r in range(SIZE):
            lines.append(f"{r} " + " ".join(CELL_STRINGS[int(v)] for v in board[r]))
        s = score_board(board)
        if self.is_over(state):
            winner = self.get_status(state).winner
            result = "Tie" if winner is None else f"Winner: {SIDE_NAMES[winner]}"
            lines.append(f"\nGame over. {result}  Score: B {s.black} / W {s.white}")
            return "\n".join(lines)
        lines.append(
            f"\nTurn: {SIDE_NAMES[state.current_player]}  "
            f"Passes: {state.consecutive_passes}  Score: B {s.black} / W {s.white}"
        )
        return "\n".join(lines)
