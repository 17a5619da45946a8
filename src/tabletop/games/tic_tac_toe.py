"""
TicTacToe (three-in-a-row) engine.

Uses int8 board:
    0 = empty
    1 = X
    2 = O
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np

from tabletop.core.errors import CellOccupied, IllegalMove, NotYourTurn
from tabletop.core.rng import Rng, create_rng
from tabletop.core.types import Difficulty, Point
from tabletop.games.game_rules import (
    board_full,
    empty_cells,
    parse_ints,
    require_in_bounds,
    winning_lines,
)
from tabletop.games.game_state import GameState

logger = logging.getLogger(__name__)

EMPTY = 0
X = 1
O = 2

# Cell strings: each cell value maps to its display string
CELL_STRINGS = {EMPTY: " ", X: "X", O: "O"}

# Pre-computed winning lines (indices into flattened 3x3 board)
_WIN_LINES = winning_lines(3)

# Centre, then corners, then edges
PREFERENCES = (
    Point(1, 1),
    Point(0, 0), Point(0, 2), Point(2, 0), Point(2, 2),
    Point(0, 1), Point(1, 0), Point(1, 2), Point(2, 1),
)

MEDIUM_BLOCK_CHANCE = 0.7
MEDIUM_TOP_CHOICES = 3
EASY_WIN_CHANCE = 0.3


class TicTacToeStatus(Enum):
    IN_PROGRESS = "in_progress"
    X_WINS = "x_wins"
    O_WINS = "o_wins"
    DRAW = "draw"


@dataclass(frozen=True)
class TicTacToeMove:
    row: int
    col: int
    player: int

    def __str__(self) -> str:
        return f"{self.row},{self.col}"


@dataclass(frozen=True, eq=False)
class TicTacToeState(GameState):
    pass


def other(player: int) -> int:
    return O if player == X else X


def compute_winner(board: np.ndarray) -> int:
    """Return X or O if either owns a full line, else EMPTY."""
    flat = board.ravel()
    for line in _WIN_LINES:
        v = flat[line[0]]
        if v != EMPTY and flat[line[1]] == v and flat[line[2]] == v:
            return int(v)
    return EMPTY


def board_status(board: np.ndarray) -> TicTacToeStatus:
    winner = compute_winner(board)
    if winner == X:
        return TicTacToeStatus.X_WINS
    if winner == O:
        return TicTacToeStatus.O_WINS
    return TicTacToeStatus.DRAW if board_full(board) else TicTacToeStatus.IN_PROGRESS


def find_immediate_win(board: np.ndarray, player: int) -> Optional[Point]:
    """First empty cell (row-major) that completes a line for `player`."""
    for pos in empty_cells(board):
        trial = board.copy()
        trial[pos.row, pos.col] = player
        if compute_winner(trial) == player:
            return pos
    return None


class TicTacToe:
    """Stateless three-in-a-row engine."""

    SIZE = 3

    def game_id(self) -> str:
        return "tic_tac_toe"

    def sides(self) -> tuple:
        return (X, O)

    def create_initial_state(self, starting_player: int = X) -> TicTacToeState:
        if starting_player not in (X, O):
            raise ValueError(f"Unknown player: {starting_player}")
        return TicTacToeState(np.zeros((3, 3), dtype=np.int8), current_player=starting_player)

    def current_side(self, state: TicTacToeState) -> int:
        return state.current_player

    def list_legal_moves(self, state: TicTacToeState, origin=None) -> List[TicTacToeMove]:
        """Empty cells for the side to move; nothing once the game is decided."""
        if self.is_over(state):
            return []
        return [TicTacToeMove(p.row, p.col, state.current_player) for p in empty_cells(state.board)]

    def apply_move(self, state: TicTacToeState, move: TicTacToeMove) -> TicTacToeState:
        """
        Place the mover's mark.

        Raises:
            IllegalMove: the game is already decided.
            OutOfBounds: the cell is off the board.
            NotYourTurn: `move.player` is not on turn.
            CellOccupied: the cell already has a mark.
        """
        if self.is_over(state):
            raise IllegalMove("The game is already over")
        require_in_bounds(state.board, move.row, move.col)
        if move.player != state.current_player:
            raise NotYourTurn(f"It is {CELL_STRINGS[state.current_player]}'s turn")
        if state.board[move.row, move.col] != EMPTY:
            raise CellOccupied(f"Cell ({move.row},{move.col}) is occupied")

        board = state.board.copy()
        board[move.row, move.col] = move.player
        return TicTacToeState(board, current_player=other(move.player))

    def get_status(self, state: TicTacToeState) -> TicTacToeStatus:
        return board_status(state.board)

    def is_over(self, state: TicTacToeState) -> bool:
        return self.get_status(state) is not TicTacToeStatus.IN_PROGRESS

    def choose_bot_move(
        self,
        state: TicTacToeState,
        bot_side: int,
        difficulty: Difficulty,
        rng: Optional[Rng] = None,
    ) -> Optional[TicTacToeMove]:
        if self.is_over(state) or state.current_player != bot_side:
            return None
        rng = rng or create_rng()
        pos = _choose_cell(state.board, bot_side, difficulty, rng)
        if pos is None:
            return None
        logger.debug("tic_tac_toe bot %s (%s) -> %s", CELL_STRINGS[bot_side], difficulty.value, pos)
        return TicTacToeMove(pos.row, pos.col, bot_side)

    def parse_move(self, state: TicTacToeState, text: str) -> TicTacToeMove:
        """'row,col' for the side to move."""
        r, c = parse_ints(text, 2)
        return TicTacToeMove(r, c, state.current_player)

    def state_string(self, state: TicTacToeState) -> str:
        board = state.board
        lines = ["╭───┬───┬───╮"]
        for i in range(3):
            row = "│ " + " │ ".join(CELL_STRINGS[board[i, j]] for j in range(3)) + " │"
            lines.append(row)
            if i < 2:
                lines.append("├───┼───┼───┤")
        lines.append("╰───┴───┴───╯")
        status = self.get_status(state)
        if status is TicTacToeStatus.IN_PROGRESS:
            lines.append(f"Turn: {CELL_STRINGS[state.current_player]}")
        elif status is TicTacToeStatus.DRAW:
            lines.append("Draw")
        else:
            lines.append(f"Winner: {CELL_STRINGS[compute_winner(board)]}")
        return "\n".join(lines)


def _preferred_empties(board: np.ndarray) -> List[Point]:
    return [p for p in PREFERENCES if board[p.row, p.col] == EMPTY]


def _choose_cell(board: np.ndarray, bot: int, difficulty: Difficulty, rng: Rng) -> Optional[Point]:
    win = find_immediate_win(board, bot)
    block = find_immediate_win(board, other(bot))

    if difficulty is Difficulty.HARD:
        if win:
            return win
        if block:
            return block
        preferred = _preferred_empties(board)
        return preferred[0] if preferred else None

    if difficulty is Difficulty.MEDIUM:
        if win:
            return win
        if block and rng.next() < MEDIUM_BLOCK_CHANCE:
            return block
        preferred = _preferred_empties(board)
        if preferred:
            return preferred[rng.next_int(min(len(preferred), MEDIUM_TOP_CHOICES))]
        return None

    # Easy: notices a win only some of the time
    if win and rng.next() < EASY_WIN_CHANCE:
        return win
    empties = empty_cells(board)
    if not empties:
        return None
    return empties[rng.next_int(len(empties))]
