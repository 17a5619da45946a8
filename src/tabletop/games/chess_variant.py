"""
Chess, with move generation and rule checks delegated to python-chess.

The state is nothing more than a FEN string. This module restores a
``chess.Board`` from it, turns human and bot moves into new FENs, classifies
the position, and supplies the bot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

import chess

from tabletop.core.errors import IllegalMove
from tabletop.core.rng import Rng, create_rng
from tabletop.core.types import Difficulty
from tabletop.selection.search import SearchStats, alphabeta

logger = logging.getLogger(__name__)

PIECE_VALUES = {
    chess.PAWN: 100,
    chess.KNIGHT: 320,
    chess.BISHOP: 330,
    chess.ROOK: 500,
    chess.QUEEN: 900,
    chess.KING: 0,
}
MOBILITY_WEIGHT = 2

MATE_SCORE = 1_000_000
DRAW_SCORE = 0
HARD_DEPTH = 3

# A position is drawn by the fifty-move rule once 100 half-moves pass without
# a capture or pawn move
FIFTY_MOVE_PLIES = 100

SIDE_NAMES = {chess.WHITE: "white", chess.BLACK: "black"}

SquareLike = Union[int, str]


@dataclass(frozen=True)
class ChessState:
    fen: str = chess.STARTING_FEN


@dataclass(frozen=True)
class ChessMove:
    from_square: int
    to_square: int
    promotion: Optional[int] = None

    def to_move(self) -> chess.Move:
        return chess.Move(self.from_square, self.to_square, self.promotion)

    @classmethod
    def from_move(cls, move: chess.Move) -> "ChessMove":
        return cls(move.from_square, move.to_square, move.promotion)

    def __str__(self) -> str:
        return self.to_move().uci()


class DrawReason(Enum):
    STALEMATE = "stalemate"
    INSUFFICIENT = "insufficient"
    REPETITION = "repetition"
    FIFTY_MOVE = "fifty_move"
    OTHER = "other"


@dataclass(frozen=True)
class InProgress:
    turn: chess.Color
    in_check: bool = False


@dataclass(frozen=True)
class Checkmate:
    winner: chess.Color


@dataclass(frozen=True)
class Draw:
    reason: DrawReason


ChessStatus = Union[InProgress, Checkmate, Draw]


def load_position(fen: str) -> chess.Board:
    """Board for `fen`. A malformed FEN raises IllegalMove."""
    try:
        return chess.Board(fen)
    except ValueError as e:
        raise IllegalMove(f"Invalid FEN: {fen!r}") from e


def _square(square: SquareLike) -> int:
    if isinstance(square, str):
        try:
            return chess.parse_square(square.strip().lower())
        except ValueError as e:
            raise IllegalMove(f"Unknown square: {square!r}") from e
    return square


def draw_reason(board: chess.Board) -> Optional[DrawReason]:
    """Why the position is drawn, or None if it is not."""
    if board.is_stalemate():
        return DrawReason.STALEMATE
    if board.is_insufficient_material():
        return DrawReason.INSUFFICIENT
    if board.is_repetition(3):
        return DrawReason.REPETITION
    if board.halfmove_clock >= FIFTY_MOVE_PLIES:
        return DrawReason.FIFTY_MOVE
    if board.is_game_over():
        return DrawReason.OTHER
    return None


def is_finished(board: chess.Board) -> bool:
    return board.is_game_over() or draw_reason(board) is not None


def board_status(board: chess.Board) -> ChessStatus:
    if board.is_checkmate():
        return Checkmate(winner=not board.turn)
    reason = draw_reason(board)
    if reason is not None:
        return Draw(reason)
    return InProgress(turn=board.turn, in_check=board.is_check())


def evaluate_board(board: chess.Board, perspective: chess.Color) -> int:
    """Material from `perspective`, plus a bonus per legal move of the side to move."""
    score = 0
    for piece in board.piece_map().values():
        value = PIECE_VALUES[piece.piece_type]
        score += value if piece.color == perspective else -value
    return score + MOBILITY_WEIGHT * board.legal_moves.count()


class _ChessSearch:
    """Minimax view of a position from one colour; nodes are boards."""

    def __init__(self, perspective: chess.Color):
        self.perspective = perspective

    def terminal_score(self, board: chess.Board) -> Optional[float]:
        if board.is_checkmate():
            return -MATE_SCORE if board.turn == self.perspective else MATE_SCORE
        if draw_reason(board) is not None:
            return DRAW_SCORE
        return None

    def evaluate(self, board: chess.Board) -> float:
        return evaluate_board(board, self.perspective)

    def children(self, board: chess.Board) -> Iterator[Tuple[chess.Move, chess.Board]]:
        for move in list(board.legal_moves):
            child = board.copy()
            child.push(move)
            yield move, child

    def dead_end_score(self, board: chess.Board) -> float:
        return self.evaluate(board)


class ChessVariant:
    """Stateless chess engine over FEN strings."""

    def game_id(self) -> str:
        return "chess"

    def sides(self) -> tuple:
        return (chess.WHITE, chess.BLACK)

    def create_initial_state(self, fen: str = chess.STARTING_FEN) -> ChessState:
        return ChessState(load_position(fen).fen())

    def current_side(self, state: ChessState) -> chess.Color:
        return load_position(state.fen).turn

    def list_legal_moves(self, state: ChessState, square: Optional[SquareLike] = None) -> List[ChessMove]:
        """Legal moves for the side to move, optionally only those leaving `square`."""
        board = load_position(state.fen)
        origin = _square(square) if square is not None else None
        return [
            ChessMove.from_move(m)
            for m in board.legal_moves
            if origin is None or m.from_square == origin
        ]

    def apply_move(self, state: ChessState, move: ChessMove) -> ChessState:
        """
        Play `move`. A pawn reaching the last rank becomes a queen unless
        another promotion piece is given.

        Raises:
            IllegalMove: the game is over or the move is not legal here.
        """
        board = load_position(state.fen)
        if is_finished(board):
            raise IllegalMove("The game is already over")

        promotion = move.promotion
        piece = board.piece_at(move.from_square)
        if (
            promotion is None
            and piece is not None
            and piece.piece_type == chess.PAWN
            and chess.square_rank(move.to_square) in (0, 7)
        ):
            promotion = chess.QUEEN

        candidate = chess.Move(move.from_square, move.to_square, promotion)
        if candidate not in board.legal_moves:
            raise IllegalMove(f"Illegal move: {candidate.uci()}")
        board.push(candidate)
        return ChessState(board.fen())

    def get_status(self, state: ChessState) -> ChessStatus:
        return board_status(load_position(state.fen))

    def is_over(self, state: ChessState) -> bool:
        return not isinstance(self.get_status(state), InProgress)

    def evaluate(self, state: ChessState, perspective: chess.Color) -> int:
        return evaluate_board(load_position(state.fen), perspective)

    def choose_bot_move(
        self,
        state: ChessState,
        bot_side: chess.Color,
        difficulty: Difficulty,
        rng: Optional[Rng] = None,
    ) -> Optional[ChessMove]:
        board = load_position(state.fen)
        if board.turn != bot_side or is_finished(board):
            return None
        moves = list(board.legal_moves)

        if difficulty is Difficulty.EASY:
            rng = rng or create_rng()
            return ChessMove.from_move(rng.pick(moves))

        if difficulty is Difficulty.MEDIUM:
            best, best_score = None, None
            for move in moves:
                board.push(move)
                score = evaluate_board(board, bot_side)
                board.pop()
                if best_score is None or score > best_score:
                    best, best_score = move, score
            logger.debug("chess medium bot: %s score=%d", best, best_score)
            return ChessMove.from_move(best)

        stats = SearchStats()
        score, best = alphabeta(_ChessSearch(bot_side), board, HARD_DEPTH, stats=stats)
        logger.debug("chess hard bot: %s score=%s nodes=%d", best, score, stats.nodes)
        if best is None:
            return None
        return ChessMove.from_move(best)

    def parse_move(self, state: ChessState, text: str) -> ChessMove:
        """UCI text such as 'e2e4' or 'e7e8n'."""
        try:
            move = chess.Move.from_uci(text.strip().lower())
        except ValueError as e:
            raise IllegalMove(f"Expected a move like e2e4, got {text!r}") from e
        return ChessMove.from_move(move)

    def state_string(self, state: ChessState) -> str:
        board = load_position(state.fen)
        status = self.get_status(state)
        if isinstance(status, Checkmate):
            line = f"Checkmate, {SIDE_NAMES[status.winner]} wins"
        elif isinstance(status, Draw):
            line = f"Draw ({status.reason.value})"
        else:
            line = f"Turn: {SIDE_NAMES[status.turn]}" + ("  (check)" if status.in_check else "")
        return f"{board.unicode(empty_square='·')}\n\n{line}"
