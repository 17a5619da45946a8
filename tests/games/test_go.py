"""
Tests for tabletop.games.go

Captures, suicide, simple ko, passing, area scoring and the bots.
"""

import numpy as np
import pytest

from tabletop.core.errors import CellOccupied, IllegalMove, KoViolation, OutOfBounds, Suicide
from tabletop.core.rng import create_rng
from tabletop.core.types import Difficulty, Point
from tabletop.games.go import (
    BLACK,
    EMPTY,
    WHITE,
    Go,
    GoEndReason,
    GoMove,
    GoState,
    Score,
    find_group,
    score_board,
)


def state_with(black=(), white=(), to_move=BLACK) -> GoState:
    board = np.zeros((9, 9), dtype=np.int8)
    for r, c in black:
        board[r, c] = BLACK
    for r, c in white:
        board[r, c] = WHITE
    return GoState(board, current_player=to_move)


# Black to play (1,2) and capture the white stone on (1,1)
KO_BLACK = [(0, 1), (1, 0), (2, 1)]
KO_WHITE = [(0, 2), (1, 1), (1, 3), (2, 2)]


class TestInitialState:
    """Empty board and opening moves."""

    def test_empty_board(self, go_engine: Go):
        """Black moves first on an empty 9x9 board."""
        state = go_engine.create_initial_state()
        assert state.board.shape == (9, 9)
        assert np.all(state.board == EMPTY)
        assert state.current_player == BLACK
        assert state.consecutive_passes == 0

    def test_every_point_plus_pass(self, go_engine: Go):
        """Every point is playable, and pass comes last."""
        moves = go_engine.list_legal_moves(go_engine.create_initial_state())
        assert len(moves) == 82
        assert moves[-1].is_pass


class TestGroups:
    """Group and liberty discovery."""

    def test_group_and_liberties(self):
        """Connected stones share their liberties."""
        grid = state_with(black=[(0, 0), (0, 1)], white=[(1, 0)]).board.tolist()
        group = find_group(grid, Point(0, 0))
        assert group.stones == {Point(0, 0), Point(0, 1)}
        assert group.liberties == {Point(0, 2), Point(1, 1)}

    def test_empty_point_has_no_group(self):
        """An empty point belongs to no group."""
        grid = state_with().board.tolist()
        assert not find_group(grid, Point(4, 4)).stones


class TestPlacement:
    """Placement rules: captures, suicide and bounds."""

    def test_place_switches_turn(self, go_engine: Go):
        """A placement passes the turn."""
        state = go_engine.apply_move(go_engine.create_initial_state(), GoMove.place(4, 4))
        assert state.board[4, 4] == BLACK
        assert state.current_player == WHITE

    def test_capture_corner_stone(self, go_engine: Go):
        """A stone without liberties is removed."""
        state = state_with(black=[(0, 1)], white=[(0, 0)])
        after = go_engine.apply_move(state, GoMove.place(1, 0))
        assert after.board[0, 0] == EMPTY

    def test_capture_before_suicide_check(self, go_engine: Go):
        """A stone with no liberties of its own is legal when it captures."""
        state = state_with(black=KO_BLACK, white=KO_WHITE)
        after = go_engine.apply_move(state, GoMove.place(1, 2))
        assert after.board[1, 1] == EMPTY
        assert after.board[1, 2] == BLACK

    def test_suicide(self, go_engine: Go):
        """A lone stone with no liberties is refused."""
        state = state_with(black=[(0, 1), (1, 0)], to_move=WHITE)
        with pytest.raises(Suicide):
            go_engine.apply_move(state, GoMove.place(0, 0))

    def test_group_suicide(self, go_engine: Go):
        """Filling the last liberty of one's own group is suicide too."""
        state = state_with(black=[(0, 2), (1, 1), (2, 0)], white=[(0, 0), (1, 0)], to_move=WHITE)
        with pytest.raises(Suicide):
            go_engine.apply_move(state, GoMove.place(0, 1))

    def test_occupied(self, go_engine: Go):
        """Occupied points raise CellOccupied."""
        state = go_engine.apply_move(go_engine.create_initial_state(), GoMove.place(4, 4))
        with pytest.raises(CellOccupied):
            go_engine.apply_move(state, GoMove.place(4, 4))

    @pytest.mark.parametrize("row,col", [(-1, 0), (9, 0), (0, 9)])
    def test_out_of_bounds(self, go_engine: Go, row, col):
        """Points off the board raise OutOfBounds."""
        with pytest.raises(OutOfBounds):
            go_engine.apply_move(go_engine.create_initial_state(), GoMove.place(row, col))

    def test_illegal_points_not_listed(self, go_engine: Go):
        """Suicide points are not offered as moves."""
        state = state_with(black=[(0, 1), (1, 0)], to_move=WHITE)
        moves = go_engine.list_legal_moves(state)
        assert GoMove.place(0, 0) not in moves
        assert not go_engine.is_legal_placement(state, 0, 0)


class TestKo:
    """Simple ko."""

    def test_immediate_recapture_forbidden(self, go_engine: Go):
        """Retaking the ko at once raises KoViolation."""
        state = state_with(black=KO_BLACK, white=KO_WHITE)
        after = go_engine.apply_move(state, GoMove.place(1, 2))
        with pytest.raises(KoViolation):
            go_engine.apply_move(after, GoMove.place(1, 1))

    def test_recapture_allowed_after_exchange(self, go_engine: Go):
        """Only the position right before the opponent's last move is forbidden."""
        state = state_with(black=KO_BLACK, white=KO_WHITE)
        s = go_engine.apply_move(state, GoMove.place(1, 2))
        s = go_engine.apply_move(s, GoMove.place(8, 8))
        s = go_engine.apply_move(s, GoMove.place(7, 7))
        s = go_engine.apply_move(s, GoMove.place(1, 1))
        assert s.board[1, 2] == EMPTY
        assert s.board[1, 1] == WHITE

    def test_ko_on_read_only_wide_board(self, go_engine: Go):
        """The ko reference survives a starting board given as a frozen int64 array."""
        base = state_with(black=KO_BLACK, white=KO_WHITE).board.astype(np.int64)
        base.flags.writeable = False
        state = GoState(base, current_player=BLACK)
        after = go_engine.apply_move(state, GoMove.place(1, 2))
        with pytest.raises(KoViolation):
            go_engine.apply_move(after, GoMove.place(1, 1))


class TestPassing:
    """Passing and the end of the game."""

    def test_pass_switches_turn(self, go_engine: Go):
        """A pass counts and passes the turn."""
        state = go_engine.apply_move(go_engine.create_initial_state(), GoMove.pass_turn())
        assert state.current_player == WHITE
        assert state.consecutive_passes == 1
        assert not go_engine.is_over(state)

    def test_placement_resets_counter(self, go_engine: Go):
        """A placement clears the pass counter."""
        s = go_engine.apply_move(go_engine.create_initial_state(), GoMove.pass_turn())
        s = go_engine.apply_move(s, GoMove.place(3, 3))
        assert s.consecutive_passes == 0

    def test_two_passes_end_with_tie(self, go_engine: Go):
        """Two passes end the game; an even score has no winner."""
        s = go_engine.apply_move(go_engine.create_initial_state(), GoMove.pass_turn())
        s = go_engine.apply_move(s, GoMove.pass_turn())
        status = go_engine.get_status(s)
        assert go_engine.is_over(s)
        assert status.over
        assert status.reason is GoEndReason.TWO_PASSES
        assert status.score == Score(0, 0)
        assert status.winner is None

    def test_winner_after_passes(self, go_engine: Go):
        """The larger area wins."""
        s = go_engine.apply_move(go_engine.create_initial_state(), GoMove.place(4, 4))
        s = go_engine.apply_move(s, GoMove.pass_turn())
        s = go_engine.apply_move(s, GoMove.pass_turn())
        assert go_engine.get_status(s).winner == BLACK

    def test_no_moves_after_end(self, go_engine: Go):
        """A finished game has no moves and rejects new ones."""
        s = go_engine.apply_move(go_engine.create_initial_state(), GoMove.pass_turn())
        s = go_engine.apply_move(s, GoMove.pass_turn())
        assert go_engine.list_legal_moves(s) == []
        with pytest.raises(IllegalMove):
            go_engine.apply_move(s, GoMove.place(0, 0))


class TestScoring:
    """Area scoring."""

    def test_single_stone_owns_board(self):
        """A lone stone owns every empty point."""
        assert score_board(state_with(black=[(4, 4)]).board) == Score(81, 0)

    def test_shared_region_is_neutral(self):
        """A region touching both colours counts for nobody."""
        assert score_board(state_with(black=[(0, 0)], white=[(8, 8)]).board) == Score(1, 1)

    def test_walled_territory(self):
        """A column wall splits the board into two owned regions."""
        black = [(r, 3) for r in range(9)]
        white = [(r, 4) for r in range(9)]
        assert score_board(state_with(black=black, white=white).board) == Score(36, 45)


class TestLibertiesProperty:
    """No placement ever leaves the mover's own group without liberties."""

    @pytest.mark.parametrize("seed", range(6))
    def test_random_playouts(self, go_engine: Go, seed):
        """Random placements keep every group of the mover alive."""
        rng = create_rng(seed)
        state = go_engine.create_initial_state()
        for _ in range(80):
            if go_engine.is_over(state):
                break
            mover = state.current_player
            move = go_engine.choose_bot_move(state, mover, Difficulty.EASY, rng)
            state = go_engine.apply_move(state, move)
            grid = state.board.tolist()
            for r in range(9):
                for c in range(9):
                    if grid[r][c] == mover:
                        assert find_group(grid, Point(r, c)).liberties


class TestBots:
    """Bot move selection per difficulty."""

    def test_none_when_over_or_not_turn(self, go_engine: Go):
        """The bot stays silent off turn and after the game."""
        start = go_engine.create_initial_state()
        assert go_engine.choose_bot_move(start, WHITE, Difficulty.EASY) is None
        s = go_engine.apply_move(start, GoMove.pass_turn())
        s = go_engine.apply_move(s, GoMove.pass_turn())
        assert go_engine.choose_bot_move(s, BLACK, Difficulty.EASY) is None

    def test_easy_plays_legal_placement(self, go_engine: Go):
        """Easy picks a legal placement, not a pass."""
        state = go_engine.create_initial_state()
        legal = go_engine.list_legal_moves(state)
        for seed in range(5):
            move = go_engine.choose_bot_move(state, BLACK, Difficulty.EASY, create_rng(seed))
            assert move in legal
            assert not move.is_pass

    def test_medium_takes_capture(self, go_engine: Go):
        """Medium plays the capturing point."""
        state = state_with(black=[(0, 1)], white=[(0, 0)])
        move = go_engine.choose_bot_move(state, BLACK, Difficulty.MEDIUM, create_rng(1))
        assert move == GoMove.place(1, 0)

    def test_hard_improves_score(self, go_engine: Go):
        """Hard picks a placement that gains area."""
        state = go_engine.create_initial_state()
        move = go_engine.choose_bot_move(state, BLACK, Difficulty.HARD)
        assert not move.is_pass
        after = go_engine.apply_move(state, move)
        assert go_engine.evaluate(after.board, BLACK) > 0

    def test_hard_passes_when_nothing_helps(self, go_engine: Go):
        """Owning the whole board already, no placement can raise the differential."""
        state = state_with(black=[(4, 4)])
        assert go_engine.choose_bot_move(state, BLACK, Difficulty.HARD).is_pass


class TestParsing:
    """Text input and rendering."""

    def test_parse(self, go_engine: Go):
        """'pass' and 'row,col' parse to moves."""
        state = go_engine.create_initial_state()
        assert go_engine.parse_move(state, "pass").is_pass
        assert go_engine.parse_move(state, "3,4") == GoMove.place(3, 4)

    def test_state_string_reports_result(self, go_engine: Go):
        """A tied finished game says so."""
        s = go_engine.apply_move(go_engine.create_initial_state(), GoMove.pass_turn())
        s = go_engine.apply_move(s, GoMove.pass_turn())
        assert "Tie" in go_engine.state_string(s)
