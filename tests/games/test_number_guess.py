"""
Tests for tabletop.games.number_guess

Feedback, trends, scoring and the persisted best score.
"""

import pytest

from tabletop.core.errors import IllegalMove, OutOfBounds
from tabletop.core.rng import create_rng
from tabletop.core.types import Difficulty
from tabletop.games.number_guess import (
    BEST_SCORE_KEY,
    GuessOutcome,
    NumberGuess,
    NumberGuessState,
    Range,
    Trend,
    compute_score,
    difficulty_bonus,
    parse_guess,
    range_for,
)
from tabletop.storage.kv_store import MemoryStore


def round_with(secret: int, difficulty: Difficulty = Difficulty.MEDIUM) -> NumberGuessState:
    return NumberGuessState(difficulty, range_for(difficulty), secret)


class TestRanges:

    @pytest.mark.parametrize("difficulty,high", [
        (Difficulty.EASY, 50),
        (Difficulty.MEDIUM, 100),
        (Difficulty.HARD, 500),
    ])
    def test_range_per_difficulty(self, difficulty, high):
        assert range_for(difficulty) == Range(1, high)

    def test_accepts_names(self):
        assert range_for("hard") == Range(1, 500)

    def test_range_helpers(self):
        r = Range(1, 100)
        assert r.size == 100
        assert 1 in r and 100 in r
        assert 0 not in r and 101 not in r
        assert str(r) == "1-100"


class TestScoring:

    def test_bonus_grows_with_range(self):
        assert difficulty_bonus(Range(1, 50)) == 5
        assert difficulty_bonus(Range(1, 100)) == 6
        assert difficulty_bonus(Range(1, 500)) == 8

    def test_score(self):
        assert compute_score(3, Range(1, 100)) == 294
        assert compute_score(1, Range(1, 500)) == 92

    def test_score_never_below_one(self):
        assert compute_score(0, Range(1, 500)) == 1


class TestGuesses:

    def test_feedback_and_trend(self, guess_engine: NumberGuess):
        state = round_with(50)

        first = guess_engine.apply_guess(state, 10)
        assert first.outcome is GuessOutcome.TOO_LOW
        assert first.trend is None

        second = guess_engine.apply_guess(first.state, 80)
        assert second.outcome is GuessOutcome.TOO_HIGH
        assert second.trend is Trend.WARMER

        third = guess_engine.apply_guess(second.state, 90)
        assert third.outcome is GuessOutcome.TOO_HIGH
        assert third.trend is Trend.COLDER
        assert third.state.attempts == 3

    def test_same_distance(self, guess_engine: NumberGuess):
        first = guess_engine.apply_guess(round_with(50), 40)
        second = guess_engine.apply_guess(first.state, 60)
        assert second.trend is Trend.SAME

    def test_correct_guess(self, guess_engine: NumberGuess):
        first = guess_engine.apply_guess(round_with(50), 10)
        result = guess_engine.apply_guess(first.state, 50)
        assert result.outcome is GuessOutcome.CORRECT
        assert result.trend is None
        assert result.score == compute_score(2, Range(1, 100))
        assert not result.state.running
        assert guess_engine.is_over(result.state)

    def test_input_state_untouched(self, guess_engine: NumberGuess):
        state = round_with(50)
        guess_engine.apply_guess(state, 10)
        assert state.attempts == 0
        assert state.previous_distance is None

    def test_guess_after_win(self, guess_engine: NumberGuess):
        won = guess_engine.apply_guess(round_with(50), 50).state
        with pytest.raises(IllegalMove):
            guess_engine.apply_guess(won, 10)

    @pytest.mark.parametrize("guess", [0, 101])
    def test_out_of_range(self, guess_engine: NumberGuess, guess):
        with pytest.raises(OutOfBounds):
            guess_engine.apply_guess(round_with(50), guess)


class TestBestScore:

    def test_first_win_is_new_best(self, store: MemoryStore, guess_engine: NumberGuess):
        result = guess_engine.apply_guess(round_with(50), 50)
        assert result.is_new_best
        assert result.state.best_score == result.score
        assert store.get(BEST_SCORE_KEY) == str(result.score)

    def test_worse_score_keeps_best(self, store: MemoryStore, guess_engine: NumberGuess):
        guess_engine.save_best_score(50)
        first = guess_engine.apply_guess(round_with(50), 10)
        result = guess_engine.apply_guess(first.state, 50)
        assert not result.is_new_best
        assert result.state.best_score == 50
        assert store.get(BEST_SCORE_KEY) == "50"

    def test_better_score_replaces_best(self, store: MemoryStore, guess_engine: NumberGuess):
        guess_engine.save_best_score(500)
        result = guess_engine.apply_guess(round_with(50), 50)
        assert result.is_new_best
        assert guess_engine.load_best_score() == result.score

    @pytest.mark.parametrize("raw", ["", "abc", "inf"])
    def test_unreadable_best_is_ignored(self, raw):
        engine = NumberGuess(store=MemoryStore({BEST_SCORE_KEY: raw}))
        assert engine.load_best_score() is None

    def test_initial_state_loads_best(self, rng):
        engine = NumberGuess(store=MemoryStore({BEST_SCORE_KEY: "120"}), rng=rng)
        assert engine.create_initial_state().best_score == 120


class TestRounds:

    def test_secret_in_range(self):
        engine = NumberGuess(rng=create_rng(9))
        for difficulty in Difficulty:
            state = engine.create_initial_state(difficulty)
            assert state.secret in state.range
            assert state.running

    def test_seeded_secret_is_repeatable(self):
        a = NumberGuess(rng=create_rng("seed")).create_initial_state()
        b = NumberGuess(rng=create_rng("seed")).create_initial_state()
        assert a.secret == b.secret

    def test_new_round_resets(self, guess_engine: NumberGuess):
        first = guess_engine.apply_guess(round_with(50, Difficulty.EASY), 10)
        fresh = guess_engine.start_new_round(first.state)
        assert fresh.attempts == 0
        assert fresh.previous_distance is None
        assert fresh.running
        assert fresh.difficulty is Difficulty.EASY
        assert fresh.secret in Range(1, 50)


class TestParsing:

    def test_valid(self):
        assert parse_guess(" 42 ", Range(1, 100)) == 42

    def test_not_a_number(self):
        with pytest.raises(IllegalMove):
            parse_guess("forty", Range(1, 100))

    def test_outside(self):
        with pytest.raises(OutOfBounds):
            parse_guess("500", Range(1, 100))
