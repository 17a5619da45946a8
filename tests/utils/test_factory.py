"""
Tests for tabletop.utils.factory
"""

import pytest

from tabletop.core.rng import create_rng
from tabletop.games.game_base import GameEngine
from tabletop.games.number_guess import NumberGuess
from tabletop.storage.kv_store import MemoryStore, SqliteStore
from tabletop.utils.config import GAMES
from tabletop.utils.factory import create_engine, create_store


class TestCreateStore:

    def test_memory_by_default(self):
        assert isinstance(create_store(), MemoryStore)

    def test_sqlite_with_path(self, temp_db_path):
        store = create_store(temp_db_path)
        try:
            assert isinstance(store, SqliteStore)
        finally:
            store.close()


class TestCreateEngine:

    @pytest.mark.parametrize("name", ["tic_tac_toe", "checkers", "go", "chess"])
    def test_board_games_follow_protocol(self, name):
        engine = create_engine(name)
        assert isinstance(engine, GameEngine)
        assert engine.game_id() == name

    def test_all_games(self):
        for name in GAMES:
            assert create_engine(name).game_id() == name

    def test_number_guess_gets_store_and_rng(self):
        store = MemoryStore()
        rng = create_rng(1)
        engine = create_engine("number_guess", store=store, rng=rng)
        assert isinstance(engine, NumberGuess)
        assert engine.store is store
        assert engine.rng is rng

    def test_unknown_game(self):
        with pytest.raises(ValueError, match="Unknown game"):
            create_engine("backgammon")
