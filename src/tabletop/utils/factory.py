"""
Factory functions for creating engines and stores.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from tabletop.core.rng import Rng
from tabletop.storage.kv_store import KeyValueStore, MemoryStore, SqliteStore
from tabletop.utils.config import GAMES


def create_store(db_path: Optional[str | Path] = None) -> KeyValueStore:
    """
    Open a best-score store.

    Args:
        db_path: sqlite file to persist into; None keeps values for this session only

    Returns:
        SqliteStore or MemoryStore instance
    """
    if db_path is None:
        return MemoryStore()
    return SqliteStore(db_path)


def create_engine(
    game_name: str,
    store: Optional[KeyValueStore] = None,
    rng: Optional[Rng] = None,
) -> Any:
    """
    Create a game engine.

    Args:
        game_name: Key from GAMES registry (e.g., "tic_tac_toe")
        store: Best-score store, used by the guessing game only
        rng: Random source, used by the guessing game only (others take it per call)

    Returns:
        Engine instance
    """
    if game_name not in GAMES:
        available = ", ".join(GAMES.keys())
        raise ValueError(f"Unknown game: {game_name}. Available: {available}")

    engine_class = GAMES[game_name]
    if game_name == "number_guess":
        return engine_class(store=store, rng=rng)
    return engine_class()
