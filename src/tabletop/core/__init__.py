"""
Core module - errors, shared enums, seeded RNG, undo/redo history, hashing.

This module provides the building blocks used by every game engine.
"""

from tabletop.core.errors import (
    GameError,
    IllegalMove,
    NotYourTurn,
    CellOccupied,
    OutOfBounds,
    Suicide,
    KoViolation,
)
from tabletop.core.hashing import hash_board, freeze
from tabletop.core.history import History, undo, redo, can_undo, can_redo
from tabletop.core.rng import (
    Rng,
    create_rng,
    parse_seed,
    seed_from_string,
    seed_from_query,
    rng_from_query,
)
from tabletop.core.types import Difficulty, GameKind, Point

__all__ = [
    # Errors
    "GameError",
    "IllegalMove",
    "NotYourTurn",
    "CellOccupied",
    "OutOfBounds",
    "Suicide",
    "KoViolation",
    # Types
    "Difficulty",
    "GameKind",
    "Point",
    # History
    "History",
    "undo",
    "redo",
    "can_undo",
    "can_redo",
    # Randomness
    "Rng",
    "create_rng",
    "parse_seed",
    "seed_from_string",
    "seed_from_query",
    "rng_from_query",
    # Functions
    "hash_board",
    "freeze",
]
