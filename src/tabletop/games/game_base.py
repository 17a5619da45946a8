"""
GameEngine - the capability every board-game engine exposes.

IMPORTANT ARCHITECTURE NOTE:
-----------------------------
- Engines are stateless. The caller owns the state and threads it through.
- States are immutable values; apply_move always returns a new one.
- Undo/redo is NOT an engine concern. Wrap states in core.history.History.

This is a structural Protocol, not a base class: engines do not inherit from it.
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, TypeVar, runtime_checkable

from tabletop.core.history import History
from tabletop.core.rng import Rng
from tabletop.core.types import Difficulty

S = TypeVar("S")
M = TypeVar("M")


@runtime_checkable
class GameEngine(Protocol[S, M]):
    """Structural interface shared by the two-player board-game engines."""

    def game_id(self) -> str:
        """Return a stable identifier (e.g. 'tic_tac_toe')."""
        ...

    def create_initial_state(self, *args: Any, **kwargs: Any) -> S:
        """Fresh state for a new game."""
        ...

    def list_legal_moves(self, state: S, origin: Any = None) -> List[M]:
        """All legal moves for the side to move (optionally from one origin)."""
        ...

    def apply_move(self, state: S, move: M) -> S:
        """
        Return the state after `move`.

        Raises a core.errors.GameError subclass instead of silently ignoring
        a bad move. The input state is never modified.
        """
        ...

    def get_status(self, state: S) -> Any:
        """In-progress or terminal status (with winner/reason)."""
        ...

    def is_over(self, state: S) -> bool:
        ...

    def current_side(self, state: S) -> Any:
        """Side to move."""
        ...

    def sides(self) -> tuple:
        """Both sides, first mover first."""
        ...

    def choose_bot_move(
        self,
        state: S,
        bot_side: Any,
        difficulty: Difficulty,
        rng: Optional[Rng] = None,
    ) -> Optional[M]:
        """Move the bot would play now, or None if it has nothing to play."""
        ...

    def parse_move(self, state: S, text: str) -> M:
        """Parse human input into a move (raises ValueError on nonsense)."""
        ...

    def state_string(self, state: S) -> str:
        """Pretty string representation of the state."""
        ...


def play(engine: GameEngine[S, M], history: History[S], move: M) -> History[S]:
    """Apply `move` to the present state and record it, clearing any redo stack."""
    return history.advance(engine.apply_move(history.present, move))
