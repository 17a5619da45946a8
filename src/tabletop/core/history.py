"""
History - undo/redo layered over any engine's immutable states.

A History never copies or rebuilds states; it only moves the objects it was
given between the two stacks, so undo followed by redo hands back the very
same state object.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Generic, Tuple, TypeVar

S = TypeVar("S")


@dataclass(frozen=True)
class History(Generic[S]):
    present: S
    past: Tuple[S, ...] = ()
    future: Tuple[S, ...] = ()

    @classmethod
    def start(cls, state: S) -> "History[S]":
        return cls(present=state)

    @property
    def can_undo(self) -> bool:
        return len(self.past) > 0

    @property
    def can_redo(self) -> bool:
        return len(self.future) > 0

    def advance(self, state: S) -> "History[S]":
        """Record a new forward state. Any redo stack is dropped."""
        return History(present=state, past=self.past + (self.present,), future=())

    def undo(self) -> "History[S]":
        """Step back one state; a no-op when there is nothing to undo."""
        if not self.can_undo:
            return self
        return History(
            present=self.past[-1],
            past=self.past[:-1],
            future=(self.present,) + self.future,
        )

    def redo(self) -> "History[S]":
        """Step forward again; only possible right after an undo."""
        if not self.can_redo:
            return self
        return History(
            present=self.future[0],
            past=self.past + (self.present,),
            future=self.future[1:],
        )

    def reset(self, state: S) -> "History[S]":
        """Start over from a fresh state, forgetting both stacks."""
        return replace(self, present=state, past=(), future=())


def undo(history: History[S]) -> History[S]:
    return history.undo()


def redo(history: History[S]) -> History[S]:
    return history.redo()


def can_undo(history: History[S]) -> bool:
    return history.can_undo


def can_redo(history: History[S]) -> bool:
    return history.can_redo
