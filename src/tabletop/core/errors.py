"""
Game errors - the small, recoverable taxonomy raised by every engine.

All of them subclass ValueError, so callers that only care about
"this move was rejected" can catch that.
"""


class GameError(ValueError):
    """A move or input was rejected. The state it was applied to is untouched."""


class IllegalMove(GameError):
    """The move breaks the rules of the game (or the game is already over)."""


class NotYourTurn(GameError):
    """The move belongs to the side that is not on turn."""


class CellOccupied(GameError):
    """The target cell already holds a piece, stone, mark or clue."""


class OutOfBounds(GameError):
    """The coordinates (or guessed value) fall outside the board or range."""


class Suicide(GameError):
    """A stone placement would leave its own group without liberties."""


class KoViolation(GameError):
    """A stone placement would recreate the position before the opponent's last move."""
