"""
Errors raised by the game core.

Every error is a local validation failure: the session the caller passed in
is left untouched and the caller decides what to tell the acting player.
"""


class GameError(Exception):
    """Base class for rejected operations."""

    code = "GAME_ERROR"

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.message}


class NotActiveGame(GameError):
    """Game is not active."""
    code = "NOT_ACTIVE_GAME"


class OutOfTurn(GameError):
    """Not your turn."""
    code = "OUT_OF_TURN"


class MustCallOrRaise(GameError):
    """Cannot check, you must call or raise."""
    code = "MUST_CALL_OR_RAISE"


class NothingToCall(GameError):
    """No bet to call, you can check."""
    code = "NOTHING_TO_CALL"


class RaiseTooSmall(GameError):
    """Raise is below the minimum."""
    code = "RAISE_TOO_SMALL"


class InsufficientChips(GameError):
    """Not enough chips."""
    code = "INSUFFICIENT_CHIPS"


class InvalidAction(GameError):
    """Invalid action."""
    code = "INVALID_ACTION"


class DeckExhausted(GameError):
    """Deck is empty."""
    code = "DECK_EXHAUSTED"


class UnknownPlayer(OutOfTurn):
    """Player is not seated in this session."""
    code = "UNKNOWN_PLAYER"


class SeatingError(GameError):
    """Player cannot be seated in this session."""
    code = "SEATING_ERROR"


class RematchUnavailable(GameError):
    """A new hand cannot follow this session."""
    code = "REMATCH_UNAVAILABLE"
