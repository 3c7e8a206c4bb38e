"""
Custom exceptions shared by all layers.

The domain (chess) layer raises, the service layer decides which of these are a normal outcome (a rejected move)
and which should reach the API layer.
"""


class GameError(Exception):
    """Top-level exception for anything going wrong while handling a game."""


class InvalidNotationError(GameError):
    """A square name could not be interpreted as algebraic notation (a1 - h8)."""


class InvalidRequestError(GameError):
    """Payload from the transport layer did not pass validation."""


class GameNotFoundError(GameError):
    """No game registered under the requested id."""


class GameStateError(GameError):
    """Operation does not make sense for the current state of the game."""


class IllegalMoveError(GameError):
    """A move failed one of the preconditions to be applied to the board."""


class GameOverError(IllegalMoveError):
    pass


class NotYourTurnError(IllegalMoveError):
    pass


class WrongColorError(IllegalMoveError):
    pass


class SelfCheckError(IllegalMoveError):
    """The move leaves the mover's own king in check."""
