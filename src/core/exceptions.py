"""
Exceptions shared by all layers.

NOTE: none of these derive from ValueError. Pydantic only wraps ValueError / AssertionError into a
ValidationError, so an InvalidRequestError raised inside a validator reaches the caller as-is.
"""


class GameError(Exception):
    """Base class for every error the chess application raises itself."""


class IllegalMoveError(GameError):
    """The requested move is not in the set of legal moves. Caller should re-query the legal moves."""


class GameStateError(GameError):
    """The game is not in a state that allows the requested operation."""


class InvalidBoardError(GameStateError):
    """The board violates a structural invariant (ex. a missing or duplicated king)."""


class InvalidRequestError(GameError):
    """Request payload could not be interpreted."""


class RepositoryError(GameError):
    """Persistence layer could not find / store the requested record."""
