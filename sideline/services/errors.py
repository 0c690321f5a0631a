"""Exception types raised by the Sideline Manager services."""
from typing import List, Optional


class SidelineError(Exception):
    """Base class for all application errors."""
    pass


class GatewayError(SidelineError):
    """A read or write against the persistence gateway failed."""
    pass


class SessionError(SidelineError):
    """An operation needed a signed-in session and none was active."""
    pass


class ValidationError(SidelineError):
    """
    Input was rejected before any state changed.

    Attributes:
        errors: Individual validation messages
    """

    def __init__(self, errors: List[str], message: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(message or "; ".join(self.errors))


class GameValidationError(ValidationError):
    """Invalid game details."""
    pass


class PlayerValidationError(ValidationError):
    """Invalid player details."""
    pass


class LineupValidationError(ValidationError):
    """Invalid lineup move or saved-lineup request."""
    pass
