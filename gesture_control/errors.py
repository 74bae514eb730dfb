"""
Exceptions raised by the gesture control system.
"""


class GestureControlError(Exception):
    """Base class for gesture control errors."""


class AuthenticationError(GestureControlError):
    """Raised when an operation needs an authenticated user and there is none."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class TransportError(GestureControlError):
    """Raised when the gesture log backend cannot be reached or fails."""
