"""Exceptions raised by the Twenty-One engine."""

from typing import Any


class TwentyOneError(Exception):
    """Base class for all game errors."""


class EmptyDeckError(TwentyOneError, IndexError):
    """Raised when drawing from a deck with no cards left."""

    def __init__(self, message: str = "Cannot draw from empty deck") -> None:
        super().__init__(message)


class InvalidActionError(TwentyOneError):
    """
    Raised when an action is not allowed in the current state.

    The engine state is left untouched; the caller may retry with a valid action.
    """

    def __init__(self, action: Any, state: Any, message: str | None = None) -> None:
        self.action = action
        self.state = state
        super().__init__(message or f"Cannot {action} during {state}")
