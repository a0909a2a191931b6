"""Custom exceptions for pulse-py."""

from __future__ import annotations


class PulseError(Exception):
    """Base exception class for all pulse-py errors."""


class InvalidMessageError(PulseError):
    """Raised when inbound wire data is not a valid pulse event.

    Attributes:
        reason: Short machine-readable reason for the rejection.
    """

    def __init__(self, reason: str, message: str | None = None) -> None:
        """Initialize the exception with a rejection reason.

        Args:
            reason: Short machine-readable reason (e.g. ``invalid_json``).
            message: Optional human-readable description.
        """
        self.reason = reason
        super().__init__(message or f"Invalid pulse message: {reason}")


class InvalidColorError(PulseError):
    """Raised when a colour string cannot be decoded as ``#rrggbb``.

    Attributes:
        color: The rejected colour value.
    """

    def __init__(self, color: object) -> None:
        """Initialize the exception with the rejected colour.

        Args:
            color: The value that failed to decode.
        """
        self.color = color
        super().__init__(f"Invalid colour: {color!r}")
