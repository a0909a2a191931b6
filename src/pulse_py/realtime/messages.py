"""WebSocket message types and schemas for pulse relaying."""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pulse_py.exceptions import InvalidMessageError


class MessageType(str, Enum):
    """Types of WebSocket messages. The same shape travels in both directions."""

    PULSE = "pulse"


def _reject_constant(name: str) -> float:
    # Browsers' JSON.parse rejects NaN and Infinity; do the same.
    raise InvalidMessageError("invalid_json", f"Non-standard JSON constant: {name}")


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    # Overflowing literals such as 1e400 decode to inf; huge ints do not fit a float.
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


@dataclass(frozen=True)
class PulseMessage:
    """A pulse event on the wire.

    Attributes:
        x_norm: Horizontal position as a fraction of surface width.
        y_norm: Vertical position as a fraction of surface height.
        color: Colour string, expected as ``#rrggbb``.
    """

    x_norm: float
    y_norm: float
    color: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire dictionary."""
        return {
            "type": MessageType.PULSE.value,
            "xNorm": self.x_norm,
            "yNorm": self.y_norm,
            "color": self.color,
        }

    def to_json(self) -> str:
        """Serialize to a compact JSON text frame."""
        return json.dumps(self.to_dict(), separators=(",", ":"), allow_nan=False)

    @classmethod
    def from_dict(cls, data: Any) -> PulseMessage:
        """Validate a decoded payload and build a message from it.

        Only the pulse fields are kept; any extra keys are discarded.

        Args:
            data: Decoded JSON value.

        Returns:
            The validated message.

        Raises:
            InvalidMessageError: If the payload does not match the pulse schema.
        """
        if not isinstance(data, Mapping):
            raise InvalidMessageError("not_an_object")
        if data.get("type") != MessageType.PULSE.value:
            raise InvalidMessageError("unknown_type")
        x_norm = data.get("xNorm")
        y_norm = data.get("yNorm")
        color = data.get("color")
        if not _is_number(x_norm) or not _is_number(y_norm):
            raise InvalidMessageError("invalid_coordinates")
        if not isinstance(color, str):
            raise InvalidMessageError("invalid_color")
        return cls(x_norm=x_norm, y_norm=y_norm, color=color)


def parse_message(raw: str | bytes) -> PulseMessage:
    """Decode and validate a raw text or binary frame.

    Args:
        raw: Frame payload; bytes are decoded as UTF-8.

    Returns:
        The validated pulse message.

    Raises:
        InvalidMessageError: If the frame is not valid JSON or fails the schema.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidMessageError("invalid_encoding") from e
    try:
        data = json.loads(raw, parse_constant=_reject_constant)
    except (ValueError, RecursionError, TypeError) as e:
        raise InvalidMessageError("invalid_json") from e
    return PulseMessage.from_dict(data)
