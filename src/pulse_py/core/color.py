"""Colour helpers for pulses and the colour picker."""

from __future__ import annotations

import random
import re
from typing import NamedTuple

from pulse_py.exceptions import InvalidColorError

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6})$")

# Channel bounds for generated colours; avoids near-black and near-white.
RANDOM_CHANNEL_MIN = 30
RANDOM_CHANNEL_MAX = 229


class RGB(NamedTuple):
    """An 8-bit RGB colour triple."""

    r: int
    g: int
    b: int


def parse_hex_color(value: str) -> RGB:
    """Decode a ``#rrggbb`` string into an RGB triple.

    Args:
        value: Colour string, with or without the leading ``#``.

    Returns:
        The decoded colour.

    Raises:
        InvalidColorError: If the value is not a six digit hex colour.
    """
    if not isinstance(value, str):
        raise InvalidColorError(value)
    match = _HEX_COLOR.match(value.strip())
    if match is None:
        raise InvalidColorError(value)
    packed = int(match.group(1), 16)
    return RGB((packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF)


def to_hex(rgb: RGB) -> str:
    """Encode an RGB triple as a lowercase ``#rrggbb`` string."""
    return f"#{rgb.r:02x}{rgb.g:02x}{rgb.b:02x}"


def random_color(rng: random.Random | None = None) -> str:
    """Generate a random colour that stays visible on a black surface.

    Args:
        rng: Optional random source, for reproducible output.

    Returns:
        A ``#rrggbb`` colour string.
    """
    source = rng or random
    channels = [source.randint(RANDOM_CHANNEL_MIN, RANDOM_CHANNEL_MAX) for _ in range(3)]
    return to_hex(RGB(*channels))
