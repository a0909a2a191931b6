"""Core domain models and client-side animation for pulse-py."""

from pulse_py.core.animation import FrameClock, PulseField, PulseSprite, Surface, gradient_alpha
from pulse_py.core.color import RGB, parse_hex_color, random_color, to_hex
from pulse_py.core.input import ColorPicker, InputController, TouchPoint
from pulse_py.core.models import Pulse, clamp_unit

__all__ = [
    "RGB",
    "ColorPicker",
    "FrameClock",
    "InputController",
    "Pulse",
    "PulseField",
    "PulseSprite",
    "Surface",
    "TouchPoint",
    "clamp_unit",
    "gradient_alpha",
    "parse_hex_color",
    "random_color",
    "to_hex",
]
