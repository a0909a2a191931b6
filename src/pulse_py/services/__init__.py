"""Service layer for pulse-py."""

from pulse_py.services.snapshot import FrameRenderer, sprites_to_svg
from pulse_py.services.telemetry import RelayTelemetry, get_telemetry

__all__ = ["FrameRenderer", "RelayTelemetry", "get_telemetry", "sprites_to_svg"]
