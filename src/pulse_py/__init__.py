"""pulse-py: a shared, real-time pulse animation relay built on Litestar.

Every connected browser draws expanding, fading pulses; a tap anywhere is
shown locally at once and relayed to every other connected peer.

Key Components:
    - Realtime: PulseMessage wire codec, ConnectionManager, relay WebSocket handler
    - Core: Pulse model, PulseField animation, Surface geometry, InputController
    - Client: PulseSyncClient (reconnecting WebSocket client), PulseBot
    - Services: FrameRenderer (Pillow snapshots), RelayTelemetry
    - Plugin: PulsePlugin for Litestar integration

Quick Start:
    >>> from litestar import Litestar
    >>> from pulse_py import PulseConfig, PulsePlugin
    >>>
    >>> app = Litestar(plugins=[PulsePlugin(PulseConfig())])
"""

from __future__ import annotations

__version__ = "0.1.0"

from pulse_py.client import PulseBot, PulseSyncClient, derive_ws_url
from pulse_py.core import (
    RGB,
    ColorPicker,
    FrameClock,
    InputController,
    Pulse,
    PulseField,
    PulseSprite,
    Surface,
)
from pulse_py.exceptions import InvalidColorError, InvalidMessageError, PulseError
from pulse_py.plugin import PulseConfig, PulsePlugin
from pulse_py.realtime import (
    ConnectionManager,
    MessageType,
    PulseMessage,
    RelayConnection,
    RelayWebSocketHandler,
    create_websocket_handler,
    parse_message,
)
from pulse_py.services import FrameRenderer, RelayTelemetry

__all__ = [
    "RGB",
    "ColorPicker",
    "ConnectionManager",
    "FrameClock",
    "FrameRenderer",
    "InputController",
    "InvalidColorError",
    "InvalidMessageError",
    "MessageType",
    "Pulse",
    "PulseBot",
    "PulseConfig",
    "PulseError",
    "PulseField",
    "PulseMessage",
    "PulsePlugin",
    "PulseSprite",
    "PulseSyncClient",
    "RelayConnection",
    "RelayTelemetry",
    "RelayWebSocketHandler",
    "Surface",
    "create_websocket_handler",
    "derive_ws_url",
    "parse_message",
]
