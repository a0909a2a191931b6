"""Real-time WebSocket module for pulse-py.

This module provides the relay: the pulse wire codec, the set of open
connections and the WebSocket handler that fans pulses out to every peer.
"""

from __future__ import annotations

from pulse_py.realtime.handler import RelayWebSocketHandler, create_websocket_handler
from pulse_py.realtime.manager import ConnectionManager, RelayConnection
from pulse_py.realtime.messages import MessageType, PulseMessage, parse_message

__all__ = [
    "ConnectionManager",
    "MessageType",
    "PulseMessage",
    "RelayConnection",
    "RelayWebSocketHandler",
    "create_websocket_handler",
    "parse_message",
]
