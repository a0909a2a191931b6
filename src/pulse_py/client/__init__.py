"""Python client for the pulse relay: sync connection and test bot."""

from __future__ import annotations

from pulse_py.client.bot import PulseBot
from pulse_py.client.sync import PulseSyncClient, derive_ws_url

__all__ = [
    "PulseBot",
    "PulseSyncClient",
    "derive_ws_url",
]
