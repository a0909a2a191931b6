"""WebSocket sync client: mirrors peer pulses into a local pulse field.

The client holds one connection to the relay. When it drops, for whatever
reason, the client waits a fixed delay and connects again, forever. Pulses
sent while disconnected are shown locally only and are never replayed.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit, urlunsplit

import structlog
import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from pulse_py.exceptions import InvalidColorError, InvalidMessageError
from pulse_py.realtime.messages import PulseMessage, parse_message

if TYPE_CHECKING:
    from collections.abc import Callable

    from pulse_py.core.animation import PulseField
    from pulse_py.core.models import Pulse

logger = structlog.get_logger(__name__)

RECONNECT_DELAY = 0.5
DEFAULT_WS_PATH = "/ws"

_SCHEME_MAP = {"http": "ws", "https": "wss", "ws": "ws", "wss": "wss"}


def derive_ws_url(origin: str, path: str = DEFAULT_WS_PATH) -> str:
    """Build the relay URL from a page origin.

    The scheme follows the page (``https`` becomes ``wss``) and host and port
    are kept, so the same client works on any deployment.

    Args:
        origin: Page origin such as ``https://example.com:8443``.
        path: Relay endpoint path.

    Returns:
        The WebSocket URL.

    Raises:
        ValueError: If the origin has an unsupported scheme or no host.
    """
    parts = urlsplit(origin)
    scheme = _SCHEME_MAP.get(parts.scheme.lower())
    if scheme is None or not parts.netloc:
        msg = f"Unsupported origin: {origin!r}"
        raise ValueError(msg)
    return urlunsplit((scheme, parts.netloc, path, "", ""))


class PulseSyncClient:
    """Keeps a pulse field in sync with the relay."""

    def __init__(
        self,
        url: str,
        field: PulseField,
        *,
        reconnect_delay: float = RECONNECT_DELAY,
        connect: Callable[[str], Any] = websockets.connect,
        on_pulse: Callable[[Pulse], object] | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            url: Relay WebSocket URL.
            field: Pulse field receiving peer pulses.
            reconnect_delay: Fixed wait between connection attempts.
            connect: Factory returning an async context manager for a connection.
            on_pulse: Optional hook called for every pulse spawned from a peer.
        """
        self.url = url
        self.field = field
        self.reconnect_delay = reconnect_delay
        self._connect = connect
        self._on_pulse = on_pulse
        self._socket: Any = None
        self._stopped = False
        self.attempts = 0

    @property
    def is_open(self) -> bool:
        """Whether a connection is currently established."""
        return self._socket is not None

    async def stop(self) -> None:
        """Stop reconnecting and close the current connection, ending :meth:`run`."""
        self._stopped = True
        if self._socket is not None:
            await self._socket.close()

    async def run(self) -> None:
        """Connect and keep reconnecting until :meth:`stop` is called."""
        while not self._stopped:
            self.attempts += 1
            try:
                async with self._connect(self.url) as socket:
                    self._socket = socket
                    logger.info("WebSocket connected", url=self.url, attempt=self.attempts)
                    async for raw in socket:
                        self.handle_message(raw)
                        if self._stopped:
                            break
            except (OSError, TimeoutError, WebSocketException) as e:
                logger.info("WebSocket disconnected, retrying", url=self.url, error=str(e) or type(e).__name__)
            finally:
                self._socket = None
            if self._stopped:
                break
            await asyncio.sleep(self.reconnect_delay)

    def handle_message(self, raw: str | bytes) -> Pulse | None:
        """Spawn a local pulse for one inbound frame.

        Malformed frames are logged and discarded.

        Args:
            raw: Frame payload.

        Returns:
            The spawned pulse, or None if the frame was discarded.
        """
        try:
            message = parse_message(raw)
            pulse = self.field.spawn(message.x_norm, message.y_norm, message.color)
        except (InvalidMessageError, InvalidColorError) as e:
            logger.debug("Ignoring bad message", error=str(e))
            return None
        if self._on_pulse is not None:
            self._on_pulse(pulse)
        return pulse

    async def send_pulse(self, norm_x: float, norm_y: float, color: str) -> Pulse:
        """Show a pulse locally at once and send it upstream if connected.

        Nothing is queued while disconnected.

        Args:
            norm_x: Horizontal position in [0, 1].
            norm_y: Vertical position in [0, 1].
            color: ``#rrggbb`` colour.

        Returns:
            The locally spawned pulse.
        """
        pulse = self.field.spawn(norm_x, norm_y, color)
        socket = self._socket
        if socket is None:
            return pulse
        message = PulseMessage(x_norm=norm_x, y_norm=norm_y, color=color)
        try:
            await socket.send(message.to_json())
        except ConnectionClosed:
            logger.debug("Pulse not sent, connection closing")
        return pulse
