"""WebSocket handler that relays pulse events to every connected peer."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from litestar import Router, WebSocket, websocket

from pulse_py.exceptions import InvalidMessageError
from pulse_py.realtime.messages import parse_message
from pulse_py.services.telemetry import get_telemetry

if TYPE_CHECKING:
    from pulse_py.realtime.manager import ConnectionManager, RelayConnection
    from pulse_py.services.telemetry import RelayTelemetry

logger = structlog.get_logger(__name__)


class RelayWebSocketHandler:
    """Handler for relay WebSocket connections.

    Every valid pulse received from any connection is re-serialized from its
    validated fields and sent to all open connections, the sender included.
    Anything else is dropped without a reply.
    """

    def __init__(
        self,
        connection_manager: ConnectionManager,
        telemetry: RelayTelemetry | None = None,
        *,
        include_sender: bool = True,
    ) -> None:
        """Initialize the WebSocket handler.

        Args:
            connection_manager: The connection manager instance.
            telemetry: Telemetry sink; defaults to the process-global one.
            include_sender: Whether the sender receives its own pulses back.
        """
        self._manager = connection_manager
        self._telemetry = telemetry or get_telemetry()
        self._include_sender = include_sender

    async def handle_connection(self, socket: WebSocket) -> None:
        """Handle one WebSocket connection for its whole lifetime.

        Args:
            socket: The WebSocket connection.
        """
        connection = await self._manager.connect(socket)
        self._telemetry.track_connection_opened()

        try:
            await socket.accept()
            await self._receive_loop(socket, connection)
        except Exception:
            logger.exception("WebSocket error", connection_id=connection.connection_id)
        finally:
            await self._manager.disconnect(connection.connection_id)
            self._telemetry.track_connection_closed()

    async def _receive_loop(self, socket: WebSocket, connection: RelayConnection) -> None:
        """Main receive loop for WebSocket messages.

        Args:
            socket: The WebSocket connection.
            connection: The registered connection for this socket.
        """
        async for data in socket.iter_data():
            await self.relay(data, connection)

    async def relay(self, data: str | bytes, connection: RelayConnection) -> int:
        """Validate one inbound frame and fan it out.

        Args:
            data: Raw frame payload.
            connection: The originating connection.

        Returns:
            Number of connections the pulse was delivered to (0 when dropped).
        """
        try:
            message = parse_message(data)
        except InvalidMessageError as e:
            logger.debug(
                "Dropped malformed message",
                connection_id=connection.connection_id,
                reason=e.reason,
            )
            self._telemetry.track_message_dropped(e.reason)
            return 0

        exclude = None if self._include_sender else connection.connection_id
        targets = self._manager.total_connections - (0 if exclude is None else 1)
        delivered = await self._manager.broadcast(message.to_json(), exclude=exclude)
        self._telemetry.track_pulse_relayed(delivered=delivered, targets=max(0, targets))

        logger.debug(
            "Pulse relayed",
            connection_id=connection.connection_id,
            x_norm=message.x_norm,
            y_norm=message.y_norm,
            color=message.color,
            delivered=delivered,
        )
        return delivered


def create_websocket_handler(
    path: str,
    connection_manager: ConnectionManager,
    telemetry: RelayTelemetry | None = None,
    *,
    include_sender: bool = True,
) -> Router:
    """Create a WebSocket router for the pulse relay.

    Args:
        path: Path the relay endpoint is mounted at.
        connection_manager: The connection manager instance.
        telemetry: Telemetry sink; defaults to the process-global one.
        include_sender: Whether the sender receives its own pulses back.

    Returns:
        A Litestar Router with the relay WebSocket handler.
    """
    handler = RelayWebSocketHandler(connection_manager, telemetry, include_sender=include_sender)

    @websocket(path="/")
    async def relay_websocket(socket: WebSocket) -> None:
        """WebSocket endpoint relaying pulse events between peers.

        Args:
            socket: The WebSocket connection.
        """
        await handler.handle_connection(socket)

    return Router(path=path, route_handlers=[relay_websocket], tags=["WebSocket"])
