"""Connection manager for relay WebSocket sessions."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from litestar import WebSocket

logger = structlog.get_logger(__name__)


@dataclass
class RelayConnection:
    """An open connection and, by being registered, a member of the broadcast set."""

    websocket: WebSocket
    connection_id: str = field(default_factory=lambda: str(uuid4()))
    client: str = "unknown"
    connected_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "connection_id": self.connection_id,
            "client": self.client,
            "connected_at": self.connected_at.isoformat(),
        }


def _client_label(websocket: Any) -> str:
    client = getattr(websocket, "client", None)
    if client is None:
        return "unknown"
    host = getattr(client, "host", None)
    port = getattr(client, "port", None)
    if isinstance(host, str):
        return f"{host}:{port}" if isinstance(port, int) else host
    return "unknown"


class ConnectionManager:
    """Tracks open relay connections and fans messages out to them.

    Membership changes are serialized through a lock; broadcasts iterate a
    snapshot so connections closing mid-fan-out only fail their own send.
    """

    def __init__(self) -> None:
        """Initialize the connection manager."""
        self._connections: dict[str, RelayConnection] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> RelayConnection:
        """Register a new WebSocket connection.

        Args:
            websocket: The WebSocket connection.

        Returns:
            The RelayConnection instance.
        """
        async with self._lock:
            connection = RelayConnection(websocket=websocket, client=_client_label(websocket))
            self._connections[connection.connection_id] = connection

            logger.info(
                "Client connected",
                connection_id=connection.connection_id,
                client=connection.client,
                total_connections=len(self._connections),
            )

            return connection

    async def disconnect(self, connection_id: str) -> None:
        """Remove a connection; unknown ids are ignored.

        Args:
            connection_id: The connection's identifier.
        """
        async with self._lock:
            if self._connections.pop(connection_id, None) is not None:
                logger.info(
                    "Client disconnected",
                    connection_id=connection_id,
                    remaining_connections=len(self._connections),
                )

    async def get_connections(self) -> list[RelayConnection]:
        """Get a snapshot of all open connections."""
        async with self._lock:
            return list(self._connections.values())

    async def get_connection(self, connection_id: str) -> RelayConnection | None:
        """Get a specific connection.

        Args:
            connection_id: The connection's identifier.

        Returns:
            The RelayConnection or None if not found.
        """
        async with self._lock:
            return self._connections.get(connection_id)

    async def broadcast(
        self,
        message: dict[str, Any] | str,
        exclude: str | None = None,
    ) -> int:
        """Send a message to every open connection.

        Args:
            message: A wire dictionary, or pre-serialized JSON text.
            exclude: Optional connection id to leave out.

        Returns:
            Number of connections the message was delivered to.
        """
        connections = await self.get_connections()
        text = message if isinstance(message, str) else json.dumps(message, separators=(",", ":"))

        targets = [c for c in connections if c.connection_id != exclude]
        if not targets:
            return 0

        results = await asyncio.gather(
            *(self._send(connection, text) for connection in targets),
            return_exceptions=True,
        )
        return sum(1 for result in results if result is True)

    async def _send(self, connection: RelayConnection, text: str) -> bool:
        """Send text to one connection, reporting failure instead of raising.

        Args:
            connection: The target connection.
            text: The JSON message string.

        Returns:
            True if the send completed.
        """
        try:
            await connection.websocket.send_text(text)
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "Failed to relay message",
                connection_id=connection.connection_id,
                error=str(e) or type(e).__name__,
            )
            return False
        return True

    @property
    def total_connections(self) -> int:
        """Get the number of open connections."""
        return len(self._connections)
