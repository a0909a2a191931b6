"""Telemetry for the pulse relay.

Tracks open connections and relay outcomes since server start. Counters are
process-local and reset on restart.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable

logger = structlog.get_logger(__name__)


@dataclass
class RelayStats:
    """Current relay statistics snapshot."""

    # Active counts
    active_connections: int = 0

    # Cumulative counts (since server start)
    total_connections: int = 0
    pulses_relayed: int = 0
    messages_dropped: int = 0
    deliveries: int = 0
    failed_deliveries: int = 0

    # Server info
    uptime_seconds: float = 0.0
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class RelayTelemetry:
    """Service for tracking and reporting relay telemetry.

    Usage:
        telemetry = RelayTelemetry()

        telemetry.track_connection_opened()
        telemetry.track_pulse_relayed(delivered=3, targets=3)
        telemetry.track_message_dropped("invalid_json")

        stats = telemetry.get_stats()
    """

    def __init__(self) -> None:
        """Initialize the telemetry service."""
        self._started_at = datetime.now(UTC)
        self._stats = RelayStats(started_at=self._started_at)
        self._callbacks: list[Callable[[str, dict[str, Any]], None]] = []

    def add_callback(self, callback: Callable[[str, dict[str, Any]], None]) -> None:
        """Add a callback for telemetry events.

        Args:
            callback: Function called with (event_name, event_data) for each event.
        """
        self._callbacks.append(callback)

    def _emit_event(self, event: str, data: dict[str, Any]) -> None:
        logger.debug("Telemetry event", telemetry_event=event, **data)
        for callback in self._callbacks:
            try:
                callback(event, data)
            except Exception as e:  # noqa: BLE001
                logger.debug("Telemetry callback failed", error=str(e))

    def track_connection_opened(self) -> None:
        """Track a new relay connection."""
        self._stats.active_connections += 1
        self._stats.total_connections += 1
        self._emit_event("connection_opened", {"active": self._stats.active_connections})

    def track_connection_closed(self) -> None:
        """Track a relay connection closing."""
        self._stats.active_connections = max(0, self._stats.active_connections - 1)
        self._emit_event("connection_closed", {"active": self._stats.active_connections})

    def track_pulse_relayed(self, *, delivered: int, targets: int) -> None:
        """Track one fan-out.

        Args:
            delivered: Connections the pulse reached.
            targets: Connections the pulse was sent to.
        """
        self._stats.pulses_relayed += 1
        self._stats.deliveries += delivered
        self._stats.failed_deliveries += max(0, targets - delivered)
        self._emit_event("pulse_relayed", {"delivered": delivered, "targets": targets})

    def track_message_dropped(self, reason: str) -> None:
        """Track an inbound frame rejected by validation.

        Args:
            reason: Rejection reason.
        """
        self._stats.messages_dropped += 1
        self._emit_event("message_dropped", {"reason": reason})

    def get_stats(self) -> RelayStats:
        """Get current telemetry statistics.

        Returns:
            Current stats snapshot.
        """
        self._stats.uptime_seconds = (datetime.now(UTC) - self._started_at).total_seconds()
        return self._stats

    def get_stats_dict(self) -> dict[str, Any]:
        """Get stats as a dictionary for JSON serialization.

        Returns:
            Stats as dict.
        """
        stats = self.get_stats()
        return {
            "active_connections": stats.active_connections,
            "total_connections": stats.total_connections,
            "pulses_relayed": stats.pulses_relayed,
            "messages_dropped": stats.messages_dropped,
            "deliveries": stats.deliveries,
            "failed_deliveries": stats.failed_deliveries,
            "uptime_seconds": stats.uptime_seconds,
            "started_at": stats.started_at.isoformat(),
        }


# Global telemetry service instance
_telemetry: RelayTelemetry | None = None


def get_telemetry() -> RelayTelemetry:
    """Get or create the global telemetry service.

    Returns:
        RelayTelemetry instance.
    """
    global _telemetry  # noqa: PLW0603
    if _telemetry is None:
        _telemetry = RelayTelemetry()
    return _telemetry
