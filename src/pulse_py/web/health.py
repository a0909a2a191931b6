"""Health check endpoints for pulse-py.

Provides /health and /ready endpoints for container orchestration
and load balancer health checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import ClassVar

from litestar import Controller, get

from pulse_py.realtime.manager import ConnectionManager  # noqa: TC001


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"


@dataclass
class ComponentHealth:
    """Health status of an individual component."""

    name: str
    status: HealthStatus
    message: str | None = None


@dataclass
class HealthResponse:
    """Health check response."""

    status: HealthStatus
    version: str = "0.1.0"
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    components: list[ComponentHealth] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "version": self.version,
            "timestamp": self.timestamp,
            "components": [{"name": c.name, "status": c.status.value, "message": c.message} for c in self.components],
        }


class HealthController(Controller):
    """Health check controller.

    The relay has no external dependencies, so liveness and readiness only
    report on the process and its connection set.
    """

    path = ""
    tags: ClassVar[list[str]] = ["Health"]

    @get("/health")
    async def health(self, connection_manager: ConnectionManager) -> dict:
        """Liveness check endpoint.

        Returns:
            Health status with component details.
        """
        components = [
            ComponentHealth(
                name="application",
                status=HealthStatus.HEALTHY,
                message="Application is running",
            ),
            ComponentHealth(
                name="relay",
                status=HealthStatus.HEALTHY,
                message=f"{connection_manager.total_connections} open connections",
            ),
        ]
        return HealthResponse(status=HealthStatus.HEALTHY, components=components).to_dict()

    @get("/ready")
    async def ready(self) -> dict:
        """Readiness check endpoint.

        Returns:
            Readiness status with individual check results.
        """
        checks = {"application": True, "relay": True}
        return {
            "ready": all(checks.values()),
            "timestamp": datetime.now(UTC).isoformat(),
            "checks": checks,
        }
