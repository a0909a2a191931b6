"""Stats API controller for relay telemetry."""

from __future__ import annotations

from typing import Any, ClassVar

from litestar import Controller, get

from pulse_py.services.telemetry import RelayTelemetry  # noqa: TC001


class StatsController(Controller):
    """Controller for relay statistics."""

    path = "/stats"
    tags: ClassVar[list[str]] = ["Stats"]

    @get("/")
    async def get_stats(self, telemetry: RelayTelemetry) -> dict[str, Any]:
        """Get current relay statistics.

        Returns:
            Open connections and cumulative relay counters since start.
        """
        return telemetry.get_stats_dict()
