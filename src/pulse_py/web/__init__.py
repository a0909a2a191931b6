"""Web layer for pulse-py: health, stats and the browser client."""

from pulse_py.web.health import HealthController
from pulse_py.web.stats_controller import StatsController
from pulse_py.web.ui import create_ui_router

__all__ = ["HealthController", "StatsController", "create_ui_router"]
