"""Litestar plugin for pulse-py integration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from litestar.di import Provide
from litestar.plugins import InitPluginProtocol

from pulse_py.realtime.manager import ConnectionManager
from pulse_py.services.telemetry import RelayTelemetry, get_telemetry

if TYPE_CHECKING:
    from litestar.config.app import AppConfig


@dataclass
class PulseConfig:
    """Configuration for the Pulse plugin.

    Attributes:
        ws_path: Path of the relay WebSocket endpoint. Defaults to "/ws".
        static_path: URL prefix for browser client assets. Defaults to "/static".
        static_dir: Directory with the browser client; None uses the bundled one.
        enable_ui: Whether to serve the browser client at "/". Defaults to True.
        enable_stats: Whether to mount the "/stats" endpoint. Defaults to True.
        enable_health: Whether to mount "/health" and "/ready". Defaults to True.
        include_sender: Whether a pulse is echoed back to its sender.
            Defaults to True.
        connection_manager: Optional pre-configured ConnectionManager. If None,
            a new one will be created.
        telemetry: Optional telemetry sink. If None, the process-global one is used.

    Example:
        >>> config = PulseConfig(ws_path="/relay", enable_ui=False)
    """

    ws_path: str = "/ws"
    static_path: str = "/static"
    static_dir: Path | None = None
    enable_ui: bool = True
    enable_stats: bool = True
    enable_health: bool = True
    include_sender: bool = True
    connection_manager: ConnectionManager | None = field(default=None)
    telemetry: RelayTelemetry | None = field(default=None)


class PulsePlugin(InitPluginProtocol):
    """Litestar plugin mounting the pulse relay.

    Registers the ConnectionManager for dependency injection and mounts the
    relay WebSocket route, plus the browser client, stats and health routes
    as configured.

    Example:
        >>> from litestar import Litestar
        >>> from pulse_py import PulseConfig, PulsePlugin
        >>>
        >>> app = Litestar(plugins=[PulsePlugin(PulseConfig())])
    """

    def __init__(self, config: PulseConfig | None = None) -> None:
        """Initialize the plugin with optional configuration.

        Args:
            config: Plugin configuration. If None, PulseConfig with default
                values will be used.
        """
        self._config = config or PulseConfig()
        self._connection_manager: ConnectionManager | None = None
        self._telemetry: RelayTelemetry | None = None

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Wire the relay into the application during startup.

        Args:
            app_config: The Litestar application configuration object.

        Returns:
            The modified application configuration.
        """
        self._connection_manager = self._config.connection_manager or ConnectionManager()
        self._telemetry = self._config.telemetry or get_telemetry()

        def provide_connection_manager() -> ConnectionManager:
            """Dependency provider for ConnectionManager."""
            if self._connection_manager is None:
                msg = "Connection manager not initialized"
                raise RuntimeError(msg)
            return self._connection_manager

        def provide_telemetry() -> RelayTelemetry:
            """Dependency provider for RelayTelemetry."""
            if self._telemetry is None:
                msg = "Telemetry not initialized"
                raise RuntimeError(msg)
            return self._telemetry

        app_config.dependencies["connection_manager"] = Provide(
            provide_connection_manager,
            sync_to_thread=False,
        )
        app_config.dependencies["telemetry"] = Provide(
            provide_telemetry,
            sync_to_thread=False,
        )

        from pulse_py.realtime.handler import create_websocket_handler

        app_config.route_handlers.append(
            create_websocket_handler(
                path=self._config.ws_path,
                connection_manager=self._connection_manager,
                telemetry=self._telemetry,
                include_sender=self._config.include_sender,
            )
        )

        if self._config.enable_health:
            from pulse_py.web.health import HealthController

            app_config.route_handlers.append(HealthController)

        if self._config.enable_stats:
            from pulse_py.web.stats_controller import StatsController

            app_config.route_handlers.append(StatsController)

        if self._config.enable_ui:
            from pulse_py.web.ui import create_ui_router

            app_config.route_handlers.append(
                create_ui_router(static_path=self._config.static_path, static_dir=self._config.static_dir)
            )

        return app_config

    @property
    def connection_manager(self) -> ConnectionManager:
        """Get the initialized connection manager.

        Raises:
            RuntimeError: If the plugin has not been initialized yet
                (on_app_init not called).
        """
        if self._connection_manager is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._connection_manager

    @property
    def telemetry(self) -> RelayTelemetry:
        """Get the telemetry sink the relay reports to.

        Raises:
            RuntimeError: If the plugin has not been initialized yet.
        """
        if self._telemetry is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._telemetry
