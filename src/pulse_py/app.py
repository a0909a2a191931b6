"""Main Litestar application for pulse-py.

This module provides the application factory, the configured app instance,
and the ``serve`` entry point that runs the relay under uvicorn.
"""

from __future__ import annotations

import mimetypes
from typing import TYPE_CHECKING

from litestar import Litestar
from litestar.openapi import OpenAPIConfig

from pulse_py import __version__
from pulse_py.cli import PulseCLIPlugin
from pulse_py.core.error_handling import get_exception_handlers
from pulse_py.core.logging import configure_logging, get_middleware
from pulse_py.core.settings import ServerSettings, resolve_port
from pulse_py.plugin import PulseConfig, PulsePlugin

if TYPE_CHECKING:
    from pathlib import Path

# Slim container images may ship incomplete mimetypes
mimetypes.add_type("text/css", ".css")
mimetypes.add_type("application/javascript", ".js")


def create_app(
    *,
    debug: bool = False,
    json_logs: bool = False,
    config: PulseConfig | None = None,
) -> Litestar:
    """Create and configure the Litestar application.

    Args:
        debug: Whether to enable debug mode.
        json_logs: Whether to output logs as JSON (for production).
        config: Relay plugin configuration; defaults to PulseConfig().

    Returns:
        Configured Litestar application instance.
    """
    configure_logging(debug=debug, json_logs=json_logs)

    return Litestar(
        route_handlers=[],
        plugins=[PulseCLIPlugin(), PulsePlugin(config or PulseConfig())],
        debug=debug,
        middleware=get_middleware(),
        exception_handlers=get_exception_handlers(),
        openapi_config=OpenAPIConfig(
            title="pulse-py",
            version=__version__,
            description="Real-time shared pulse relay",
            path="/schema",
            use_handler_docstrings=True,
        ),
    )


def create_app_from_settings(settings: ServerSettings) -> Litestar:
    """Build the application from server settings."""
    static_dir: Path | None = None
    if settings.static_dir:
        from pathlib import Path

        static_dir = Path(settings.static_dir)

    return create_app(
        debug=settings.debug,
        json_logs=settings.json_logs,
        config=PulseConfig(
            ws_path=settings.ws_path,
            static_dir=static_dir,
            include_sender=settings.include_sender,
        ),
    )


def serve() -> None:
    """Run the relay with uvicorn, binding all interfaces on the configured port."""
    import structlog
    import uvicorn

    settings = ServerSettings.from_env()
    application = create_app_from_settings(settings)
    port = resolve_port(settings)

    structlog.get_logger(__name__).info(
        "HTTP+WS server starting",
        url=f"http://{settings.host}:{port}",
        ws_path=settings.ws_path,
    )
    uvicorn.run(application, host=settings.host, port=port, log_level="debug" if settings.debug else "info")


# Default application instance for `litestar run` and uvicorn
app = create_app_from_settings(ServerSettings.from_env())
