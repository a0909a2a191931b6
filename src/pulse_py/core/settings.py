"""Server settings for the pulse relay, read from the environment."""

from __future__ import annotations

import os
import socket
from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_HOST = "0.0.0.0"  # noqa: S104
DEFAULT_PORT = 3000

_TRUTHY = ("true", "1", "yes")


def _env_flag(name: str, *, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value.lower() in _TRUTHY


def _env_port(name: str, default: int | None) -> int | None:
    value = os.environ.get(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring invalid port setting", variable=name, value=value)
        return default


@dataclass
class ServerSettings:
    """Relay process configuration.

    Attributes:
        host: Interface to bind; all interfaces by default.
        port: Primary port.
        fallback_port: Port used when the primary one is already bound.
        debug: Debug mode and debug-level logging.
        json_logs: Emit logs as JSON.
        ws_path: Path of the relay WebSocket endpoint.
        static_dir: Override directory for the browser client assets.
        include_sender: Echo pulses back to the connection that sent them.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    fallback_port: int | None = None
    debug: bool = False
    json_logs: bool = False
    ws_path: str = "/ws"
    static_dir: str | None = None
    include_sender: bool = True

    @classmethod
    def from_env(cls) -> ServerSettings:
        """Create settings from environment variables.

        Environment variables:
            HOST: Bind address (default 0.0.0.0).
            PORT: Primary port (default 3000).
            PULSE_FALLBACK_PORT: Secondary port if PORT is in use.
            PULSE_DEBUG: "true" enables debug mode.
            PULSE_JSON_LOGS: "true" switches to JSON logs.
            PULSE_WS_PATH: Relay endpoint path (default /ws).
            PULSE_STATIC_DIR: Directory holding index.html and client assets.
            PULSE_INCLUDE_SENDER: "false" stops echoing pulses to their sender.

        Returns:
            ServerSettings configured from environment.
        """
        return cls(
            host=os.environ.get("HOST", DEFAULT_HOST) or DEFAULT_HOST,
            port=_env_port("PORT", DEFAULT_PORT) or DEFAULT_PORT,
            fallback_port=_env_port("PULSE_FALLBACK_PORT", None),
            debug=_env_flag("PULSE_DEBUG", default=False),
            json_logs=_env_flag("PULSE_JSON_LOGS", default=False),
            ws_path=os.environ.get("PULSE_WS_PATH", "/ws") or "/ws",
            static_dir=os.environ.get("PULSE_STATIC_DIR") or None,
            include_sender=_env_flag("PULSE_INCLUDE_SENDER", default=True),
        )


def port_available(host: str, port: int) -> bool:
    """Check whether ``port`` can be bound on ``host``."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as candidate:
        candidate.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            candidate.bind((host, port))
        except OSError:
            return False
    return True


def resolve_port(settings: ServerSettings) -> int:
    """Pick the port to listen on.

    Returns the primary port unless it is already bound and a fallback port
    is configured.
    """
    if settings.fallback_port is None or port_available(settings.host, settings.port):
        return settings.port
    logger.warning(
        "Primary port in use, using fallback port",
        port=settings.port,
        fallback_port=settings.fallback_port,
    )
    return settings.fallback_port
