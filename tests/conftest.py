"""Pytest configuration and fixtures for pulse-py tests."""

from __future__ import annotations

import pytest
from litestar import Litestar
from litestar.testing import TestClient

from pulse_py.core.animation import PulseField, Surface
from pulse_py.core.input import ColorPicker
from pulse_py.plugin import PulseConfig, PulsePlugin
from pulse_py.realtime.manager import ConnectionManager
from pulse_py.services.telemetry import RelayTelemetry


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


# Model fixtures


@pytest.fixture
def surface() -> Surface:
    """Create an 800x600 css surface on a 2x display."""
    return Surface(css_width=800, css_height=600, device_ratio=2.0)


@pytest.fixture
def field(surface: Surface) -> PulseField:
    """Create an empty pulse field on the sample surface."""
    return PulseField(surface)


@pytest.fixture
def picker() -> ColorPicker:
    """Create a colour picker with a fixed colour."""
    return ColorPicker(color="#ff8800")


# Relay fixtures


@pytest.fixture
def manager() -> ConnectionManager:
    """Create a fresh ConnectionManager instance for each test."""
    return ConnectionManager()


@pytest.fixture
def telemetry() -> RelayTelemetry:
    """Create a telemetry sink isolated from the process-global one."""
    return RelayTelemetry()


# App and client fixtures


@pytest.fixture
def plugin(manager: ConnectionManager, telemetry: RelayTelemetry) -> PulsePlugin:
    """Create a PulsePlugin wired to the per-test manager and telemetry."""
    return PulsePlugin(PulseConfig(connection_manager=manager, telemetry=telemetry))


@pytest.fixture
def app(plugin: PulsePlugin) -> Litestar:
    """Create a Litestar app with PulsePlugin for testing."""
    return Litestar(plugins=[plugin])


@pytest.fixture
def client(app: Litestar) -> TestClient[Litestar]:
    """Create a test client for the app."""
    return TestClient(app=app)
