"""Minimal example embedding the pulse relay in your own Litestar app.

This example demonstrates how to mount pulse-py next to your own routes
using the plugin system.

The application will:
    - Relay pulses between every client connected to /ws
    - Serve the bundled browser client at /
    - Expose /health, /ready and /stats
    - Keep the sender out of its own fan-out (include_sender=False)

Running the Application:
    python examples/app.py

Then open http://127.0.0.1:8000/ in two browser windows and tap either one.

Watching from a terminal:
    litestar --app examples.app:app pulse --origin http://127.0.0.1:8000 listen

Sending test pulses:
    litestar --app examples.app:app pulse --origin http://127.0.0.1:8000 bot --count 5
"""

from __future__ import annotations

from litestar import Litestar, get

from pulse_py import PulseConfig, PulsePlugin
from pulse_py.cli import PulseCLIPlugin
from pulse_py.realtime import ConnectionManager

connections = ConnectionManager()


@get("/peers")
async def peers() -> dict[str, int]:
    """Number of browsers currently connected to the relay."""
    return {"peers": connections.total_connections}


# Create the Litestar app with the pulse relay plugin
app = Litestar(
    route_handlers=[peers],
    plugins=[
        PulseCLIPlugin(),
        PulsePlugin(
            PulseConfig(
                # Share the manager so /peers can read it
                connection_manager=connections,
                # Peers draw their own taps locally already
                include_sender=False,
            )
        ),
    ],
    debug=True,
)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="127.0.0.1",
        port=8000,
        log_level="info",
    )
