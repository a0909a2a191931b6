"""Browser client routes: the page itself and its static assets."""

from __future__ import annotations

import os
from pathlib import Path

from litestar import Router, get
from litestar.response import File
from litestar.static_files import create_static_files_router


def get_static_directory() -> Path:
    """Get the directory holding the browser client.

    ``PULSE_STATIC_DIR`` overrides the assets bundled with the package.

    Returns:
        Path to the static files directory.
    """
    env_static = os.environ.get("PULSE_STATIC_DIR")
    if env_static:
        return Path(env_static)
    return Path(__file__).parent.parent / "static"


def create_ui_router(static_path: str = "/static", static_dir: Path | None = None) -> Router:
    """Create routes serving the browser client.

    Args:
        static_path: URL prefix for client assets.
        static_dir: Directory with index.html and assets; defaults to the bundled one.

    Returns:
        A Router serving ``/`` and the asset prefix.
    """
    directory = static_dir or get_static_directory()

    @get("/", include_in_schema=False)
    async def index() -> File:
        """Serve the client page."""
        return File(path=directory / "index.html", content_disposition_type="inline", media_type="text/html")

    static_router = create_static_files_router(path=static_path, directories=[directory], name="static")
    return Router(path="/", route_handlers=[index, static_router])
