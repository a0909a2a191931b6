"""Client-side CLI commands for pulse-py.

Adds a ``pulse`` command group to the Litestar CLI for watching, exercising
and snapshotting a running relay from a terminal.
"""

from __future__ import annotations

import asyncio
import time
from contextlib import suppress
from pathlib import Path
from typing import TYPE_CHECKING

import rich_click as click
from litestar.plugins import CLIPluginProtocol
from rich.console import Console

from pulse_py.client.bot import BOT_COLOR, BOT_INTERVAL, PulseBot
from pulse_py.client.sync import PulseSyncClient, derive_ws_url
from pulse_py.core.animation import FrameClock, PulseField, Surface
from pulse_py.core.color import to_hex
from pulse_py.core.logging import configure_logging
from pulse_py.services.snapshot import FrameRenderer

if TYPE_CHECKING:
    from pulse_py.core.models import Pulse

console = Console()

DEFAULT_ORIGIN = "http://127.0.0.1:3000"
FRAME_INTERVAL = 1 / 60


def _resolve_url(origin: str, ws_path: str) -> str:
    if origin.startswith(("ws://", "wss://")):
        return origin
    return derive_ws_url(origin, ws_path)


async def _run_for(coro_factories: list, seconds: float | None) -> None:
    """Run coroutines together, cancelling them after ``seconds`` (or never)."""
    tasks = [asyncio.create_task(factory()) for factory in coro_factories]
    try:
        if seconds is None:
            await asyncio.gather(*tasks)
        else:
            await asyncio.wait(tasks, timeout=seconds)
    finally:
        for task in tasks:
            task.cancel()
        for task in tasks:
            with suppress(asyncio.CancelledError):
                await task


@click.group(name="pulse", help="Connect to a pulse relay from the terminal.")
@click.option("--origin", "-o", default=DEFAULT_ORIGIN, show_default=True, help="Relay page origin or ws:// URL")
@click.option("--ws-path", default="/ws", show_default=True, help="Relay endpoint path")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def pulse_group(ctx: click.Context, origin: str, ws_path: str, debug: bool) -> None:
    """Connect to a pulse relay from the terminal."""
    configure_logging(debug=debug)
    ctx.obj = {"url": _resolve_url(origin, ws_path)}


@pulse_group.command(name="listen", help="Print every pulse relayed by the server.")
@click.option("--seconds", "-s", type=float, default=None, help="Stop after this many seconds")
@click.pass_context
def listen(ctx: click.Context, seconds: float | None) -> None:
    """Print every pulse relayed by the server."""
    url = ctx.obj["url"]
    field = PulseField(Surface(css_width=1.0, css_height=1.0))

    def show(pulse: Pulse) -> None:
        console.print(
            f"[magenta]{time.strftime('%H:%M:%S')}[/magenta] "
            f"pulse x=[cyan]{pulse.norm_x:.3f}[/cyan] y=[cyan]{pulse.norm_y:.3f}[/cyan] "
            f"color=[bold]{to_hex(pulse.rgb)}[/bold]"
        )
        field.clear()

    client = PulseSyncClient(url, field, on_pulse=show)
    console.print(f"[cyan]Listening on {url}[/cyan] (Ctrl+C to stop)")
    with suppress(KeyboardInterrupt):
        asyncio.run(_run_for([client.run], seconds))


@pulse_group.command(name="bot", help="Emit test pulses at the centre of the surface.")
@click.option("--color", "-c", default=BOT_COLOR, show_default=True, help="Pulse colour (#rrggbb)")
@click.option("--interval", "-i", type=float, default=BOT_INTERVAL, show_default=True, help="Seconds between pulses")
@click.option("--count", "-n", type=int, default=None, help="Stop after this many pulses")
@click.option("--x", "x_norm", type=float, default=0.5, show_default=True, help="Normalized x position")
@click.option("--y", "y_norm", type=float, default=0.5, show_default=True, help="Normalized y position")
@click.pass_context
def bot(
    ctx: click.Context,
    color: str,
    interval: float,
    count: int | None,
    x_norm: float,
    y_norm: float,
) -> None:
    """Emit test pulses at a fixed position."""
    url = ctx.obj["url"]
    client = PulseSyncClient(url, PulseField(Surface(css_width=1.0, css_height=1.0)))
    pulse_bot = PulseBot(client, color=color, interval=interval, position=(x_norm, y_norm))

    async def run_bot() -> None:
        # Give the connection a moment before the first pulse.
        await asyncio.sleep(client.reconnect_delay)
        await pulse_bot.run(count)
        await client.stop()

    console.print(f"[cyan]Sending {color} pulses to {url} every {interval}s[/cyan]")
    with suppress(KeyboardInterrupt):
        asyncio.run(_run_for([client.run, run_bot], None if count is None else count * interval + 2))
    console.print(f"[green]Sent {pulse_bot.emitted} pulses[/green]")


@pulse_group.command(name="snapshot", help="Watch the relay and save the final frame as PNG.")
@click.option("--seconds", "-s", type=float, default=5.0, show_default=True, help="How long to watch")
@click.option("--out", "out_path", type=click.Path(dir_okay=False, path_type=Path), default=Path("pulse.png"))
@click.option("--width", type=int, default=640, show_default=True, help="Surface width (css px)")
@click.option("--height", type=int, default=480, show_default=True, help="Surface height (css px)")
@click.option("--ratio", type=float, default=1.0, show_default=True, help="Device pixel ratio")
@click.pass_context
def snapshot(ctx: click.Context, seconds: float, out_path: Path, width: int, height: int, ratio: float) -> None:
    """Animate relayed pulses headlessly and write the last frame."""
    url = ctx.obj["url"]
    surface = Surface(css_width=width, css_height=height, device_ratio=ratio)
    field = PulseField(surface)
    renderer = FrameRenderer(surface)
    client = PulseSyncClient(url, field)
    clock = FrameClock()

    async def animate() -> None:
        while True:
            renderer.render(field.step(clock.tick(time.perf_counter())))
            await asyncio.sleep(FRAME_INTERVAL)

    console.print(f"[cyan]Watching {url} for {seconds}s[/cyan]")
    with suppress(KeyboardInterrupt):
        asyncio.run(_run_for([client.run, animate], seconds))

    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(renderer.to_png())
    console.print(f"[green]Saved frame to {out_path}[/green]")


class PulseCLIPlugin(CLIPluginProtocol):
    """CLI plugin that adds the ``pulse`` command group.

    Subcommands:
    - listen: Print relayed pulses
    - bot: Emit test pulses
    - snapshot: Render relayed pulses to a PNG
    """

    def on_cli_init(self, cli: click.Group) -> None:
        """Register the pulse command group."""
        cli.add_command(pulse_group)
