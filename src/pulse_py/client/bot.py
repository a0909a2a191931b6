"""Test bot that emits pulses on a fixed interval for visual verification."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pulse_py.client.sync import PulseSyncClient

logger = structlog.get_logger(__name__)

BOT_COLOR = "#3399ff"
BOT_INTERVAL = 1.5
BOT_POSITION = (0.5, 0.5)


class PulseBot:
    """Emits a pulse at the surface centre every ``interval`` seconds.

    In local mode pulses only go into the client's own field; otherwise they
    are sent through the client like a user tap.
    """

    def __init__(
        self,
        client: PulseSyncClient,
        *,
        color: str = BOT_COLOR,
        interval: float = BOT_INTERVAL,
        position: tuple[float, float] = BOT_POSITION,
        local_only: bool = False,
    ) -> None:
        """Initialize the bot.

        Args:
            client: Sync client owning the pulse field and connection.
            color: Colour of emitted pulses.
            interval: Seconds between pulses.
            position: Normalized (x, y) of emitted pulses.
            local_only: Only spawn locally instead of broadcasting.
        """
        self.client = client
        self.color = color
        self.interval = interval
        self.position = position
        self.local_only = local_only
        self.emitted = 0
        self._task: asyncio.Task[None] | None = None

    async def emit(self) -> None:
        """Emit a single pulse."""
        x, y = self.position
        if self.local_only:
            self.client.field.spawn(x, y, self.color)
        else:
            await self.client.send_pulse(x, y, self.color)
        self.emitted += 1

    async def run(self, count: int | None = None) -> None:
        """Emit pulses until cancelled, or ``count`` times."""
        while count is None or self.emitted < count:
            await self.emit()
            logger.debug("Bot pulse", emitted=self.emitted, local_only=self.local_only)
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        """Start emitting in the background; a running bot is left alone."""
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.get_running_loop().create_task(self.run())

    def stop(self) -> None:
        """Stop a background bot."""
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
