"""Recurring refresh loop."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class PollingLoop:
    """Runs a refresh callback every `interval` seconds.

    At most one loop task exists at a time: starting a running loop
    replaces its task. Callback failures are logged and the loop keeps
    its fixed schedule.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[None]],
        interval: float = 10.0,
        name: str = "poll",
    ):
        self.callback = callback
        self.interval = interval
        self.name = name
        self.ticks = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the loop, replacing a running one."""
        if self.running:
            self._task.cancel()
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.debug(f"Polling loop '{self.name}' started ({self.interval}s)")

    async def stop(self) -> None:
        """Stop the loop and wait for its task to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        if not task.done():
            task.cancel()
        await asyncio.wait({task})
        logger.debug(f"Polling loop '{self.name}' stopped after {self.ticks} ticks")

    async def restart(self) -> None:
        await self.stop()
        self.start()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.callback()
            except Exception as e:
                logger.warning(f"Polling tick failed: {type(e).__name__}: {e}")
            self.ticks += 1
