"""Periodic refresh of computed health views."""

from __future__ import annotations

import asyncio
import inspect
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional, Union

logger = logging.getLogger(__name__)

RefreshCallback = Callable[[], Union[Any, Awaitable[Any]]]


class RefreshScheduler:
    """Invoke ``callback`` every ``interval_seconds`` until stopped.

    The scheduler owns no global state: whoever creates it starts and stops
    it, typically tied to the lifetime of the view being refreshed.
    """

    def __init__(self, callback: RefreshCallback, interval_seconds: float = 30.0) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._callback = callback
        self.interval_seconds = interval_seconds
        self.last_updated: Optional[datetime] = None
        self.ticks = 0
        self.failures = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self) -> None:
        """Run the callback once and record the refresh time."""
        result = self._callback()
        if inspect.isawaitable(result):
            await result
        self.ticks += 1
        self.last_updated = datetime.now(timezone.utc)
        logger.debug(f"Refresh #{self.ticks} completed at {self.last_updated.isoformat()}")

    async def run(self, lifespan: Optional[float] = None) -> None:
        """Refresh immediately, then on every interval.

        A failing callback is logged and retried on the next interval.

        Args:
            lifespan: Maximum time in seconds to keep refreshing. If None, runs
                until cancelled.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + lifespan if lifespan is not None else None

        while True:
            try:
                await self.tick()
            except Exception:
                self.failures += 1
                logger.exception(f"Refresh failed ({self.failures} so far); retrying next interval")
            if deadline is None:
                await asyncio.sleep(self.interval_seconds)
                continue
            remaining = deadline - loop.time()
            if remaining < self.interval_seconds:
                await asyncio.sleep(max(remaining, 0))
                break
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        """Schedule the refresh loop on the running event loop."""
        if self.running:
            raise RuntimeError("Refresh scheduler already running")
        self._task = asyncio.get_running_loop().create_task(self.run())
        logger.info(f"Refresh scheduler started (interval={self.interval_seconds}s)")

    async def stop(self) -> None:
        """Cancel the refresh loop and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Refresh scheduler stopped")
