"""
Periodic snapshot refresh.

State machine: IDLE -> FETCHING -> READY -> FETCHING -> READY -> ...

The clock and sleep functions are injectable so tests can advance virtual
time instead of waiting on the wall clock.
"""
from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from typing import Awaitable, Callable, Optional

from informed360.core.cache import CacheStore
from informed360.models import Snapshot

logger = logging.getLogger(__name__)


class RefreshState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    READY = "ready"


class RefreshScheduler:
    """Single writer of the CacheStore."""

    def __init__(
        self,
        store: CacheStore,
        build: Callable[[], Awaitable[Snapshot]],
        interval_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        poll_seconds: Optional[float] = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.store = store
        self.interval_seconds = interval_seconds
        self.poll_seconds = poll_seconds or interval_seconds
        self.failures = 0
        self._build = build
        self._clock = clock
        self._sleep = sleep
        self._state = RefreshState.READY if store.ready else RefreshState.IDLE
        self._last_attempt: Optional[float] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> RefreshState:
        return self._state

    def _settle(self) -> None:
        self._state = RefreshState.READY if self.store.ready else RefreshState.IDLE

    def due(self) -> bool:
        if self._last_attempt is None:
            return True
        return self._clock() - self._last_attempt >= self.interval_seconds

    async def refresh_once(self) -> bool:
        """
        Build and publish a new snapshot.

        Returns:
            True if a snapshot was published. On failure the previous
            snapshot stays in place and False is returned.
        """
        if self._state is RefreshState.FETCHING:
            logger.debug("Refresh already in progress; skipping")
            return False

        self._state = RefreshState.FETCHING
        self._last_attempt = started = self._clock()
        try:
            snapshot = await self._build()
        except asyncio.CancelledError:
            self._settle()
            raise
        except Exception:
            self.failures += 1
            self._settle()
            logger.exception("Snapshot refresh failed; keeping previous snapshot")
            return False

        self.store.publish(snapshot)
        self._state = RefreshState.READY
        logger.info(
            "Snapshot refreshed in %.1fs: %d articles, %d topics",
            self._clock() - started,
            len(snapshot.articles),
            len(snapshot.clusters),
        )
        return True

    async def tick(self) -> bool:
        """Refresh if the interval has elapsed since the last attempt."""
        if not self.due():
            return False
        return await self.refresh_once()

    async def run(self) -> None:
        while True:
            await self._sleep(self.poll_seconds)
            await self.tick()

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
