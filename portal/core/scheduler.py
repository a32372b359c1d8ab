from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Protocol

from portal.core.logging import get_logger

logger = get_logger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...

    def call_every(
        self, interval: float, callback: Callable[[], Awaitable[None]]
    ) -> TimerHandle: ...


class _RepeatingTimer:
    """Fires ``callback`` every ``interval`` seconds, each tick as its own task.

    Ticks are not serialized: a slow tick keeps running while the next one starts.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval: float,
        callback: Callable[[], Awaitable[None]],
    ) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._ticks: set[asyncio.Task[None]] = set()
        self._cancelled = False
        self._handle = loop.call_later(interval, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        task = self._loop.create_task(self._run_tick())
        self._ticks.add(task)
        task.add_done_callback(self._ticks.discard)
        self._handle = self._loop.call_later(self._interval, self._fire)

    async def _run_tick(self) -> None:
        try:
            await self._callback()
        except Exception:
            logger.error("scheduled_tick_failed", exc_info=True)

    def cancel(self) -> None:
        """Stop firing and interrupt the ticks that are still running."""
        self._cancelled = True
        self._handle.cancel()
        current = asyncio.current_task()
        # A tick may end its own session; it finishes on its own
        for task in list(self._ticks):
            if task is not current:
                task.cancel()

    @property
    def closed(self) -> bool:
        return self._cancelled and not self._ticks

    async def wait_closed(self) -> None:
        if self._ticks:
            await asyncio.gather(*self._ticks, return_exceptions=True)


class AsyncioScheduler:
    """Timers on the running asyncio loop. Must be used from inside the loop."""

    def __init__(self) -> None:
        self._timers: set[_RepeatingTimer] = set()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)

    def call_every(
        self, interval: float, callback: Callable[[], Awaitable[None]]
    ) -> _RepeatingTimer:
        self._timers = {timer for timer in self._timers if not timer.closed}
        timer = _RepeatingTimer(asyncio.get_running_loop(), interval, callback)
        self._timers.add(timer)
        return timer

    async def aclose(self) -> None:
        """Cancel every periodic timer and wait until none of their ticks is running."""
        timers, self._timers = self._timers, set()
        for timer in timers:
            timer.cancel()
        for timer in timers:
            await timer.wait_closed()
