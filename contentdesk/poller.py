"""Recurring timer with an explicit start/stop lifecycle.

Whoever starts a poll owns its handle and must stop it on teardown; a handle
that is never stopped keeps its timer task alive for the life of the loop.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional

from contentdesk.config import DEFAULT_POLL_INTERVAL_MS

logger = logging.getLogger(__name__)

TickCallback = Callable[[], Any]
SleepFn = Callable[[float], Awaitable[Any]]


class PollHandle:
    """Handle for one running poll.  Returned by :meth:`Poller.start`."""

    def __init__(self, interval_ms: int, on_tick: TickCallback) -> None:
        self.interval_ms = interval_ms
        self.on_tick = on_tick
        self.tick_count = 0
        self._stopped = False
        self._timer: Optional[asyncio.Task] = None
        self._inflight: set[asyncio.Future] = set()

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def inflight(self) -> int:
        """Number of awaitable ticks that have not finished yet."""
        return len(self._inflight)

    def stop(self) -> None:
        """Cancel the timer.  In-flight ticks run to completion."""
        if self._stopped:
            return
        self._stopped = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class Poller:
    """Starts fixed-interval polls on the running asyncio loop.

    Parameters
    ----------
    sleep : callable
        Coroutine function used to wait between ticks.  Defaults to
        :func:`asyncio.sleep`; tests inject a fake clock.
    """

    def __init__(self, sleep: Optional[SleepFn] = None) -> None:
        self._sleep = sleep or asyncio.sleep

    def start(
        self,
        interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        on_tick: Optional[TickCallback] = None,
    ) -> PollHandle:
        """Invoke *on_tick* now, then every *interval_ms* until stopped.

        Must be called from inside a running event loop.
        """
        if on_tick is None:
            raise TypeError("on_tick is required")
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")

        loop = asyncio.get_running_loop()
        handle = PollHandle(interval_ms, on_tick)
        self._fire(handle)
        handle._timer = loop.create_task(self._run(handle))
        logger.debug("Poll started (every %d ms)", interval_ms)
        return handle

    def stop(self, handle: PollHandle) -> None:
        handle.stop()
        logger.debug("Poll stopped after %d ticks", handle.tick_count)

    # -- internals -----------------------------------------------------------

    async def _run(self, handle: PollHandle) -> None:
        interval = handle.interval_ms / 1000
        while not handle.stopped:
            await self._sleep(interval)
            if handle.stopped:
                break
            self._fire(handle)

    def _fire(self, handle: PollHandle) -> None:
        # Ticks are never awaited here: a slow tick must not push back the next one.
        handle.tick_count += 1
        try:
            result = handle.on_tick()
        except Exception:
            logger.exception("Poll tick %d failed", handle.tick_count)
            return
        if inspect.isawaitable(result):
            future = asyncio.ensure_future(result)
            handle._inflight.add(future)
            future.add_done_callback(lambda f: self._tick_done(handle, f))

    @staticmethod
    def _tick_done(handle: PollHandle, future: asyncio.Future) -> None:
        handle._inflight.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Poll tick failed: %s", exc, exc_info=exc)
