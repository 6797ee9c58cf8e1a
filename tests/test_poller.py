"""Tests for the poller."""

import asyncio

import pytest

from contentdesk.poller import Poller


class ManualClock:
    """A sleep() stand-in that only returns when the test releases it."""

    def __init__(self):
        self.requested = []
        self._waiters = []

    async def sleep(self, seconds):
        self.requested.append(seconds)
        fut = asyncio.get_running_loop().create_future()
        self._waiters.append(fut)
        await fut

    def release(self):
        for fut in self._waiters:
            if not fut.done():
                fut.set_result(None)
        self._waiters.clear()


async def _settle():
    for _ in range(3):
        await asyncio.sleep(0)


def test_first_tick_is_immediate_then_every_interval():
    async def scenario():
        clock = ManualClock()
        ticks = []
        poller = Poller(sleep=clock.sleep)

        handle = poller.start(30_000, lambda: ticks.append("tick"))
        assert len(ticks) == 1

        await _settle()
        assert clock.requested == [30.0]
        assert len(ticks) == 1

        clock.release()
        await _settle()
        assert len(ticks) == 2
        assert handle.tick_count == 2

        poller.stop(handle)
        clock.release()
        await _settle()
        assert len(ticks) == 2
        assert handle.stopped

    asyncio.run(scenario())


def test_stop_before_next_tick_prevents_it():
    async def scenario():
        clock = ManualClock()
        ticks = []
        poller = Poller(sleep=clock.sleep)
        handle = poller.start(1_000, lambda: ticks.append(1))
        await _settle()
        handle.stop()
        handle.stop()
        clock.release()
        await _settle()
        assert ticks == [1]

    asyncio.run(scenario())


def test_async_ticks_run_without_blocking_timer():
    async def scenario():
        clock = ManualClock()
        gate = asyncio.Event()
        started = []

        async def slow_tick():
            started.append(1)
            await gate.wait()

        poller = Poller(sleep=clock.sleep)
        handle = poller.start(10, slow_tick)
        await _settle()
        assert handle.inflight == 1

        clock.release()
        await _settle()
        assert len(started) == 2
        assert handle.inflight == 2

        gate.set()
        await _settle()
        assert handle.inflight == 0
        poller.stop(handle)

    asyncio.run(scenario())


def test_failing_tick_does_not_stop_polling():
    async def scenario():
        clock = ManualClock()
        calls = []

        def flaky():
            calls.append(1)
            raise RuntimeError("boom")

        poller = Poller(sleep=clock.sleep)
        handle = poller.start(10, flaky)
        await _settle()
        clock.release()
        await _settle()
        assert len(calls) == 2
        poller.stop(handle)

    asyncio.run(scenario())


def test_start_validates_arguments():
    poller = Poller()
    with pytest.raises(ValueError):
        poller.start(0, lambda: None)
    with pytest.raises(TypeError):
        poller.start(1_000, None)
