"""Tests for timer schedulers."""

from __future__ import annotations

import asyncio

import pytest

from rigbind.core.scheduling import AsyncioScheduler, ManualScheduler, Scheduler, TimerHandle


class TestManualScheduler:
    """Virtual clock behaviour."""

    def test_implements_protocol(self, scheduler: ManualScheduler) -> None:
        assert isinstance(scheduler, Scheduler)
        assert isinstance(scheduler.call_later(1, lambda: None), TimerHandle)

    def test_call_later_fires_once_when_due(self, scheduler: ManualScheduler) -> None:
        fired: list[float] = []
        scheduler.call_later(100, lambda: fired.append(scheduler.now()))

        assert scheduler.advance(99) == 0
        assert scheduler.advance(1) == 1
        assert scheduler.advance(1000) == 0
        assert fired == [100.0]

    def test_callbacks_fire_in_due_order(self, scheduler: ManualScheduler) -> None:
        order: list[str] = []
        scheduler.call_later(30, lambda: order.append("c"))
        scheduler.call_later(10, lambda: order.append("a"))
        scheduler.call_later(20, lambda: order.append("b"))

        scheduler.advance(50)

        assert order == ["a", "b", "c"]
        assert scheduler.now() == 50.0

    def test_call_every_repeats(self, scheduler: ManualScheduler) -> None:
        ticks: list[float] = []
        scheduler.call_every(25, lambda: ticks.append(scheduler.now()))

        scheduler.advance(100)

        assert ticks == [25.0, 50.0, 75.0, 100.0]

    def test_cancel_stops_repeating_timer(self, scheduler: ManualScheduler) -> None:
        ticks: list[float] = []
        timer = scheduler.call_every(10, lambda: ticks.append(scheduler.now()))

        scheduler.advance(25)
        timer.cancel()
        scheduler.advance(100)

        assert ticks == [10.0, 20.0]
        assert timer.cancelled
        assert scheduler.pending == 0

    def test_cancel_from_inside_callback(self, scheduler: ManualScheduler) -> None:
        ticks: list[float] = []

        def tick() -> None:
            ticks.append(scheduler.now())
            if len(ticks) == 2:
                timer.cancel()

        timer = scheduler.call_every(10, tick)
        scheduler.advance(100)

        assert ticks == [10.0, 20.0]

    def test_callback_can_schedule_more_work(self, scheduler: ManualScheduler) -> None:
        fired: list[float] = []
        scheduler.call_later(10, lambda: scheduler.call_later(5, lambda: fired.append(scheduler.now())))

        scheduler.advance(20)

        assert fired == [15.0]

    def test_non_positive_interval_rejected(self, scheduler: ManualScheduler) -> None:
        with pytest.raises(ValueError, match="interval_ms must be positive"):
            scheduler.call_every(0, lambda: None)

    def test_start_time(self) -> None:
        assert ManualScheduler(start_ms=500).now() == 500.0


class TestAsyncioScheduler:
    """Event-loop timers."""

    def test_call_later_and_cancel(self) -> None:
        async def run() -> list[str]:
            scheduler = AsyncioScheduler()
            fired: list[str] = []
            scheduler.call_later(1, lambda: fired.append("kept"))
            dropped = scheduler.call_later(1, lambda: fired.append("dropped"))
            dropped.cancel()
            await asyncio.sleep(0.05)
            assert dropped.cancelled
            return fired

        assert asyncio.run(run()) == ["kept"]

    def test_call_every_until_cancelled(self) -> None:
        async def run() -> int:
            scheduler = AsyncioScheduler()
            ticks: list[float] = []
            timer = scheduler.call_every(5, lambda: ticks.append(scheduler.now()))
            await asyncio.sleep(0.06)
            timer.cancel()
            count = len(ticks)
            await asyncio.sleep(0.03)
            assert len(ticks) == count
            return count

        assert asyncio.run(run()) >= 2

    def test_now_is_in_milliseconds(self) -> None:
        async def run() -> tuple[float, float]:
            loop = asyncio.get_running_loop()
            return AsyncioScheduler(loop).now(), loop.time() * 1000

        scheduled, reference = asyncio.run(run())
        assert abs(scheduled - reference) < 50
