"""Timer scheduling.

Learn timeouts, learn auto-reset and the autopilot tick all go through a
``Scheduler``. ``AsyncioScheduler`` runs on an event loop;
``ManualScheduler`` keeps a virtual clock that the host (or a test) advances
explicitly. All times are in milliseconds.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


@runtime_checkable
class TimerHandle(Protocol):
    """Handle to a scheduled callback."""

    def cancel(self) -> None:
        """Stop the callback from running (again). Idempotent."""
        ...

    @property
    def cancelled(self) -> bool: ...


@runtime_checkable
class Scheduler(Protocol):
    """Source of time and timers."""

    def now(self) -> float:
        """Current time in milliseconds."""
        ...

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        """Run ``callback`` once after ``delay_ms``."""
        ...

    def call_every(self, interval_ms: float, callback: Callback) -> TimerHandle:
        """Run ``callback`` every ``interval_ms`` until cancelled."""
        ...


class _ManualTimer:
    def __init__(self, interval_ms: float | None, callback: Callback):
        self.interval_ms = interval_ms
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler:
    """Deterministic scheduler driven by ``advance``.

    Example:
        >>> scheduler = ManualScheduler()
        >>> fired = []
        >>> _ = scheduler.call_later(100, lambda: fired.append(scheduler.now()))
        >>> _ = scheduler.advance(99)
        >>> fired
        []
        >>> _ = scheduler.advance(1)
        >>> fired
        [100.0]
    """

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = float(start_ms)
        self._queue: list[tuple[float, int, _ManualTimer]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def _push(self, due: float, timer: _ManualTimer) -> None:
        heapq.heappush(self._queue, (due, next(self._seq), timer))

    def call_later(self, delay_ms: float, callback: Callback) -> _ManualTimer:
        timer = _ManualTimer(None, callback)
        self._push(self._now + max(0.0, delay_ms), timer)
        return timer

    def call_every(self, interval_ms: float, callback: Callback) -> _ManualTimer:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        timer = _ManualTimer(interval_ms, callback)
        self._push(self._now + interval_ms, timer)
        return timer

    def advance(self, delta_ms: float) -> int:
        """Move the clock forward, running every timer that falls due.

        Timers fire in due-time order; the clock reads each timer's due time
        while its callback runs.

        Args:
            delta_ms: Milliseconds to advance

        Returns:
            Number of callbacks run
        """
        target = self._now + max(0.0, delta_ms)
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now = due
            if timer.interval_ms is not None:
                self._push(due + timer.interval_ms, timer)
            timer.callback()
            fired += 1
        self._now = target
        return fired

    @property
    def pending(self) -> int:
        """Number of live timers."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)


class _AsyncioRepeating:
    def __init__(self, loop: asyncio.AbstractEventLoop, interval_ms: float, callback: Callback):
        self._loop = loop
        self._interval = interval_ms / 1000.0
        self._callback = callback
        self._cancelled = False
        self._handle: asyncio.TimerHandle = loop.call_later(self._interval, self._run)

    def _run(self) -> None:
        if self._cancelled:
            return
        self._handle = self._loop.call_later(self._interval, self._run)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class _AsyncioOneShot:
    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop.

    Args:
        loop: Event loop to schedule on. Defaults to the running loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self._loop.time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callback) -> _AsyncioOneShot:
        return _AsyncioOneShot(self._loop.call_later(max(0.0, delay_ms) / 1000.0, callback))

    def call_every(self, interval_ms: float, callback: Callback) -> _AsyncioRepeating:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        return _AsyncioRepeating(self._loop, interval_ms, callback)


__all__ = [
    "AsyncioScheduler",
    "ManualScheduler",
    "Scheduler",
    "TimerHandle",
]
