"""Cancellable repeating timers.

The game never talks to wall-clock timers directly.  It asks a scheduler for
repeating tasks and cancels them on pause, speed change or game over.  Two
schedulers are provided:

``ManualScheduler``
    A virtual clock that only moves when :meth:`ManualScheduler.advance` is
    called.  Tests drive it synchronously and frame-based hosts can feed it
    their frame delta.

``AsyncioScheduler``
    Backed by ``loop.call_later`` so callbacks run on the event loop thread,
    between the host's own coroutines.
"""

from __future__ import annotations

import asyncio
import itertools
from typing import Callable, List, Optional, Protocol

Callback = Callable[[], None]


class RepeatingTask:
    """Handle for a callback that fires every ``interval_ms`` milliseconds."""

    def __init__(self, interval_ms: int, callback: Callback) -> None:
        if interval_ms <= 0:
            raise ValueError(f"Interval must be positive, got {interval_ms}")
        self.interval_ms = interval_ms
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler(Protocol):
    def call_every(self, interval_ms: int, callback: Callback) -> RepeatingTask:
        ...


class _ManualTask(RepeatingTask):
    def __init__(self, interval_ms: int, callback: Callback, due: float, order: int) -> None:
        super().__init__(interval_ms, callback)
        self.due = due
        self.order = order


class ManualScheduler:
    """Deterministic scheduler driven by explicit calls to :meth:`advance`."""

    def __init__(self) -> None:
        self.now: float = 0.0
        self._tasks: List[_ManualTask] = []
        self._order = itertools.count()

    def call_every(self, interval_ms: int, callback: Callback) -> RepeatingTask:
        task = _ManualTask(interval_ms, callback, self.now + interval_ms, next(self._order))
        self._tasks.append(task)
        return task

    @property
    def pending(self) -> List[RepeatingTask]:
        """Tasks that have not been cancelled yet."""

        return [task for task in self._tasks if not task.cancelled]

    def advance(self, ms: float) -> None:
        """Move the clock forward by ``ms`` and fire every due callback.

        Callbacks run one at a time in due-time order, ties broken by creation
        order.  A callback may cancel or schedule tasks; tasks created while
        advancing start counting from the moment they were created.
        """

        target = self.now + ms
        while True:
            due = [t for t in self._tasks if not t.cancelled and t.due <= target]
            if not due:
                break
            task = min(due, key=lambda t: (t.due, t.order))
            self.now = task.due
            task.due += task.interval_ms
            task.callback()
        self.now = target
        self._tasks = self.pending


class _AsyncioTask(RepeatingTask):
    def __init__(self, loop: asyncio.AbstractEventLoop, interval_ms: int, callback: Callback) -> None:
        super().__init__(interval_ms, callback)
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None

    def _schedule(self) -> None:
        self._handle = self._loop.call_later(self.interval_ms / 1000.0, self._fire)

    def _fire(self) -> None:
        if self.cancelled:
            return
        self._schedule()
        self.callback()

    def cancel(self) -> None:
        super().cancel()
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class AsyncioScheduler:
    """Scheduler running callbacks on an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_every(self, interval_ms: int, callback: Callback) -> RepeatingTask:
        task = _AsyncioTask(self.loop, interval_ms, callback)
        task._schedule()
        return task


__all__ = ["AsyncioScheduler", "ManualScheduler", "RepeatingTask", "Scheduler"]
