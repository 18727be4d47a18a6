"""
Delayed-task scheduling for the game engine.

The engine only needs `call_later(delay, callback, *args)` returning a handle
with `cancel()`. An asyncio event loop provides exactly that, so a host running
on asyncio passes its loop straight in. ManualScheduler is a virtual clock for
hosts without an event loop, and for tests.
"""

import heapq
import itertools
from typing import Any, Callable, List, Protocol, Tuple


class Handle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Handle: ...


class ScheduledCall:
    """A pending callback on a ManualScheduler."""

    def __init__(self, when: float, callback: Callable[..., Any], args: Tuple[Any, ...]):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def run(self) -> None:
        if not self.cancelled:
            self.callback(*self.args)


class ManualScheduler:
    """
    Deterministic scheduler driven by an explicit clock.

    Nothing runs until advance() moves the clock past a callback's due time.
    Callbacks due at the same time run in the order they were scheduled.

    Attributes:
        now: Current virtual time in seconds
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[Tuple[float, int, ScheduledCall]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ScheduledCall:
        call = ScheduledCall(self.now + max(0.0, delay), callback, args)
        heapq.heappush(self._queue, (call.when, next(self._counter), call))
        return call

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, running every callback that falls due.

        Callbacks scheduled by a running callback also run if they fall
        inside the window.

        Args:
            seconds: How far to move the clock

        Returns:
            Number of callbacks that ran

        Raises:
            ValueError: If seconds is negative
        """
        if seconds < 0:
            raise ValueError(f"Cannot move the clock backwards ({seconds}s)")

        deadline = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= deadline:
            when, _, call = heapq.heappop(self._queue)
            self.now = when
            if not call.cancelled:
                call.run()
                ran += 1
        self.now = deadline
        return ran

    @property
    def pending(self) -> int:
        """Number of scheduled callbacks that have not run or been cancelled."""
        return sum(1 for _, _, call in self._queue if not call.cancelled)
