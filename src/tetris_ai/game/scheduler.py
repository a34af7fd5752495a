from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, List, Optional


Callback = Callable[[], None]


@dataclass(order=True)
class TimerHandle:
    due: float
    seq: int
    callback: Optional[Callback] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True
        self.callback = None

    @property
    def active(self) -> bool:
        return not self.cancelled and self.callback is not None


class Scheduler:
    """Virtual millisecond clock with one-shot timers.

    Nothing runs until `advance` is called. Timers fire in due-time order
    (ties in scheduling order); a callback may schedule further timers,
    which fire within the same `advance` call if they fall due in it.
    """

    def __init__(self) -> None:
        self.now: float = 0.0
        self._queue: List[TimerHandle] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")
        handle = TimerHandle(self.now + delay, next(self._seq), callback)
        heapq.heappush(self._queue, handle)
        return handle

    def advance(self, dt: float) -> None:
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        target = self.now + dt
        while self._queue and self._queue[0].due <= target:
            handle = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self.now = max(self.now, handle.due)
            callback = handle.callback
            handle.callback = None
            callback()
        self.now = target

    def pending(self) -> int:
        return sum(1 for h in self._queue if h.active)

    def clear(self) -> None:
        for h in self._queue:
            h.cancel()
        self._queue.clear()
