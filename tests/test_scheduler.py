from __future__ import annotations

from typing import List

import pytest

from tetris_ai.game.scheduler import Scheduler


def test_timers_fire_in_due_order() -> None:
    sched = Scheduler()
    fired: List[str] = []
    sched.call_later(30, lambda: fired.append("c"))
    sched.call_later(10, lambda: fired.append("a"))
    sched.call_later(10, lambda: fired.append("b"))

    sched.advance(9)
    assert fired == []
    sched.advance(21)
    assert fired == ["a", "b", "c"]
    assert sched.now == 30


def test_cancelled_timer_never_fires() -> None:
    sched = Scheduler()
    fired: List[int] = []
    handle = sched.call_later(5, lambda: fired.append(1))

    handle.cancel()
    sched.advance(10)

    assert fired == []
    assert not handle.active
    assert sched.pending() == 0


def test_chained_timers_fire_within_one_advance() -> None:
    sched = Scheduler()
    times: List[float] = []

    def tick() -> None:
        times.append(sched.now)
        if len(times) < 4:
            sched.call_later(75, tick)

    sched.call_later(75, tick)
    sched.advance(1000)

    assert times == [75, 150, 225, 300]


def test_negative_values_rejected() -> None:
    sched = Scheduler()
    with pytest.raises(ValueError):
        sched.advance(-1)
    with pytest.raises(ValueError):
        sched.call_later(-5, lambda: None)
