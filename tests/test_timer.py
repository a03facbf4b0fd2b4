import threading
import time

import pytest

from pyberrystep.stepper.timer import RepeatingTimer


def test_timer_ticks_until_cancelled():
    ticks = []
    done = threading.Event()

    def _tick():
        ticks.append(time.perf_counter())
        if len(ticks) == 5:
            done.set()

    timer = RepeatingTimer(_tick, interval=1000)
    timer.start()
    assert timer.active
    assert done.wait(timeout=5)
    timer.cancel()
    timer.join(timeout=5)
    assert not timer.active
    count = len(ticks)
    time.sleep(0.01)
    assert len(ticks) == count


def test_first_tick_after_one_interval():
    started = time.perf_counter()
    ticked = []
    done = threading.Event()

    def _tick():
        ticked.append(time.perf_counter())
        done.set()

    timer = RepeatingTimer(_tick, interval=20_000)
    timer.start()
    assert done.wait(timeout=5)
    timer.cancel()
    timer.join(timeout=5)
    assert ticked[0] - started >= 0.02


def test_cancel_from_inside_callback():
    ticks = []
    timer = None

    def _tick():
        ticks.append(1)
        timer.cancel()

    timer = RepeatingTimer(_tick, interval=100)
    timer.start()
    timer.join(timeout=5)
    assert ticks == [1]


def test_cancel_before_first_tick():
    ticks = []
    timer = RepeatingTimer(lambda: ticks.append(1), interval=500_000)
    timer.start()
    timer.cancel()
    timer.join(timeout=5)
    assert ticks == []


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        RepeatingTimer(lambda: None, interval=0)


def test_timer_starts_once():
    timer = RepeatingTimer(lambda: None, interval=100_000)
    timer.start()
    try:
        with pytest.raises(RuntimeError):
            timer.start()
    finally:
        timer.cancel()
        timer.join(timeout=5)
