import threading

import pytest

from pyberrystep.core import OutputDriver
from pyberrystep.stepper import Stepper, StepperEvent


class RecordingDriver(OutputDriver):
    """Output driver that keeps the line states in memory and logs all writes."""

    def __init__(self, fail_on_write: int | None = None) -> None:
        self.configured: list[int | str] = []
        self.writes: list[tuple[int | str, int]] = []
        self.states: dict[int | str, int] = {}
        self.closed = False
        self.fail_on_write = fail_on_write

    def configure_as_output(self, pin):
        self.configured.append(pin)
        self.states[pin] = 0

    def write_line(self, pin, value):
        if self.fail_on_write is not None and len(self.writes) == self.fail_on_write:
            raise OSError("GPIO write failed")
        self.writes.append((pin, value))
        self.states[pin] = value

    def close(self):
        self.closed = True

    def line_states(self, pins) -> tuple[int, ...]:
        return tuple(self.states[pin] for pin in pins)


class ManualTimer:
    """Timer whose ticks are triggered by the test instead of a thread."""

    def __init__(self, callback, interval, name=""):
        self.callback = callback
        self.interval = interval
        self.name = name
        self.started = False
        self.cancelled = False

    @property
    def active(self) -> bool:
        return self.started and not self.cancelled

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def tick(self, n: int = 1) -> None:
        for _ in range(n):
            if not self.active:
                return
            self.callback()

    def run_until_cancelled(self, max_ticks: int = 10_000) -> int:
        ticks = 0
        while self.active and ticks < max_ticks:
            self.callback()
            ticks += 1
        return ticks


class EventRecorder:

    def __init__(self, motor: Stepper) -> None:
        self.events: list[tuple] = []
        self._lock = threading.Lock()
        for event in StepperEvent:
            motor.on(event, self._recorder(event))

    def _recorder(self, event):
        def _record(*args):
            with self._lock:
                self.events.append((str(event), *args))
        return _record

    def names(self) -> list[str]:
        with self._lock:
            return [e[0] for e in self.events]

    def of(self, name: str) -> list[tuple]:
        with self._lock:
            return [e[1:] for e in self.events if e[0] == name]

    def clear(self) -> None:
        with self._lock:
            self.events.clear()


PINS = (17, 16, 13, 12)


@pytest.fixture
def driver() -> RecordingDriver:
    return RecordingDriver()


@pytest.fixture
def timers() -> list[ManualTimer]:
    return []


@pytest.fixture
def timer_class(timers):
    def _create(callback, interval, name=""):
        timer = ManualTimer(callback, interval, name)
        timers.append(timer)
        return timer
    return _create


@pytest.fixture
def make_motor(driver, timer_class):
    def _make(**kwargs) -> Stepper:
        kwargs.setdefault("pins", PINS)
        kwargs.setdefault("driver", driver)
        kwargs.setdefault("timer_class", timer_class)
        return Stepper(**kwargs)
    return _make


@pytest.fixture
def motor(make_motor) -> Stepper:
    return make_motor()


@pytest.fixture
def recorder(motor) -> EventRecorder:
    return EventRecorder(motor)
