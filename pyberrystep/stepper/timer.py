from typing import Callable
import time
import threading


TICKS_PER_SECOND = 1_000_000  # timer resolution: microseconds

# Waits shorter than this are done by polling `time.perf_counter()`, as
# `threading.Event.wait()` is too coarse for them.
SPIN_THRESHOLD = 2e-3  # seconds


class RepeatingTimer:
    """
    Calls a function repeatedly in a background thread with a fixed interval,
    until the timer is cancelled. The first call happens one interval after
    `start()`.

    The call times are derived from a reference time that is incremented
    with the interval on each tick, so that the time spent inside the
    callback does not accumulate as drift.
    """
    def __init__(
        self,
        callback: Callable[[], None],
        interval: float,
        name: str = "RepeatingTimer"
    ) -> None:
        """
        Creates a `RepeatingTimer`.

        Parameters
        ----------
        callback:
            Function without arguments, called on each tick.
        interval:
            Time between successive ticks in microseconds.
        name:
            Name of the background thread.
        """
        if interval <= 0:
            raise ValueError("Interval must be positive.")
        self.callback = callback
        self.interval = interval
        self.name = name
        self._cancelled = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def active(self) -> bool:
        """Returns whether the timer has been started and not yet cancelled."""
        return self._thread is not None and not self._cancelled.is_set()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("Timer can only be started once.")
        self._thread = threading.Thread(
            target=self._tick_loop,
            name=self.name,
            daemon=True
        )
        self._thread.start()

    def cancel(self) -> None:
        """
        Stops the timer. Returns immediately, without waiting for a callback
        that is in progress; no new callback starts after this returns.
        """
        self._cancelled.set()

    def join(self, timeout: float | None = None) -> None:
        """Waits until the background thread has ended."""
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def _wait_until(self, t_ref: float) -> bool:
        """
        Waits until `time.perf_counter()` reaches `t_ref`. Returns `False` if
        the timer was cancelled in the meantime.
        """
        remaining = t_ref - time.perf_counter()
        if remaining > SPIN_THRESHOLD:
            if self._cancelled.wait(remaining - SPIN_THRESHOLD):
                return False
        while time.perf_counter() < t_ref:
            if self._cancelled.is_set():
                return False
        return not self._cancelled.is_set()

    def _tick_loop(self) -> None:
        delay = self.interval / TICKS_PER_SECOND
        t_ref = time.perf_counter()
        while True:
            t_ref += delay
            if not self._wait_until(t_ref):
                break
            self.callback()
