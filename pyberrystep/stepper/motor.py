from typing import Any, Callable, Iterable, Sequence
from concurrent.futures import Future
from dataclasses import dataclass
import functools
import logging
import math
import threading

from pyberrystep.core import OutputDriver, GPIOZeroDriver, CounterUp, CounterDown
from pyberrystep.core.exceptions import InvariantViolation
from .config import MotorConfig
from .events import EventEmitter, StepperEvent, Listener
from .modes import Mode, Phase, DUAL
from .phase import Direction, advance
from .timer import RepeatingTimer, TICKS_PER_SECOND


TimerFactory = Callable[[Callable[[], None], float, str], Any]


@dataclass
class _Motion:
    """Book-keeping of the timed motion in progress."""
    generation: int
    direction: Direction
    remaining: CounterDown
    moved: CounterUp
    future: Future


class Stepper:
    """
    Drives a stepper motor by writing the phases of an activation mode to the
    output lines connected to its coils.

    Motions are executed by a repeating timer that writes one phase per tick.
    Only one motion runs at a time: starting a new motion cancels the one in
    progress. Every state transition is reported as an event (see
    `StepperEvent`); register listeners with `on()`.

    Examples
    --------
    >>> motor = Stepper(pins=[17, 16, 13, 12], steps=200)
    >>> motor.speed = 20
    >>> motor.move(200).result()  # one revolution forward
    200
    >>> motor.stop()
    """
    def __init__(
        self,
        pins: Iterable[int | str],
        steps: int = 200,
        mode: Mode | Sequence[Sequence[int]] | str = DUAL,
        speed: float = 1.0,
        driver: OutputDriver | None = None,
        logger: logging.Logger | None = None,
        name: str = "",
        timer_class: TimerFactory = RepeatingTimer
    ) -> None:
        """
        Creates a `Stepper` object.

        Parameters
        ----------
        pins:
            GPIO pins that drive the motor coils (e.g. the IN1..IN4 inputs of
            a ULN2003 board), in the order the values of a phase apply to.
        steps:
            Number of steps per motor revolution.
        mode:
            Coil activation mode: a built-in mode (`SINGLE`, `DUAL`, or its
            name) or a custom sequence of phases with one value per pin.
        speed:
            Initial motor speed in revolutions per minute.
        driver:
            `OutputDriver` that writes the output lines. If `None`, a
            `GPIOZeroDriver` with the default pin factory is created.
        logger:
            `logging.Logger` object. If specified, all motor events are logged
            through it (see `attach_logger()`).
        name:
            Optional name to identify the motor, e.g. in a log file.
        timer_class:
            Callable with signature `(callback, interval, name)` that returns
            a timer with `start()` and `cancel()` methods. The interval is in
            microseconds.

        Raises
        ------
        ConfigurationError
            If a phase of the mode does not have one value per pin. Nothing
            is written to the pins in that case.
        """
        self.config = MotorConfig(pins=tuple(pins), steps=steps, mode=mode, speed=speed)
        self.name = name or self.__class__.__name__
        self.logger = logger or logging.getLogger(__name__)
        self.timer_class = timer_class

        self._events = EventEmitter(StepperEvent)
        self._lock = threading.RLock()

        self.step_num: int = 0
        self.moving: bool = False
        self.direction: Direction | None = None
        self._powered: bool = False
        self._rpms: float = 0.0
        self._step_delay: float = 0.0

        self._timer: Any = None
        self._generation: int = 0
        self._motion: _Motion | None = None
        self._closed: bool = False
        self._steps_moved: int = 0

        if logger is not None:
            self.attach_logger(logger)
        self.speed = self.config.speed

        self.driver = driver or GPIOZeroDriver(logger=self.logger)
        for pin in self.pins:
            self.driver.configure_as_output(pin)

    @classmethod
    def from_config(cls, config: MotorConfig, **kwargs) -> 'Stepper':
        """
        Creates a `Stepper` from a `MotorConfig`. Keyword arguments are passed
        on to the constructor (`driver`, `logger`, `name`, `timer_class`).
        """
        return cls(
            pins=config.pins,
            steps=config.steps,
            mode=config.mode,
            speed=config.speed,
            **kwargs
        )

    @property
    def pins(self) -> tuple[int | str, ...]:
        return self.config.pins

    @property
    def steps(self) -> int:
        return self.config.steps

    @property
    def mode(self) -> Mode:
        return self.config.mode

    @property
    def powered(self) -> bool:
        """Returns whether any coil has been energized since the last power-down."""
        return self._powered

    @property
    def max_rpm(self) -> float:
        """
        Returns the maximum speed at which the motor can be stepped, as
        dictated by the timing resolution (microseconds). Note that this is
        not the top speed of the motor, it's the computer's.
        """
        return 60 * TICKS_PER_SECOND / self.steps

    @property
    def speed(self) -> float:
        """Returns the motor speed in RPM (after clamping to `max_rpm`)."""
        return self._rpms

    @speed.setter
    def speed(self, rpm: float) -> None:
        """
        Sets the motor speed in RPM. A speed above `max_rpm` is clamped to
        `max_rpm`. The new speed applies to the next motion that is started.

        Raises
        ------
        ValueError
            If `rpm` is not positive.
        """
        if not rpm > 0:
            raise ValueError("Speed must be positive.")
        with self._lock:
            self._rpms = min(rpm, self.max_rpm)
            self._step_delay = self.max_rpm / self._rpms
            self._events.emit(StepperEvent.SPEED, self._rpms, self._step_delay)

    @property
    def step_delay(self) -> float:
        """Returns the time between two steps of a motion in microseconds."""
        return self._step_delay

    def on(self, event: StepperEvent | str, listener: Listener) -> Listener:
        """Registers `listener` to be called each time `event` occurs."""
        return self._events.on(event, listener)

    def once(self, event: StepperEvent | str, listener: Listener) -> Listener:
        """Registers `listener` to be called the next time `event` occurs."""
        return self._events.once(event, listener)

    def off(self, event: StepperEvent | str, listener: Listener) -> None:
        """Removes a listener registered with `on()` or `once()`."""
        self._events.off(event, listener)

    def move(self, steps: int | float) -> Future:
        """
        Moves the motor a number of steps: forward if `steps` is positive,
        backward if negative. Pass `math.inf` (or `-math.inf`) to move until
        the motor is held or stopped. A motion in progress is cancelled first
        (a `cancel` event is emitted and its future is cancelled).

        Returns
        -------
        concurrent.futures.Future
            Future that resolves to the number of steps moved once the motion
            is complete. It is cancelled if the motion is superseded by another
            motion, or ended by `hold()` or `stop()`. For `steps == 0` the
            motor holds and the returned future is already resolved to 0.

        Raises
        ------
        ValueError
            If `steps` is NaN or a finite number that is not integral.
        """
        if math.isnan(steps) or (math.isfinite(steps) and steps != int(steps)):
            raise ValueError(f"Number of steps must be integral, got {steps!r}")
        with self._lock:
            if steps == 0:
                self.hold()
                future = Future()
                future.set_result(0)
                return future

            if self.moving:
                self._reset_timer()
                self._events.emit(StepperEvent.CANCEL)
                self.hold()

            self._generation += 1
            self.moving = True
            self.direction = Direction.from_steps(steps)
            remaining = abs(steps) if math.isinf(steps) else abs(int(steps))
            self._motion = _Motion(
                generation=self._generation,
                direction=self.direction,
                remaining=CounterDown(remaining),
                moved=CounterUp(),
                future=Future()
            )
            self._events.emit(StepperEvent.START, self.direction, steps)

            self._timer = self.timer_class(
                functools.partial(self._on_tick, self._generation),
                self._step_delay,
                f"{self.name}-motion-{self._generation}"
            )
            self._timer.start()
            return self._motion.future

    def run(self, direction: Direction | int = Direction.FORWARD) -> Future:
        """
        Runs the motor in the given direction until it is held, stopped, or
        commanded another motion.
        """
        return self.move(direction * math.inf)

    def hold(self) -> None:
        """
        Stops moving the motor and holds its position: the coils stay
        energized as they were after the last step.
        """
        with self._lock:
            self._stop_moving()
            self._events.emit(StepperEvent.HOLD)

    def stop(self) -> None:
        """Stops moving the motor and powers down all coils."""
        with self._lock:
            self.hold()
            self._power_down()
            self._events.emit(StepperEvent.STOP)

    def step(self, direction: Direction | int | None) -> int:
        """
        Moves the motor a single step in the given direction, immediately and
        outside any timed motion. Returns the current step number. If
        `direction` is not `Direction.FORWARD` or `Direction.BACKWARD`,
        nothing happens.
        """
        with self._lock:
            result = advance(self.step_num, self.steps, len(self.mode), direction)
            if result is None:
                return self.step_num
            self.step_num, phase = result
            pin_states = self.mode[phase]
            self._set_pin_states(pin_states)
            self._events.emit(StepperEvent.MOVE, Direction(direction), phase, pin_states)
            return self.step_num

    def step_forward(self) -> int:
        """Moves the motor a single step forward."""
        return self.step(Direction.FORWARD)

    def step_backward(self) -> int:
        """Moves the motor a single step backward."""
        return self.step(Direction.BACKWARD)

    def attach_logger(self, logger: logging.Logger) -> None:
        """
        Logs all motor events through `logger`: each step at DEBUG level, all
        other events at INFO level.
        """
        def _log(msg: str, level: int = logging.INFO) -> None:
            logger.log(level, f"[{self.name}] {msg}")

        self.on(StepperEvent.POWER, lambda powered: _log(
            f"power toggled (powered={powered})"
        ))
        self.on(StepperEvent.SPEED, lambda rpms, step_delay: _log(
            f"speed changed (rpms={rpms:g}, step delay={step_delay:g} us)"
        ))
        self.on(StepperEvent.HOLD, lambda: _log("holding position"))
        self.on(StepperEvent.START, lambda direction, steps: _log(
            f"starting motion (direction={direction!s}, steps={steps})"
        ))
        self.on(StepperEvent.STOP, lambda: _log("stopping"))
        self.on(StepperEvent.CANCEL, lambda: _log("cancelling previous motion"))
        self.on(StepperEvent.MOVE, lambda direction, phase, pin_states: _log(
            f"move one step (direction={direction!s}, phase={phase}, "
            f"pin states={list(pin_states)}, step={self.step_num})",
            logging.DEBUG
        ))
        self.on(StepperEvent.COMPLETE, lambda: _log(
            f"motion complete (steps={self._steps_moved})"
        ))

    def close(self) -> None:
        """Stops the motor, powers down the coils and releases the pins."""
        with self._lock:
            if self._closed:
                return
            self.stop()
            self.driver.close()
            self._closed = True

    def __enter__(self) -> 'Stepper':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _on_tick(self, generation: int) -> None:
        """
        Executes one tick of the timed motion with the given generation
        number. Ticks of a motion that is no longer current are ignored.
        """
        with self._lock:
            motion = self._motion
            if motion is None or motion.generation != generation:
                return
            if motion.remaining.done:
                # Detach the finished motion first: a `complete` listener may
                # start the next motion.
                self._motion = None
                self._stop_moving()
                self._steps_moved = motion.moved.value
                self._events.emit(StepperEvent.COMPLETE)
                if self._motion is None:
                    self.hold()
                if not motion.future.done():
                    motion.future.set_result(motion.moved.value)
                return
            try:
                self.step(motion.direction)
            except Exception as e:
                self.logger.error(f"[{self.name}] {type(e).__name__}: {e}")
                self._motion = None
                self._stop_moving()
                if not motion.future.done():
                    motion.future.set_exception(e)
                raise
            motion.remaining.count_down()
            motion.moved.count_up()

    def _stop_moving(self) -> None:
        self._reset_timer()
        self.moving = False
        if self._motion is not None:
            self._motion.future.cancel()
            self._motion = None

    def _reset_timer(self) -> None:
        # Invalidates ticks of the current motion that may still be on their
        # way from the timer thread.
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _power_down(self) -> None:
        self._powered = False
        self._set_pin_states((0,) * len(self.pins))
        self._events.emit(StepperEvent.POWER, False)

    def _set_pin_states(self, states: Phase) -> None:
        if len(states) != len(self.pins):
            raise InvariantViolation(
                f"Must pass exactly {len(self.pins)} pin states, got {len(states)}"
            )
        for pin, state in zip(self.pins, states):
            self.driver.write_line(pin, state)
            if not self._powered and state == 1:
                self._powered = True
                self._events.emit(StepperEvent.POWER, True)
