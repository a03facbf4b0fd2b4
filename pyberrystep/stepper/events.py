from typing import Any, Callable, Iterable
from enum import StrEnum


class StepperEvent(StrEnum):
    SPEED = "speed"        # (rpm, step_delay)
    START = "start"        # (direction, requested_steps)
    MOVE = "move"          # (direction, phase, pin_states)
    CANCEL = "cancel"
    COMPLETE = "complete"
    HOLD = "hold"
    POWER = "power"        # (powered)
    STOP = "stop"


Listener = Callable[..., Any]


class EventEmitter:
    """
    Keeps a registry of listeners per event name and calls them, in order of
    registration, each time the event is emitted.

    Exceptions raised by a listener are not caught: they propagate to the
    code that emitted the event.
    """
    def __init__(self, events: Iterable[str] | None = None) -> None:
        """
        Creates an `EventEmitter`.

        Parameters
        ----------
        events:
            Names of the events that can be listened to. If `None`, any name
            is accepted.
        """
        self._events = frozenset(events) if events is not None else None
        self._listeners: dict[str, list[Listener]] = {}

    def _check_event(self, event: str) -> None:
        if self._events is not None and event not in self._events:
            raise ValueError(f"Unknown event: {event!r}")

    def on(self, event: str, listener: Listener) -> Listener:
        """
        Registers `listener` to be called on each `event` and returns it.
        """
        self._check_event(event)
        self._listeners.setdefault(event, []).append(listener)
        return listener

    def once(self, event: str, listener: Listener) -> Listener:
        """Registers `listener` to be called on the next `event` only."""
        def _wrapper(*args: Any) -> None:
            self.off(event, _wrapper)
            listener(*args)
        _wrapper.listener = listener
        return self.on(event, _wrapper)

    def off(self, event: str, listener: Listener) -> None:
        """Removes `listener` from `event`. Unknown listeners are ignored."""
        listeners = self._listeners.get(event, [])
        for registered in listeners:
            if registered is listener or getattr(registered, "listener", None) is listener:
                listeners.remove(registered)
                return

    def emit(self, event: str, *args: Any) -> bool:
        """
        Calls the listeners of `event` with `args`. Returns `True` if the
        event had listeners.
        """
        # Listeners may (un)register listeners while being called.
        listeners = list(self._listeners.get(event, []))
        for listener in listeners:
            listener(*args)
        return bool(listeners)
