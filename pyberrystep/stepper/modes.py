"""
Activation patterns of the motor coils.

A `Phase` holds the high/low value of each output line for a single step of
the motor. A `Mode` is the cycle of phases the coils pass through; every
phase of a mode must have one value per output line. The number of phases in
a mode is independent of the number of steps per motor revolution: the mode
is repeated over and over during a full revolution.
"""
from typing import Iterable, Sequence

from pyberrystep.core.exceptions import ConfigurationError


Phase = tuple[int, ...]
Mode = tuple[Phase, ...]


SINGLE: Mode = (
    (1, 0, 0, 0),
    (0, 1, 0, 0),
    (0, 0, 1, 0),
    (0, 0, 0, 1),
)

DUAL: Mode = (
    (1, 0, 0, 1),
    (0, 1, 0, 1),
    (0, 1, 1, 0),
    (1, 0, 1, 0),
)

MODES: dict[str, Mode] = {
    "SINGLE": SINGLE,
    "DUAL": DUAL,
}


def get_mode(name: str) -> Mode:
    """
    Returns the built-in mode with the given name ("single" or "dual", case
    insensitive).

    Raises
    ------
    ConfigurationError
        If no built-in mode with this name exists.
    """
    try:
        return MODES[name.upper()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown mode '{name}', expected one of {', '.join(MODES)}"
        ) from None


def to_mode(mode: str | Iterable[Sequence[int]]) -> Mode:
    """
    Returns `mode` as a tuple of tuples, so that it can no longer be changed
    by the caller. A string is looked up in the built-in modes.
    """
    if isinstance(mode, str):
        return get_mode(mode)
    mode = tuple(tuple(int(v) for v in phase) for phase in mode)
    if not mode:
        raise ConfigurationError("Mode must contain at least one phase")
    for i, phase in enumerate(mode):
        if any(v not in (0, 1) for v in phase):
            raise ConfigurationError(
                f"Mode step at index {i} has pin values other than 0 or 1",
                phase_index=i
            )
    return mode


def find_invalid_phase(mode: Mode, num_pins: int) -> int | None:
    """
    Returns the index of the first phase in `mode` that does not have exactly
    `num_pins` values, or `None` if all phases are valid.
    """
    for i, phase in enumerate(mode):
        if len(phase) != num_pins:
            return i
    return None


def validate_mode(mode: Mode, num_pins: int) -> None:
    """
    Raises a `ConfigurationError` if any phase of `mode` has the wrong number
    of pin values.
    """
    i = find_invalid_phase(mode, num_pins)
    if i is not None:
        raise ConfigurationError(
            f"Mode step at index {i} has the wrong number of pins "
            f"(expected {num_pins}, got {len(mode[i])})",
            phase_index=i
        )
