from typing import Any, Iterable, Sequence
import tomllib
from pathlib import Path
from dataclasses import dataclass

from pyberrystep.core.exceptions import ConfigurationError
from .modes import Mode, DUAL, to_mode, validate_mode


@dataclass(frozen=True)
class MotorConfig:
    """
    Immutable configuration of a stepper motor.

    Attributes
    ----------
    pins : tuple[int | str, ...]
        GPIO pins (line identifiers) that drive the motor coils, in the order
        the values of a phase are written to them.
    steps : int
        Number of steps per motor revolution. Default is 200.
    mode : Mode
        Coil activation pattern. Default is `DUAL` (two coils active).
    speed : float
        Initial motor speed in revolutions per minute. Default is 1.

    Raises
    ------
    ConfigurationError
        If there are no pins, if `steps` is not a positive integer, or if a
        phase of the mode has the wrong number of pin values.
    """
    pins: tuple[int | str, ...]
    steps: int = 200
    mode: Mode = DUAL
    speed: float = 1.0

    def __post_init__(self) -> None:
        # Own copies of the caller's sequences, so the invariants below stay
        # valid after construction.
        object.__setattr__(self, "pins", tuple(self.pins))
        object.__setattr__(self, "mode", to_mode(self.mode))
        if not self.pins:
            raise ConfigurationError("At least one pin must be configured")
        if isinstance(self.steps, bool) or not isinstance(self.steps, int) or self.steps <= 0:
            raise ConfigurationError(
                f"Steps per revolution must be a positive integer, got {self.steps!r}"
            )
        if isinstance(self.speed, bool) or not isinstance(self.speed, (int, float)) or not self.speed > 0:
            raise ConfigurationError(f"Speed must be a positive number, got {self.speed!r}")
        validate_mode(self.mode, len(self.pins))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'MotorConfig':
        """
        Creates a `MotorConfig` from a dict, e.g. a table of a TOML file.
        Key "pins" is required; "steps", "mode" and "speed" are optional. The
        mode can be the name of a built-in mode or a list of phases.
        """
        try:
            pins: Iterable[int | str] = data["pins"]
        except KeyError:
            raise ConfigurationError("Motor configuration has no 'pins'") from None
        kwargs: dict[str, Any] = {"pins": tuple(pins)}
        if "steps" in data:
            kwargs["steps"] = data["steps"]
        if "mode" in data:
            mode: str | Sequence[Sequence[int]] = data["mode"]
            kwargs["mode"] = mode
        if "speed" in data:
            kwargs["speed"] = data["speed"]
        return cls(**kwargs)


def load_config(filepath: str | Path) -> dict[str, Any]:
    """Loads a TOML configuration file and returns its content as a dict."""
    with Path(filepath).open("rb") as f:
        return tomllib.load(f)


def load_motor_config(filepath: str | Path, section: str = "motor") -> MotorConfig:
    """
    Loads the motor configuration from table `section` of a TOML file.

    Raises
    ------
    ConfigurationError
        If the table is missing or holds an invalid configuration.
    """
    config = load_config(filepath)
    motor_cfg = config.get(section)
    if motor_cfg is None:
        raise ConfigurationError(f"No [{section}] table in {filepath}")
    return MotorConfig.from_dict(motor_cfg)
