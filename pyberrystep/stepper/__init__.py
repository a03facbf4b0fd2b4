"""
Stepper motor control by sequencing the coil activation phases over a set of
GPIO pins.
"""

from .modes import Phase, Mode, SINGLE, DUAL, MODES, get_mode
from .config import MotorConfig, load_motor_config
from .phase import Direction
from .events import StepperEvent, EventEmitter
from .timer import RepeatingTimer, TICKS_PER_SECOND
from .motor import Stepper

FORWARD = Direction.FORWARD
BACKWARD = Direction.BACKWARD

__all__ = [
    "Phase",
    "Mode",
    "SINGLE",
    "DUAL",
    "MODES",
    "get_mode",
    "MotorConfig",
    "load_motor_config",
    "Direction",
    "FORWARD",
    "BACKWARD",
    "StepperEvent",
    "EventEmitter",
    "RepeatingTimer",
    "TICKS_PER_SECOND",
    "Stepper"
]
