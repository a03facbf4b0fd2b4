"""
Stepper motor driver for the GPIO pins of a Raspberry Pi.
"""

from .stepper import *
from .core.exceptions import ConfigurationError, InvariantViolation

__version__ = "0.1.0"
