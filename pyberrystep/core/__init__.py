"""
Core components shared by the stepper package: digital output drivers,
counters and exceptions.
"""

from .gpio import DigitalOutput, OutputDriver, GPIOZeroDriver
from .counters import CounterUp, CounterDown
from .exceptions import ConfigurationError, InvariantViolation


__all__ = [
    "DigitalOutput",
    "OutputDriver",
    "GPIOZeroDriver",
    "CounterUp",
    "CounterDown",
    "ConfigurationError",
    "InvariantViolation"
]
