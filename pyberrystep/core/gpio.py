from abc import ABC, abstractmethod
import logging

from gpiozero import DigitalOutputDevice
from gpiozero.pins import Factory


class DigitalOutput:

    def __init__(
        self,
        pin: int | str,
        label: str = "",
        active_high: bool = True,
        pin_factory: Factory | None = None,
        initial_value: bool | int | None = False
    ) -> None:
        """Creates a `DigitalOutput` object.

        Parameters
        ----------
        pin:
            GPIO pin the digital output is connected to.
        label:
            Meaningful name for the digital output, e.g. the motor coil it
            drives. Only used in log messages.
        active_high:
            If `True`, the output will be HIGH (e.g. at 5 V or 3.3 V) when
            triggered (i.e. when writing 1 to it).
            If `False`, the opposite happens: the output will be LOW (pulled to
            GND) when the output is triggered.
        pin_factory:
            Abstraction layer that allows `gpiozero` to interface with the
            hardware-specific GPIO implementation behind the scenes. If `None`,
            the default pin factory of `gpiozero` is used.
        initial_value:
            The value that must be written to the output when it is created.
            The default is `False`, so that no motor coil is energized before
            the first step.
        """
        self.pin = pin
        self.label = label or f"GPIO{pin}"
        self.pin_factory = pin_factory
        self._device = DigitalOutputDevice(
            pin,
            active_high=active_high,
            initial_value=initial_value,
            pin_factory=pin_factory
        )

    def read(self) -> int:
        return self._device.value

    def write(self, value: bool | int) -> None:
        if value not in (0, 1):
            raise ValueError("Value must be 0/1 or `bool`.")
        self._device.value = bool(value)

    def close(self) -> None:
        self._device.close()


class OutputDriver(ABC):
    """
    Abstract interface to the digital output lines that drive the coils of a
    stepper motor.

    A `Stepper` calls `configure_as_output()` once per line when it is
    created, and `write_line()` on every step thereafter. Exceptions raised
    by a concrete driver are not caught by the `Stepper`.
    """
    @abstractmethod
    def configure_as_output(self, pin: int | str) -> None:
        """Prepares line `pin` to be driven as a digital output."""
        pass

    @abstractmethod
    def write_line(self, pin: int | str, value: int) -> None:
        """Drives line `pin` high (1) or low (0)."""
        pass

    def close(self) -> None:
        """Releases the lines held by the driver."""
        pass


class GPIOZeroDriver(OutputDriver):
    """
    `OutputDriver` for the GPIO pins of a Raspberry Pi, built on the
    `DigitalOutputDevice` class of `gpiozero`.
    """
    def __init__(
        self,
        pin_factory: Factory | None = None,
        use_pigpio: bool = False,
        logger: logging.Logger | None = None
    ) -> None:
        """Creates a `GPIOZeroDriver` object.

        Parameters
        ----------
        pin_factory:
            `gpiozero` pin factory to create the output devices with. If
            `None`, the default pin factory of `gpiozero` is used (unless
            `use_pigpio` is set).
        use_pigpio:
            Indicates to use the `PiGPIOFactory` of `gpiozero`. This requires
            that `pigpio` is installed on the Raspberry Pi, and that the
            `pigpiod` daemon is running in the background. Ignored when a
            `pin_factory` is passed.
        logger:
            `logging.Logger` object to log messages coming from the driver.
        """
        if pin_factory is None and use_pigpio:
            from gpiozero.pins.pigpio import PiGPIOFactory
            pin_factory = PiGPIOFactory()
        self.pin_factory = pin_factory
        self.logger = logger or logging.getLogger(__name__)
        self._outputs: dict[int | str, DigitalOutput] = {}

    def configure_as_output(self, pin: int | str) -> None:
        if pin in self._outputs:
            return
        self._outputs[pin] = DigitalOutput(pin, pin_factory=self.pin_factory)
        self.logger.debug(f"[GPIO{pin}] configured as output")

    def write_line(self, pin: int | str, value: int) -> None:
        try:
            output = self._outputs[pin]
        except KeyError:
            raise KeyError(f"Pin {pin} is not configured as output.") from None
        output.write(value)

    def read_line(self, pin: int | str) -> int:
        return self._outputs[pin].read()

    def close(self) -> None:
        for output in self._outputs.values():
            output.close()
        self._outputs.clear()
