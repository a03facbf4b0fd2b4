class ConfigurationError(Exception):

    def __init__(self, message: str, phase_index: int | None = None) -> None:
        super().__init__(message)
        self.phase_index = phase_index


class InvariantViolation(Exception):
    """Raised when the controller hands an output write the wrong number of
    pin states. This signals a bug in the controller, not bad user input.
    """
    pass
