from enum import IntEnum


class Direction(IntEnum):
    FORWARD = 1
    BACKWARD = -1

    @classmethod
    def from_steps(cls, steps: int | float) -> 'Direction':
        """Returns FORWARD for a positive step count, BACKWARD otherwise."""
        return cls.FORWARD if steps > 0 else cls.BACKWARD

    def __str__(self) -> str:
        return self.name.lower()


def next_step(step_num: int, steps: int, direction: Direction) -> int:
    """
    Returns the step number that follows `step_num` in the given direction.
    Step numbers wrap around within one motor revolution of `steps` steps.
    """
    if direction == Direction.FORWARD:
        return (step_num + 1) % steps
    return (step_num - 1 + steps) % steps


def phase_index(step_num: int, mode_length: int) -> int:
    """Returns the index of the phase (row of the mode) for `step_num`."""
    return step_num % mode_length


def advance(
    step_num: int,
    steps: int,
    mode_length: int,
    direction: Direction | int | None
) -> tuple[int, int] | None:
    """
    Advances the motor position by one step.

    Parameters
    ----------
    step_num:
        Current step number, in the range [0, steps).
    steps:
        Number of steps per motor revolution.
    mode_length:
        Number of phases in the activation mode.
    direction:
        `Direction.FORWARD` or `Direction.BACKWARD`. Any other value means no
        motion.

    Returns
    -------
    tuple[int, int] | None
        The new step number and the index of the phase to apply, or `None` if
        `direction` is not a valid direction.
    """
    if direction not in (Direction.FORWARD, Direction.BACKWARD):
        return None
    step_num = next_step(step_num, steps, Direction(direction))
    return step_num, phase_index(step_num, mode_length)
