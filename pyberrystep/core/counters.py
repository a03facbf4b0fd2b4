

class CounterUp:
    
    def __init__(self, preset_val: int = 0) -> None:
        self.value = preset_val
    
    def count_up(self) -> None:
        self.value += 1


class CounterDown:
    """
    Counts down to zero and stays there. The preset may be `math.inf`, in
    which case the counter never reaches zero.
    """
    def __init__(self, preset_val: int | float) -> None:
        self.value = preset_val
    
    def count_down(self) -> None:
        if self.value > 0:
            self.value -= 1

    @property
    def done(self) -> bool:
        return self.value == 0
