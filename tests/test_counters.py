import math

from pyberrystep.core import CounterUp, CounterDown


def test_counter_down_stops_at_zero():
    counter = CounterDown(2)
    counter.count_down()
    assert not counter.done
    counter.count_down()
    counter.count_down()
    assert counter.value == 0
    assert counter.done


def test_counter_down_infinite_preset_never_done():
    counter = CounterDown(math.inf)
    for _ in range(1000):
        counter.count_down()
    assert not counter.done


def test_counter_up():
    counter = CounterUp()
    counter.count_up()
    counter.count_up()
    assert counter.value == 2


def test_counter_up_starts_at_preset():
    counter = CounterUp(5)
    counter.count_up()
    assert counter.value == 6
