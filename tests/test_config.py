import dataclasses

import pytest

from pyberrystep.core.exceptions import ConfigurationError
from pyberrystep.stepper import MotorConfig, SINGLE, DUAL, load_motor_config


MOTOR_TOML = """
[motor]
pins = [17, 16, 13, 12]
steps = 2048
mode = "single"
speed = 12.5

[driver]
use_pigpio = false
"""


def test_defaults():
    config = MotorConfig(pins=[1, 2, 3, 4])
    assert config.pins == (1, 2, 3, 4)
    assert config.steps == 200
    assert config.mode == DUAL
    assert config.speed == 1


def test_config_is_immutable():
    config = MotorConfig(pins=(1, 2, 3, 4))
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.steps = 100


def test_config_owns_copies_of_pins_and_mode():
    pins = [1, 2]
    mode = [[1, 0], [0, 1]]
    config = MotorConfig(pins=pins, mode=mode)
    pins.append(3)
    mode[1].append(1)
    assert config.pins == (1, 2)
    assert config.mode == ((1, 0), (0, 1))


def test_mode_by_name():
    assert MotorConfig(pins=(1, 2, 3, 4), mode="single").mode == SINGLE


@pytest.mark.parametrize("kwargs", [
    {"pins": ()},
    {"pins": (1, 2, 3, 4), "steps": 0},
    {"pins": (1, 2, 3, 4), "steps": 12.5},
    {"pins": (1, 2, 3, 4), "steps": True},
    {"pins": (1, 2, 3, 4), "speed": 0},
    {"pins": (1, 2, 3, 4), "speed": -3},
    {"pins": (1, 2, 3, 4), "speed": float("nan")},
    {"pins": (1, 2, 3, 4), "speed": "fast"},
    {"pins": (1, 2, 3, 4), "mode": []},
    {"pins": (1, 2, 3, 4), "mode": "wave"},
])
def test_invalid_config(kwargs):
    with pytest.raises(ConfigurationError):
        MotorConfig(**kwargs)


def test_pin_count_mismatch_identifies_phase():
    with pytest.raises(ConfigurationError) as exc_info:
        MotorConfig(pins=(1, 2, 3, 4), mode=[[1, 0, 0, 0], [0, 1, 0, 0, 1]])
    assert exc_info.value.phase_index == 1


def test_from_dict():
    config = MotorConfig.from_dict({"pins": [5, 6], "mode": [[1, 0], [0, 1]], "steps": 24})
    assert config.pins == (5, 6)
    assert config.steps == 24
    assert config.speed == 1


def test_from_dict_requires_pins():
    with pytest.raises(ConfigurationError, match="pins"):
        MotorConfig.from_dict({"steps": 200})


def test_load_motor_config(tmp_path):
    path = tmp_path / "motor.toml"
    path.write_text(MOTOR_TOML)
    config = load_motor_config(path)
    assert config.pins == (17, 16, 13, 12)
    assert config.steps == 2048
    assert config.mode == SINGLE
    assert config.speed == 12.5


def test_load_motor_config_missing_section(tmp_path):
    path = tmp_path / "motor.toml"
    path.write_text(MOTOR_TOML)
    with pytest.raises(ConfigurationError, match="x_motor"):
        load_motor_config(path, section="x_motor")


def test_load_motor_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_motor_config(tmp_path / "missing.toml")


def test_load_motor_config_rejects_zero_speed(tmp_path):
    path = tmp_path / "motor.toml"
    path.write_text(MOTOR_TOML.replace("speed = 12.5", "speed = 0"))
    with pytest.raises(ConfigurationError, match="Speed"):
        load_motor_config(path)
