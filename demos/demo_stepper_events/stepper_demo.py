"""
Demo: moves a stepper motor one revolution forward and one backward, then
runs it for a few seconds and stops it. All motor events are logged to the
console and to logs/stepper.log.
"""
import os
import time
from pathlib import Path

from pyberrystep.core import GPIOZeroDriver
from pyberrystep.stepper import Stepper, StepperEvent, BACKWARD
from pyberrystep.stepper.config import load_config, MotorConfig
from pyberrystep.utils.log_utils import init_logger


CONFIG_FILE = Path(__file__).parent / "motor_config.toml"


def main() -> None:
    logger = init_logger(level="debug")
    config = load_config(CONFIG_FILE)
    motor_cfg = MotorConfig.from_dict(config["motor"])
    driver = GPIOZeroDriver(
        use_pigpio=config.get("driver", {}).get("use_pigpio", False),
        logger=logger
    )

    with Stepper.from_config(motor_cfg, driver=driver, logger=logger, name="motor A") as motor:
        motor.on(StepperEvent.POWER, lambda powered: print(f"coils powered: {powered}"))

        steps = motor.move(motor.steps).result()
        logger.info(f"moved {steps} steps, now at step {motor.step_num}")

        motor.speed = 2 * motor_cfg.speed
        steps = motor.move(-motor.steps).result()
        logger.info(f"moved {steps} steps back, now at step {motor.step_num}")

        motor.run(BACKWARD)
        time.sleep(3.0)
        motor.hold()
        time.sleep(1.0)


if __name__ == "__main__":
    os.system("clear")
    main()
