"""
In-memory motor controllers and encoders.

Used for bench testing module files without a robot attached. Configuration
writes can be made to fail to exercise retry and advisory handling.
"""

from typing import Dict, Tuple
import logging

from swerve_config.hardware.base import (
    DeviceFactory,
    DeviceFamily,
    DeviceSpec,
    EncoderDevice,
    EncoderDeviceConfiguration,
    MotorConfiguration,
    SensorConfiguration,
    SensorPort,
    SensorReading,
    SwerveMotor,
    motor_family,
)

logger = logging.getLogger(__name__)


class _WriteFailures:
    """Counts configuration writes and fails a set number of them."""

    def __init__(self):
        self.write_attempts = 0
        self.failures_remaining = 0
        self.always_fail = False

    def fail_next(self, count: int) -> None:
        self.failures_remaining = count

    def attempt(self) -> bool:
        self.write_attempts += 1
        if self.always_fail:
            return False
        if self.failures_remaining > 0:
            self.failures_remaining -= 1
            return False
        return True


class SimulatedMotor(SwerveMotor):
    """Motor controller that keeps its configuration and sensor values in memory."""

    def __init__(self, spec: DeviceSpec, family: DeviceFamily, is_drive_motor: bool = False):
        super().__init__(spec, family, is_drive_motor)
        self._config = MotorConfiguration()
        self._raw: Dict[SensorPort, Tuple[float, float]] = {}
        self.writes = _WriteFailures()

    def get_configuration(self) -> MotorConfiguration:
        return self._config.copy()

    def apply_configuration(self, config: MotorConfiguration) -> bool:
        if not self.writes.attempt():
            logger.debug(f"{self!r}: simulated configuration failure")
            return False
        self._config = config.copy()
        return True

    def set_raw_sensor(self, port: SensorPort, position: float, velocity: float = 0.0) -> None:
        """Set the unscaled value seen on a sensor port (volts, rotations, ...)."""
        self._raw[port] = (position, velocity)

    def read_sensor(self, port: SensorPort) -> SensorReading:
        position, velocity = self._raw.get(port, (0.0, 0.0))
        sensor = self._config.sensors.get(port, SensorConfiguration())
        if sensor.inverted:
            position, velocity = -position, -velocity
        return SensorReading(
            position=position * sensor.position_conversion_factor - sensor.zero_offset,
            velocity=velocity * sensor.velocity_conversion_factor,
        )


class SimulatedEncoderDevice(EncoderDevice):
    """Standalone bus encoder kept in memory."""

    def __init__(self, spec: DeviceSpec, family: DeviceFamily = DeviceFamily.CANCODER):
        super().__init__(spec, family)
        self._config = EncoderDeviceConfiguration()
        self.position_rotations = 0.0
        self.velocity_rps = 0.0
        self.sticky_faults = 0
        self.factory_resets = 0
        self.writes = _WriteFailures()

    def get_configuration(self) -> EncoderDeviceConfiguration:
        return EncoderDeviceConfiguration(
            inverted=self._config.inverted,
            magnet_offset_rotations=self._config.magnet_offset_rotations,
        )

    def apply_configuration(self, config: EncoderDeviceConfiguration) -> bool:
        if not self.writes.attempt():
            return False
        self._config = EncoderDeviceConfiguration(
            inverted=config.inverted,
            magnet_offset_rotations=config.magnet_offset_rotations,
        )
        return True

    def read(self) -> SensorReading:
        sign = -1.0 if self._config.inverted else 1.0
        return SensorReading(
            position=sign * self.position_rotations + self._config.magnet_offset_rotations,
            velocity=sign * self.velocity_rps,
        )

    def factory_default(self) -> bool:
        if not self.writes.attempt():
            return False
        self._config = EncoderDeviceConfiguration()
        self.factory_resets += 1
        return True

    def clear_sticky_faults(self) -> bool:
        if not self.writes.attempt():
            return False
        self.sticky_faults = 0
        return True


class SimulatedDeviceFactory(DeviceFactory):
    """Creates simulated devices and remembers them by (type, id)."""

    def __init__(self):
        self.motors: Dict[Tuple[str, int], SimulatedMotor] = {}
        self.encoder_devices: Dict[Tuple[str, int], SimulatedEncoderDevice] = {}

    def create_motor(self, spec: DeviceSpec, is_drive_motor: bool) -> SimulatedMotor:
        motor = SimulatedMotor(spec, motor_family(spec), is_drive_motor)
        self.motors[(spec.type, spec.id)] = motor
        logger.debug(f"Created {motor!r} (drive={is_drive_motor})")
        return motor

    def create_encoder_device(self, spec: DeviceSpec) -> SimulatedEncoderDevice:
        device = SimulatedEncoderDevice(spec)
        self.encoder_devices[(spec.type, spec.id)] = device
        return device
