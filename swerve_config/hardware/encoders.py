"""
Absolute encoder handles.

One capability contract (AbsoluteEncoder) over a closed set of physical
attachments:

    AnalogEncoder      - analog pin on a SPARK MAX data port
    DutyCycleEncoder   - duty-cycle encoder on a SPARK MAX / SPARK Flex data port
    IntegratedEncoder  - absolute sensor native to a THRIFTY_NOVA controller
    BusEncoder         - standalone encoder on the CAN bus (CANcoder)

Use create_absolute_encoder() to pick the variant from a device spec tag.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional, Tuple
import logging

from swerve_config.errors import ConfigurationError, IncompatibleDeviceError
from swerve_config.hardware.alerts import Alert, AlertSink
from swerve_config.hardware.base import (
    DeviceFactory,
    DeviceFamily,
    DeviceSpec,
    EncoderDevice,
    EncoderDeviceConfiguration,
    MotorConfiguration,
    SensorPort,
    SensorReading,
    SwerveMotor,
)
from swerve_config.hardware.retry import RetryingConfigurator

logger = logging.getLogger(__name__)

ALERT_GROUP = "Encoders"

# Status frame period for analog position/velocity/voltage signals
ANALOG_STATUS_PERIOD_MS = 20


class OffsetResult(Enum):
    """Outcome of AbsoluteEncoder.set_offset()."""

    SUCCESS = "success"
    UNSUPPORTED = "unsupported"
    FAILURE = "failure"


def _wrap_degrees(degrees: float) -> float:
    wrapped = degrees % 360.0
    # -1e-20 % 360.0 rounds to 360.0
    return 0.0 if wrapped >= 360.0 else wrapped


class AbsoluteEncoder(ABC):
    """Abstract base class for absolute encoder handles."""

    # Port on the owning motor controller, None for standalone devices
    sensor_port: Optional[SensorPort] = None
    description = "Absolute Encoder"

    def __init__(self, sink: AlertSink):
        self.sink = sink
        self.failure_configuring = Alert(ALERT_GROUP, f"Failure configuring {self.description}")
        self.configurator = RetryingConfigurator(self.failure_configuring, sink)

    def get_absolute_position(self) -> float:
        """Absolute position in degrees, within [0, 360)."""
        return _wrap_degrees(self._read().position)

    def get_velocity(self) -> float:
        """Velocity in degrees per second."""
        return self._read().velocity

    @abstractmethod
    def _read(self) -> SensorReading:
        """Read position (degrees) and velocity (degrees/second)."""
        pass

    @abstractmethod
    def configure(self, inverted: bool) -> None:
        """Write the encoder direction to hardware."""
        pass

    @abstractmethod
    def set_offset(self, offset: float) -> OffsetResult:
        """Store a zero offset (degrees) in the encoder hardware."""
        pass

    def factory_default(self) -> None:
        """Reset to factory defaults. No-op unless the device has its own registers."""
        pass

    def clear_sticky_faults(self) -> None:
        """Clear sticky faults. No-op unless the device has its own registers."""
        pass

    def __repr__(self):
        return f"{type(self).__name__}()"


class MotorAttachedEncoder(AbsoluteEncoder):
    """Encoder read through, and configured through, its owning motor controller."""

    compatible_families: Tuple[DeviceFamily, ...] = ()

    def __init__(self, motor: SwerveMotor, sink: AlertSink):
        if motor.family not in self.compatible_families:
            allowed = ", ".join(family.value for family in self.compatible_families)
            logger.error(f"{self.description} cannot be attached to {motor!r}")
            raise IncompatibleDeviceError(
                f"Motor given to create {type(self).__name__} is a {motor.family.value}, "
                f"expected one of: {allowed}"
            )
        super().__init__(sink)
        self.motor = motor

    def _read(self) -> SensorReading:
        return self.motor.read_sensor(self.sensor_port)

    def _update_motor_config(self, edit: Callable[[MotorConfiguration], None]) -> bool:
        """Apply an edit to the motor configuration, retrying on failure."""

        def apply() -> bool:
            config = self.motor.get_configuration()
            edit(config)
            return self.motor.apply_configuration(config)

        return self.configurator.run(apply)

    def set_conversion_factor(self, position_factor: float, velocity_factor: float) -> bool:
        """Set position and velocity conversion factors for this encoder's port."""

        def edit(config: MotorConfiguration) -> None:
            sensor = config.sensor(self.sensor_port)
            sensor.position_conversion_factor = position_factor
            sensor.velocity_conversion_factor = velocity_factor

        return self._update_motor_config(edit)

    def configure(self, inverted: bool) -> None:
        def edit(config: MotorConfiguration) -> None:
            config.sensor(self.sensor_port).inverted = inverted

        self._update_motor_config(edit)

    def set_offset(self, offset: float) -> OffsetResult:
        def edit(config: MotorConfiguration) -> None:
            config.sensor(self.sensor_port).zero_offset = offset

        if self._update_motor_config(edit):
            return OffsetResult.SUCCESS
        return OffsetResult.FAILURE

    def __repr__(self):
        return f"{type(self).__name__}(motor={self.motor!r})"


class AnalogEncoder(MotorAttachedEncoder):
    """Absolute encoder on the analog pin of a SPARK MAX data port."""

    sensor_port = SensorPort.ANALOG
    description = "SparkMax Analog Encoder"
    compatible_families = (DeviceFamily.SPARK_MAX, DeviceFamily.SPARK_MAX_BRUSHED)

    def __init__(self, motor: SwerveMotor, max_voltage: float, sink: AlertSink):
        """
        Args:
            motor: SPARK MAX the sensor is wired to
            max_voltage: Analog reading (volts) that corresponds to 360 degrees
            sink: Advisory sink
        """
        if max_voltage <= 0:
            raise ConfigurationError(f"Analog encoder max voltage must be positive, got {max_voltage}")
        super().__init__(motor, sink)
        self.max_voltage = max_voltage
        self.offset_unsupported = Alert(
            ALERT_GROUP, "SparkMax Analog Sensors do not support integrated offsets"
        )
        self.set_conversion_factor(360.0 / max_voltage)

    def set_conversion_factor(self, position_factor: float, velocity_factor: Optional[float] = None) -> bool:
        """Set volts-to-degrees scaling. Velocity defaults to position_factor / 60."""
        if velocity_factor is None:
            velocity_factor = position_factor / 60

        def edit(config: MotorConfiguration) -> None:
            config.feedback_sensor = SensorPort.ANALOG
            sensor = config.sensor(SensorPort.ANALOG)
            sensor.position_conversion_factor = position_factor
            sensor.velocity_conversion_factor = velocity_factor
            sensor.status_period_ms = ANALOG_STATUS_PERIOD_MS

        return self._update_motor_config(edit)

    def set_offset(self, offset: float) -> OffsetResult:
        self.sink.set(self.offset_unsupported, True)
        return OffsetResult.UNSUPPORTED


class DutyCycleEncoder(MotorAttachedEncoder):
    """Duty-cycle absolute encoder plugged into a SPARK MAX or SPARK Flex."""

    sensor_port = SensorPort.DUTY_CYCLE
    description = "SparkMax Absolute Encoder"
    compatible_families = (DeviceFamily.SPARK_MAX, DeviceFamily.SPARK_FLEX)

    def __init__(self, motor: SwerveMotor, sink: AlertSink):
        super().__init__(motor, sink)
        # rotations -> degrees, RPM -> degrees/second
        self.set_conversion_factor(360.0, 360.0 / 60)


class IntegratedEncoder(MotorAttachedEncoder):
    """Absolute sensor built into a THRIFTY_NOVA controller."""

    sensor_port = SensorPort.ABSOLUTE
    description = "ThriftyNova Integrated Encoder"
    compatible_families = (DeviceFamily.THRIFTY_NOVA,)

    def __init__(self, motor: SwerveMotor, sink: AlertSink):
        super().__init__(motor, sink)
        # rotations -> degrees, rotations/second -> degrees/second
        self.set_conversion_factor(360.0, 360.0)


class BusEncoder(AbsoluteEncoder):
    """Standalone absolute encoder with its own bus address (CANcoder)."""

    description = "CANCoder"
    compatible_families = (DeviceFamily.CANCODER,)

    def __init__(self, device: EncoderDevice, sink: AlertSink):
        if device.family not in self.compatible_families:
            logger.error(f"{device.family.value} device cannot be used as a {self.description}")
            raise IncompatibleDeviceError(
                f"Device given to create {type(self).__name__} is a {device.family.value}"
            )
        super().__init__(sink)
        self.device = device

    def _read(self) -> SensorReading:
        reading = self.device.read()
        return SensorReading(position=reading.position * 360.0, velocity=reading.velocity * 360.0)

    def _update_device_config(self, edit: Callable[[EncoderDeviceConfiguration], None]) -> bool:
        def apply() -> bool:
            config = self.device.get_configuration()
            edit(config)
            return self.device.apply_configuration(config)

        return self.configurator.run(apply)

    def configure(self, inverted: bool) -> None:
        def edit(config: EncoderDeviceConfiguration) -> None:
            config.inverted = inverted

        self._update_device_config(edit)

    def set_offset(self, offset: float) -> OffsetResult:
        def edit(config: EncoderDeviceConfiguration) -> None:
            config.magnet_offset_rotations = offset / 360.0

        if self._update_device_config(edit):
            return OffsetResult.SUCCESS
        return OffsetResult.FAILURE

    def factory_default(self) -> None:
        self.configurator.run(self.device.factory_default)

    def clear_sticky_faults(self) -> None:
        self.configurator.run(self.device.clear_sticky_faults)

    def __repr__(self):
        return f"{type(self).__name__}(id={self.device.spec.id})"


ENCODER_TYPES = (
    "sparkmax_analog",
    "sparkmax_analog5v",
    "sparkmax",
    "sparkflex",
    "attached",
    "thrifty_nova",
    "cancoder",
)


def create_absolute_encoder(
    spec: Optional[DeviceSpec],
    motor: SwerveMotor,
    device_factory: DeviceFactory,
    sink: AlertSink,
    analog_max_voltage: float = 3.3,
) -> Optional[AbsoluteEncoder]:
    """
    Create the absolute encoder described by a device spec.

    Args:
        spec: Encoder device spec, or None when the module has no absolute encoder
        motor: Angle motor the encoder is attached to
        device_factory: Used for encoders that are separate bus devices
        sink: Advisory sink shared by the module's hardware
        analog_max_voltage: Full-scale voltage for 'sparkmax_analog' encoders

    Returns:
        Encoder handle, or None if no encoder is configured

    Raises:
        ConfigurationError: If the encoder type is unknown
        IncompatibleDeviceError: If the encoder cannot be attached to the motor
    """
    if spec is None or spec.type == "none":
        return None

    if spec.type == "sparkmax_analog":
        return AnalogEncoder(motor, analog_max_voltage, sink)
    if spec.type == "sparkmax_analog5v":
        return AnalogEncoder(motor, 5.0, sink)
    if spec.type in ("sparkmax", "sparkflex", "attached"):
        return DutyCycleEncoder(motor, sink)
    if spec.type == "thrifty_nova":
        return IntegratedEncoder(motor, sink)
    if spec.type == "cancoder":
        return BusEncoder(device_factory.create_encoder_device(spec), sink)

    logger.error(f"Unknown absolute encoder type: {spec.type}")
    raise ConfigurationError(
        f"Unknown absolute encoder type '{spec.type}'. Supported types: {', '.join(ENCODER_TYPES)}"
    )
