"""Hardware abstraction layer for swerve module motors and encoders."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any
import copy
import logging

from swerve_config.errors import ConfigurationError

logger = logging.getLogger(__name__)


class DeviceFamily(Enum):
    """Underlying motor controller / sensor hardware family."""

    SPARK_MAX = "spark_max"
    SPARK_MAX_BRUSHED = "spark_max_brushed"
    SPARK_FLEX = "spark_flex"
    THRIFTY_NOVA = "thrifty_nova"
    TALON_FX = "talon_fx"
    CANCODER = "cancoder"


# Device type strings accepted in module files.
MOTOR_TYPES: Dict[str, DeviceFamily] = {
    "sparkmax": DeviceFamily.SPARK_MAX,
    "neo": DeviceFamily.SPARK_MAX,
    "sparkmax_brushed": DeviceFamily.SPARK_MAX_BRUSHED,
    "sparkflex": DeviceFamily.SPARK_FLEX,
    "thrifty_nova": DeviceFamily.THRIFTY_NOVA,
    "talonfx": DeviceFamily.TALON_FX,
    "falcon": DeviceFamily.TALON_FX,
    "krakenx60": DeviceFamily.TALON_FX,
}


class SensorPort(Enum):
    """Sensor input on a motor controller."""

    INTEGRATED = "integrated"
    ANALOG = "analog"
    DUTY_CYCLE = "duty_cycle"
    ABSOLUTE = "absolute"


@dataclass(frozen=True)
class DeviceSpec:
    """Declarative description of a device: its type tag and bus address."""

    type: str
    id: int = 0
    canbus: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["DeviceSpec"]:
        """Parse a device entry. Returns None for a missing entry."""
        if data is None:
            return None
        if not isinstance(data, dict) or "type" not in data:
            raise ConfigurationError(f"Device entry must be a mapping with a 'type' field, got: {data!r}")
        return cls(
            type=str(data["type"]).lower(),
            id=int(data.get("id", 0)),
            canbus=data.get("canbus") or "",
        )


@dataclass(frozen=True)
class SensorReading:
    """Position and velocity as reported by a sensor, in configured units."""

    position: float
    velocity: float


@dataclass
class SensorConfiguration:
    """Per-sensor settings held in a motor controller configuration."""

    position_conversion_factor: float = 1.0
    velocity_conversion_factor: float = 1.0
    inverted: bool = False
    zero_offset: float = 0.0
    status_period_ms: Optional[int] = None


@dataclass
class MotorConfiguration:
    """Motor controller configuration object, written to hardware as a whole."""

    inverted: bool = False
    feedback_sensor: SensorPort = SensorPort.INTEGRATED
    sensors: Dict[SensorPort, SensorConfiguration] = field(default_factory=dict)

    def sensor(self, port: SensorPort) -> SensorConfiguration:
        """Get the settings for a sensor port, creating defaults if absent."""
        return self.sensors.setdefault(port, SensorConfiguration())

    def copy(self) -> "MotorConfiguration":
        return copy.deepcopy(self)


class SwerveMotor(ABC):
    """Abstract base class for a motor controller handle."""

    def __init__(self, spec: DeviceSpec, family: DeviceFamily, is_drive_motor: bool):
        self.spec = spec
        self.family = family
        self.is_drive_motor = is_drive_motor
        self.absolute_encoder = None

    @abstractmethod
    def get_configuration(self) -> MotorConfiguration:
        """Get a copy of the configuration last written to the controller."""
        pass

    @abstractmethod
    def apply_configuration(self, config: MotorConfiguration) -> bool:
        """Write a configuration to the controller. Returns True on success."""
        pass

    @abstractmethod
    def read_sensor(self, port: SensorPort) -> SensorReading:
        """Read a sensor port with the configured conversion factors applied."""
        pass

    def set_absolute_encoder(self, encoder) -> bool:
        """
        Use an absolute encoder as this motor's feedback sensor.

        Args:
            encoder: AbsoluteEncoder handle attached to this motor

        Returns:
            True if the controller accepted the new feedback sensor
        """
        port = getattr(encoder, "sensor_port", None)
        if port is not None:
            config = self.get_configuration()
            config.feedback_sensor = port
            if not self.apply_configuration(config):
                logger.warning(f"{self} rejected {port.value} feedback sensor")
                return False
        self.absolute_encoder = encoder
        return True

    def __repr__(self):
        return f"{type(self).__name__}(type={self.spec.type!r}, id={self.spec.id})"


@dataclass
class EncoderDeviceConfiguration:
    """Configuration of a standalone encoder on the bus."""

    inverted: bool = False
    magnet_offset_rotations: float = 0.0


class EncoderDevice(ABC):
    """Abstract base class for a standalone absolute encoder on the bus."""

    def __init__(self, spec: DeviceSpec, family: DeviceFamily):
        self.spec = spec
        self.family = family

    @abstractmethod
    def get_configuration(self) -> EncoderDeviceConfiguration:
        pass

    @abstractmethod
    def apply_configuration(self, config: EncoderDeviceConfiguration) -> bool:
        pass

    @abstractmethod
    def read(self) -> SensorReading:
        """Read absolute position (rotations) and velocity (rotations/second)."""
        pass

    @abstractmethod
    def factory_default(self) -> bool:
        pass

    @abstractmethod
    def clear_sticky_faults(self) -> bool:
        pass


class DeviceFactory(ABC):
    """Creates device handles from declarative device specs."""

    @abstractmethod
    def create_motor(self, spec: DeviceSpec, is_drive_motor: bool) -> SwerveMotor:
        pass

    @abstractmethod
    def create_encoder_device(self, spec: DeviceSpec) -> EncoderDevice:
        pass


def motor_family(spec: DeviceSpec) -> DeviceFamily:
    """
    Look up the device family for a motor spec.

    Raises:
        ConfigurationError: If the motor type is not known
    """
    family = MOTOR_TYPES.get(spec.type)
    if family is None:
        logger.error(f"Unknown motor type: {spec.type}")
        raise ConfigurationError(
            f"Unknown motor type '{spec.type}'. Supported types: {', '.join(sorted(MOTOR_TYPES))}"
        )
    return family
