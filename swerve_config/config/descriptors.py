"""
Declarative swerve module data.

Parses the documents of a swerve configuration directory (module files,
physical properties, PIDF properties) into immutable records. Key names and
units follow the configuration file format: locations in inches, offsets in
degrees, analog voltages in volts.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union
import logging

from swerve_config.errors import ConfigurationError
from swerve_config.hardware.base import DeviceSpec
from swerve_config.units import (
    calculate_degrees_per_steering_rotation,
    calculate_meters_per_rotation,
    inches_to_meters,
)

logger = logging.getLogger(__name__)

FactorData = Union[None, int, float, Dict[str, Any]]


def _is_empty(value: Optional[float]) -> bool:
    return value is None or value == 0


@dataclass(frozen=True)
class ConversionFactors:
    """
    Drive (meters per rotation) and angle (degrees per rotation) factors.

    None marks an unset axis; 0 is treated the same way.
    """

    drive: Optional[float] = None
    angle: Optional[float] = None

    def is_drive_empty(self) -> bool:
        return _is_empty(self.drive)

    def is_angle_empty(self) -> bool:
        return _is_empty(self.angle)

    def is_partial(self) -> bool:
        """True if at least one axis is set."""
        return not (self.is_drive_empty() and self.is_angle_empty())

    def is_complete(self) -> bool:
        """True if both axes are set."""
        return not (self.is_drive_empty() or self.is_angle_empty())

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["ConversionFactors"]:
        """Parse a conversion factor block. Returns None for a missing block."""
        if data is None:
            return None
        return ConversionFactorsSpec.from_dict(data).values()


@dataclass(frozen=True)
class DriveFactorSpec:
    """Drive factor given directly or as gear ratio plus wheel diameter (inches)."""

    gear_ratio: float = 0.0
    diameter: float = 0.0
    factor: float = 0.0

    def calculate(self) -> Optional[float]:
        if self.factor != 0:
            return self.factor
        if self.gear_ratio != 0 and self.diameter != 0:
            return calculate_meters_per_rotation(inches_to_meters(self.diameter), self.gear_ratio)
        return None

    @classmethod
    def parse(cls, data: FactorData) -> "DriveFactorSpec":
        if data is None:
            return cls()
        if isinstance(data, (int, float)):
            return cls(factor=float(data))
        if not isinstance(data, dict):
            raise ConfigurationError(f"Drive conversion factor must be a number or mapping, got: {data!r}")
        return cls(
            gear_ratio=float(data.get("gearRatio", 0.0)),
            diameter=float(data.get("diameter", 0.0)),
            factor=float(data.get("factor", 0.0)),
        )


@dataclass(frozen=True)
class AngleFactorSpec:
    """Angle factor given directly or as a steering gear ratio."""

    gear_ratio: float = 0.0
    factor: float = 0.0

    def calculate(self) -> Optional[float]:
        if self.factor != 0:
            return self.factor
        if self.gear_ratio != 0:
            return calculate_degrees_per_steering_rotation(self.gear_ratio)
        return None

    @classmethod
    def parse(cls, data: FactorData) -> "AngleFactorSpec":
        if data is None:
            return cls()
        if isinstance(data, (int, float)):
            return cls(factor=float(data))
        if not isinstance(data, dict):
            raise ConfigurationError(f"Angle conversion factor must be a number or mapping, got: {data!r}")
        return cls(
            gear_ratio=float(data.get("gearRatio", 0.0)),
            factor=float(data.get("factor", 0.0)),
        )


@dataclass(frozen=True)
class ConversionFactorsSpec:
    """Conversion factor data as written in a configuration file."""

    drive: DriveFactorSpec = field(default_factory=DriveFactorSpec)
    angle: AngleFactorSpec = field(default_factory=AngleFactorSpec)

    def values(self) -> ConversionFactors:
        return ConversionFactors(drive=self.drive.calculate(), angle=self.angle.calculate())

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ConversionFactorsSpec":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigurationError(f"Conversion factors must be a mapping, got: {data!r}")
        return cls(drive=DriveFactorSpec.parse(data.get("drive")), angle=AngleFactorSpec.parse(data.get("angle")))


def _document(data: Optional[Dict[str, Any]], name: str) -> Dict[str, Any]:
    """A top-level document. A missing document is treated as empty."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{name} must be a mapping, got: {type(data).__name__}")
    return data


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    """An optional mapping inside a document. A missing or null section is empty."""
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"'{key}' must be a mapping, got: {value!r}")
    return value


def _conversion_block(data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Get the conversion factor block, accepting the older singular key."""
    if "conversionFactors" in data:
        return data["conversionFactors"]
    return data.get("conversionFactor")


@dataclass(frozen=True)
class PIDFConfig:
    """PID gains with feedforward, integral zone and output range."""

    p: float = 0.0
    i: float = 0.0
    d: float = 0.0
    f: float = 0.0
    iz: float = 0.0
    output_min: float = -1.0
    output_max: float = 1.0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PIDFConfig":
        data = _document(data, "PIDF gains")
        output = _section(data, "output")
        return cls(
            p=float(data.get("p", 0.0)),
            i=float(data.get("i", 0.0)),
            d=float(data.get("d", 0.0)),
            f=float(data.get("f", 0.0)),
            iz=float(data.get("iz", 0.0)),
            output_min=float(output.get("min", -1.0)),
            output_max=float(output.get("max", 1.0)),
        )


@dataclass(frozen=True)
class PIDFProperties:
    """PIDF settings shared by every module: drive velocity and angle position."""

    drive: PIDFConfig = field(default_factory=PIDFConfig)
    angle: PIDFConfig = field(default_factory=PIDFConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PIDFProperties":
        data = _document(data, "PIDF properties")
        return cls(drive=PIDFConfig.from_dict(data.get("drive")), angle=PIDFConfig.from_dict(data.get("angle")))


@dataclass(frozen=True)
class PhysicalCharacteristics:
    """Robot-wide module characteristics and conversion factor defaults."""

    conversion_factor: Optional[ConversionFactors] = None
    analog_max_voltage: float = 3.3
    optimal_voltage: float = 12.0
    wheel_grip_coefficient_of_friction: float = 1.19
    drive_motor_current_limit: int = 40
    angle_motor_current_limit: int = 20
    drive_motor_ramp_rate: float = 0.2
    angle_motor_ramp_rate: float = 0.2

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PhysicalCharacteristics":
        data = _document(data, "Physical properties")
        current_limit = _section(data, "currentLimit")
        ramp_rate = _section(data, "rampRate")
        return cls(
            conversion_factor=ConversionFactors.from_dict(_conversion_block(data)),
            analog_max_voltage=float(data.get("analogMaxVoltage", 3.3)),
            optimal_voltage=float(data.get("optimalVoltage", 12.0)),
            wheel_grip_coefficient_of_friction=float(data.get("wheelGripCoefficientOfFriction", 1.19)),
            drive_motor_current_limit=int(current_limit.get("drive", 40)),
            angle_motor_current_limit=int(current_limit.get("angle", 20)),
            drive_motor_ramp_rate=float(ramp_rate.get("drive", 0.2)),
            angle_motor_ramp_rate=float(ramp_rate.get("angle", 0.2)),
        )


@dataclass(frozen=True)
class MotorInversion:
    drive: bool = False
    angle: bool = False


@dataclass(frozen=True)
class ModuleLocation:
    """Distance from the robot center to the wheel center, in inches."""

    front: float = 0.0
    left: float = 0.0


@dataclass(frozen=True)
class ModuleDescriptor:
    """One swerve module as described in its configuration file."""

    drive: DeviceSpec
    angle: DeviceSpec
    encoder: Optional[DeviceSpec] = None
    inverted: MotorInversion = field(default_factory=MotorInversion)
    absolute_encoder_offset: float = 0.0
    absolute_encoder_inverted: bool = False
    location: ModuleLocation = field(default_factory=ModuleLocation)
    conversion_factors: ConversionFactorsSpec = field(default_factory=ConversionFactorsSpec)
    use_cosine_compensator: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModuleDescriptor":
        """
        Parse a module document.

        Args:
            data: Module document as loaded from YAML/JSON

        Returns:
            ModuleDescriptor

        Raises:
            ConfigurationError: If the drive or angle motor is missing or malformed
        """
        if not isinstance(data, dict):
            raise ConfigurationError(f"Module data must be a mapping, got: {type(data).__name__}")
        for key in ("drive", "angle"):
            if data.get(key) is None:
                raise ConfigurationError(f"Module data is missing required key: {key}")

        inverted = _section(data, "inverted")
        location = _section(data, "location")
        return cls(
            drive=DeviceSpec.from_dict(data["drive"]),
            angle=DeviceSpec.from_dict(data["angle"]),
            encoder=DeviceSpec.from_dict(data.get("encoder")),
            inverted=MotorInversion(drive=bool(inverted.get("drive", False)), angle=bool(inverted.get("angle", False))),
            absolute_encoder_offset=float(data.get("absoluteEncoderOffset", 0.0)),
            absolute_encoder_inverted=bool(data.get("absoluteEncoderInverted", False)),
            location=ModuleLocation(front=float(location.get("front", 0.0)), left=float(location.get("left", 0.0))),
            conversion_factors=ConversionFactorsSpec.from_dict(_conversion_block(data)),
            use_cosine_compensator=bool(data.get("useCosineCompensator", True)),
        )
