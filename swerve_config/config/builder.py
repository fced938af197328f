"""
Swerve module configuration builder.

Turns a parsed ModuleDescriptor into a hardware-bound, validated
ResolvedModuleConfiguration. Geometry and conversion factor problems are
fatal; hardware configuration problems are reported through the alert sink
and leave a degraded but usable module.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging
import re

from swerve_config.config.descriptors import (
    ConversionFactors,
    ModuleDescriptor,
    PhysicalCharacteristics,
    PIDFConfig,
)
from swerve_config.config.factors import resolve_conversion_factors, uses_direct_feedback
from swerve_config.errors import ModulePlacementError
from swerve_config.hardware.alerts import Alert, AlertSink, LoggingAlertSink
from swerve_config.hardware.base import DeviceFactory, SwerveMotor
from swerve_config.hardware.encoders import ALERT_GROUP, AbsoluteEncoder, create_absolute_encoder
from swerve_config.hardware.retry import RetryingConfigurator
from swerve_config.units import inches_to_meters, round_half_up

logger = logging.getLogger(__name__)

_FILE_SUFFIX = re.compile(r"\.(json|ya?ml)$", re.IGNORECASE)

PLACEMENT_MESSAGE = (
    "Improper module location settings!\n"
    "Your module location is set to 0 for both 'front' and 'left' values.\n"
    "Set the distance from the center of the robot to the center of the wheel in your module file!"
)


@dataclass(frozen=True)
class ResolvedModuleConfiguration:
    """Everything the drive subsystem needs to run one swerve module."""

    drive_motor: SwerveMotor
    angle_motor: SwerveMotor
    conversion_factors: ConversionFactors
    absolute_encoder: Optional[AbsoluteEncoder]
    absolute_encoder_offset: float
    front_m: float
    left_m: float
    angle_pidf: PIDFConfig
    velocity_pidf: PIDFConfig
    physical_characteristics: PhysicalCharacteristics
    absolute_encoder_inverted: bool
    drive_motor_inverted: bool
    angle_motor_inverted: bool
    name: str
    use_cosine_compensator: bool
    uses_direct_feedback: bool = False

    @property
    def location_m(self) -> Tuple[float, float]:
        """(front, left) offset from the robot center in meters."""
        return self.front_m, self.left_m


def module_name(file_name: str) -> str:
    """Module name from its file name, without a .json/.yml/.yaml suffix."""
    return _FILE_SUFFIX.sub("", file_name)


def feedback_binding_alert(angle_motor: SwerveMotor) -> Alert:
    """Advisory raised when an angle motor will not take its absolute encoder as feedback."""
    return Alert(ALERT_GROUP, f"Failure binding absolute encoder as feedback for {angle_motor!r}")


class ModuleConfigBuilder:
    """Builds ResolvedModuleConfiguration objects from module descriptors."""

    def __init__(self, device_factory: DeviceFactory, alert_sink: Optional[AlertSink] = None):
        """
        Args:
            device_factory: Creates motor and encoder handles from device specs
            alert_sink: Receives hardware advisories. Defaults to a LoggingAlertSink.
        """
        self.device_factory = device_factory
        self.alert_sink = alert_sink if alert_sink is not None else LoggingAlertSink()

    def build(
        self,
        descriptor: ModuleDescriptor,
        angle_pidf: PIDFConfig,
        drive_pidf: PIDFConfig,
        physical_characteristics: PhysicalCharacteristics,
        name: str,
    ) -> ResolvedModuleConfiguration:
        """
        Create the hardware for one module and validate its configuration.

        Args:
            descriptor: Parsed module file
            angle_pidf: Angle motor position PIDF
            drive_pidf: Drive motor velocity PIDF
            physical_characteristics: Robot-wide defaults
            name: Module file name

        Returns:
            ResolvedModuleConfiguration

        Raises:
            ModulePlacementError: If the module is at the robot center
            ConversionFactorError: If conversion factors are missing or zero
            IncompatibleDeviceError: If the encoder does not fit the angle motor
        """
        name = module_name(name)
        logger.info(f"Building swerve module: {name}")

        # Checked before any hardware is touched
        location = descriptor.location
        if location.front == 0 and location.left == 0:
            logger.error(f"Module {name} is located at the robot center")
            raise ModulePlacementError(PLACEMENT_MESSAGE)

        angle_motor = self.device_factory.create_motor(descriptor.angle, is_drive_motor=False)
        encoder = create_absolute_encoder(
            descriptor.encoder,
            angle_motor,
            self.device_factory,
            self.alert_sink,
            analog_max_voltage=physical_characteristics.analog_max_voltage,
        )

        factors = resolve_conversion_factors(
            descriptor.conversion_factors.values(), physical_characteristics.conversion_factor
        )

        direct_feedback = False
        if uses_direct_feedback(factors, encoder, angle_motor):
            logger.info(f"Module {name}: using {encoder!r} as angle motor feedback")
            configurator = RetryingConfigurator(feedback_binding_alert(angle_motor), self.alert_sink)
            direct_feedback = configurator.run(lambda: angle_motor.set_absolute_encoder(encoder))
            if not direct_feedback:
                logger.error(f"Module {name}: angle motor kept its integrated feedback sensor")

        configuration = ResolvedModuleConfiguration(
            drive_motor=self.device_factory.create_motor(descriptor.drive, is_drive_motor=True),
            angle_motor=angle_motor,
            conversion_factors=factors,
            absolute_encoder=encoder,
            absolute_encoder_offset=descriptor.absolute_encoder_offset,
            front_m=inches_to_meters(round_half_up(location.front)),
            left_m=inches_to_meters(round_half_up(location.left)),
            angle_pidf=angle_pidf,
            velocity_pidf=drive_pidf,
            physical_characteristics=physical_characteristics,
            absolute_encoder_inverted=descriptor.absolute_encoder_inverted,
            drive_motor_inverted=descriptor.inverted.drive,
            angle_motor_inverted=descriptor.inverted.angle,
            name=name,
            use_cosine_compensator=descriptor.use_cosine_compensator,
            uses_direct_feedback=direct_feedback,
        )
        logger.info(
            f"Module {name}: location=({configuration.front_m:.4f} m, {configuration.left_m:.4f} m), "
            f"factors=(drive={factors.drive}, angle={factors.angle})"
        )
        return configuration
