"""Conversion factor resolution for swerve modules."""

from typing import Optional
import logging

from swerve_config.config.descriptors import ConversionFactors
from swerve_config.errors import ConversionFactorError
from swerve_config.hardware.base import DeviceFamily, SwerveMotor
from swerve_config.hardware.encoders import AbsoluteEncoder, DutyCycleEncoder, IntegratedEncoder

logger = logging.getLogger(__name__)

# Angle factor that requests the absolute encoder as direct angle feedback
DIRECT_FEEDBACK_ANGLE_FACTOR = 360

NO_FACTOR_MESSAGE = (
    "No conversion factor configured!\n"
    "Set the conversion factors in the physical properties file OR the module file.\n"
    "Conversion factors can be given directly, or as 'gearRatio' (angle) and "
    "'gearRatio' plus wheel 'diameter' in inches (drive)."
)

ZERO_FACTOR_MESSAGE = (
    "Conversion factors cannot be 0, please configure conversion factors "
    "in the physical properties file or the module files."
)


def resolve_conversion_factors(
    module: ConversionFactors, fallback: Optional[ConversionFactors]
) -> ConversionFactors:
    """
    Merge module-level conversion factors with the robot-wide fallback.

    Module values always win on a per-axis basis. The fallback is only used
    when it sets both axes.

    Args:
        module: Factors from the module file, possibly partially or fully unset
        fallback: Factors from the physical properties, or None

    Returns:
        ConversionFactors with both axes set

    Raises:
        ConversionFactorError: If no factor is configured anywhere, or an axis
            is still unset or zero after merging
    """
    fallback_partial = fallback is not None and fallback.is_partial()
    fallback_complete = fallback is not None and fallback.is_complete()

    if not module.is_partial() and not fallback_partial:
        logger.error("No conversion factor configured in module or physical properties")
        raise ConversionFactorError(NO_FACTOR_MESSAGE)

    resolved = module
    if fallback_complete and not module.is_partial():
        resolved = fallback
    elif fallback_complete:
        resolved = ConversionFactors(
            drive=fallback.drive if module.is_drive_empty() else module.drive,
            angle=fallback.angle if module.is_angle_empty() else module.angle,
        )

    if not resolved.is_complete():
        logger.error(f"Conversion factors incomplete after merge: {resolved}")
        raise ConversionFactorError(ZERO_FACTOR_MESSAGE)
    return resolved


def uses_direct_feedback(
    factors: ConversionFactors, encoder: Optional[AbsoluteEncoder], angle_motor: SwerveMotor
) -> bool:
    """
    Decide whether the absolute encoder should be the angle motor's feedback sensor.

    A resolved angle factor of exactly 360 on a duty-cycle encoder attached to
    a SPARK MAX means the encoder already reports degrees and is used as-is.
    A THRIFTY_NOVA's integrated encoder always feeds its own controller.
    """
    if encoder is None:
        return False
    if (
        factors.angle == DIRECT_FEEDBACK_ANGLE_FACTOR
        and isinstance(encoder, DutyCycleEncoder)
        and angle_motor.family is DeviceFamily.SPARK_MAX
    ):
        return True
    return isinstance(encoder, IntegratedEncoder) and angle_motor.family is DeviceFamily.THRIFTY_NOVA
