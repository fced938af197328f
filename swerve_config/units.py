"""Unit conversion and module geometry helpers."""

import math

INCHES_TO_METERS = 0.0254


def inches_to_meters(inches: float) -> float:
    """Convert a length in inches to meters."""
    return inches * INCHES_TO_METERS


def round_half_up(value: float) -> int:
    """
    Round to the nearest whole number, with halves going toward positive infinity.

    Python's round() uses banker's rounding (12.5 -> 12); module locations
    have always been rounded half-up (12.5 -> 13, -12.5 -> -12).
    """
    whole = math.floor(value)
    if value - whole >= 0.5:
        whole += 1
    return int(whole)


def calculate_meters_per_rotation(wheel_diameter_m: float, drive_gear_ratio: float) -> float:
    """
    Meters travelled by the wheel for one drive motor rotation.

    Args:
        wheel_diameter_m: Wheel diameter in meters
        drive_gear_ratio: Motor rotations per wheel rotation

    Returns:
        Drive conversion factor in meters per motor rotation
    """
    return (math.pi * wheel_diameter_m) / drive_gear_ratio


def calculate_degrees_per_steering_rotation(angle_gear_ratio: float) -> float:
    """Degrees turned by the module for one angle motor rotation."""
    return 360.0 / angle_gear_ratio
