"""Exceptions raised while building swerve module configurations."""


class ConfigurationError(Exception):
    """Raised when a module configuration cannot be used to drive a robot."""
    pass


class ModulePlacementError(ConfigurationError):
    """Raised when a module is located at the robot's rotational center."""
    pass


class ConversionFactorError(ConfigurationError):
    """Raised when drive or angle conversion factors are missing or zero."""
    pass


class IncompatibleDeviceError(ConfigurationError):
    """Raised when an encoder is attached to a motor of the wrong device family."""
    pass
