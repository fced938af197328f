"""
Hardware package - Motor controller and absolute encoder abstraction.

This package contains the hardware abstraction layer that swerve module
configuration is applied through.

Modules:
    base: Abstract motor and encoder device interfaces, device specs
    alerts: Persistent advisories and alert sinks
    retry: Bounded-retry configuration
    encoders: Absolute encoder variants
    simulated: In-memory devices for bench testing
"""

from swerve_config.hardware.base import (
    DeviceFamily,
    DeviceSpec,
    SensorPort,
    SwerveMotor,
    EncoderDevice,
    DeviceFactory,
)
from swerve_config.hardware.alerts import Alert, AlertLevel, AlertSink, LoggingAlertSink
from swerve_config.hardware.retry import MAXIMUM_RETRIES, ConfigurationState, RetryingConfigurator
from swerve_config.hardware.encoders import (
    AbsoluteEncoder,
    AnalogEncoder,
    DutyCycleEncoder,
    IntegratedEncoder,
    BusEncoder,
    OffsetResult,
    create_absolute_encoder,
)

__all__ = [
    "DeviceFamily",
    "DeviceSpec",
    "SensorPort",
    "SwerveMotor",
    "EncoderDevice",
    "DeviceFactory",
    "Alert",
    "AlertLevel",
    "AlertSink",
    "LoggingAlertSink",
    "MAXIMUM_RETRIES",
    "ConfigurationState",
    "RetryingConfigurator",
    "AbsoluteEncoder",
    "AnalogEncoder",
    "DutyCycleEncoder",
    "IntegratedEncoder",
    "BusEncoder",
    "OffsetResult",
    "create_absolute_encoder",
]
