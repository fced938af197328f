"""
Swerve Config - Swerve Module Configuration and Hardware Binding
=================================================================

Turns declarative swerve module files into validated, hardware-bound module
configurations. Provides:

- Absolute encoder abstraction over analog, duty-cycle, integrated and bus encoders
- Bounded-retry hardware configuration with persistent advisories
- Conversion factor resolution from module files, physical properties or geometry
- Module placement and conversion factor validation
- YAML configuration directory management

Example Usage:
-------------
from swerve_config.config import ConfigManager, ModuleConfigBuilder
from swerve_config.hardware.simulated import SimulatedDeviceFactory

config_mgr = ConfigManager("deploy/swerve")
builder = ModuleConfigBuilder(SimulatedDeviceFactory())
modules = config_mgr.build_modules(builder)

for module in modules:
    print(module.name, module.location_m, module.conversion_factors)
"""

__version__ = "1.0.0"

# Make key classes easily accessible
from swerve_config.errors import (
    ConfigurationError,
    ModulePlacementError,
    ConversionFactorError,
    IncompatibleDeviceError,
)
from swerve_config.hardware.alerts import Alert, AlertSink, LoggingAlertSink
from swerve_config.hardware.encoders import AbsoluteEncoder, OffsetResult
from swerve_config.config.descriptors import ConversionFactors, ModuleDescriptor, PhysicalCharacteristics
from swerve_config.config.factors import resolve_conversion_factors
from swerve_config.config.builder import ModuleConfigBuilder, ResolvedModuleConfiguration
from swerve_config.config.manager import ConfigManager

__all__ = [
    "ConfigurationError",
    "ModulePlacementError",
    "ConversionFactorError",
    "IncompatibleDeviceError",
    "Alert",
    "AlertSink",
    "LoggingAlertSink",
    "AbsoluteEncoder",
    "OffsetResult",
    "ConversionFactors",
    "ModuleDescriptor",
    "PhysicalCharacteristics",
    "resolve_conversion_factors",
    "ModuleConfigBuilder",
    "ResolvedModuleConfiguration",
    "ConfigManager",
]
