"""
Config package - Module configuration resolution.

This package turns swerve module files into validated module configurations.

Modules:
    descriptors: Parsed module, physical property and PIDF documents
    factors: Conversion factor resolution
    builder: ModuleConfigBuilder and ResolvedModuleConfiguration
    manager: ConfigManager for YAML configuration directories
"""

from swerve_config.config.builder import ModuleConfigBuilder, ResolvedModuleConfiguration
from swerve_config.config.manager import ConfigManager

__all__ = ["ModuleConfigBuilder", "ResolvedModuleConfiguration", "ConfigManager"]
