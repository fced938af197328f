"""
Configuration Manager for swerve drive module files.
Handles loading, saving, and accessing a swerve configuration directory:

    <config_dir>/physicalproperties.yml
    <config_dir>/modules/pidfproperties.yml
    <config_dir>/modules/<module>.yml
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List
from copy import deepcopy
import logging

from swerve_config.config.builder import ModuleConfigBuilder, ResolvedModuleConfiguration
from swerve_config.config.descriptors import ModuleDescriptor, PhysicalCharacteristics, PIDFProperties
from swerve_config.errors import ConfigurationError

logger = logging.getLogger(__name__)

MODULES_DIR = "modules"
PHYSICAL_PROPERTIES = "physicalproperties"
PIDF_PROPERTIES = "pidfproperties"
YAML_SUFFIXES = (".yml", ".yaml")


class ConfigManager:
    """
    Manages the module, physical property and PIDF documents of one robot.
    Documents are kept as plain dictionaries and parsed on request.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize ConfigManager with a swerve configuration directory.

        Args:
            config_dir: Path to the configuration directory. If None, uses
                       'deploy/swerve' relative to the working directory.
        """
        if config_dir is None:
            self.config_dir = Path.cwd() / "deploy" / "swerve"
        else:
            self.config_dir = Path(config_dir)

        self._modules: Dict[str, Dict[str, Any]] = {}
        self._physical_properties: Dict[str, Any] = {}
        self._pidf_properties: Dict[str, Any] = {}
        self._load_configs()
        logger.info(f"ConfigManager initialized with directory: {self.config_dir}")

    @property
    def modules_dir(self) -> Path:
        return self.config_dir / MODULES_DIR

    def _find_document(self, directory: Path, stem: str) -> Optional[Path]:
        for suffix in YAML_SUFFIXES:
            path = directory / f"{stem}{suffix}"
            if path.exists():
                return path
        return None

    def _load_optional(self, directory: Path, stem: str) -> Dict[str, Any]:
        path = self._find_document(directory, stem)
        if path is None:
            logger.warning(f"No {stem} file found in {directory}")
            return {}
        try:
            return self.load_config_file(str(path)) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load {path}: {e}")
            return {}

    def _load_configs(self) -> None:
        """Load all configuration files from the config directory."""
        if not self.modules_dir.exists():
            logger.warning(f"Module directory not found: {self.modules_dir}")
            self.modules_dir.mkdir(parents=True, exist_ok=True)

        self._physical_properties = self._load_optional(self.config_dir, PHYSICAL_PROPERTIES)
        self._pidf_properties = self._load_optional(self.modules_dir, PIDF_PROPERTIES)

        for file in sorted(self.modules_dir.iterdir()):
            if file.suffix not in YAML_SUFFIXES or file.stem == PIDF_PROPERTIES:
                continue
            try:
                data = self.load_config_file(str(file))
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Failed to load module file {file}: {e}")
                continue
            if not isinstance(data, dict):
                logger.error(f"Module file {file} does not contain a mapping")
                continue
            self._modules[file.stem] = data
            logger.info(f"Loaded module: {file.stem}")

    def load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load a single configuration file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Dictionary containing configuration data
        """
        with open(config_path, "r") as file:
            data = yaml.safe_load(file)
        return data

    def list_modules(self) -> List[str]:
        """List loaded module names in sorted order."""
        return sorted(self._modules.keys())

    def get_module_data(self, name: str) -> Optional[Dict[str, Any]]:
        """Get a copy of a module document, or None if not loaded."""
        data = self._modules.get(name)
        return deepcopy(data) if data is not None else None

    def get_module_descriptor(self, name: str) -> Optional[ModuleDescriptor]:
        """
        Parse a module document.

        Args:
            name: Module name (file name without suffix)

        Returns:
            ModuleDescriptor or None if the module is not loaded

        Raises:
            ConfigurationError: If the module document is malformed
        """
        data = self._modules.get(name)
        if data is None:
            return None
        return ModuleDescriptor.from_dict(data)

    def get_physical_characteristics(self) -> PhysicalCharacteristics:
        return PhysicalCharacteristics.from_dict(self._physical_properties)

    def get_pidf_properties(self) -> PIDFProperties:
        return PIDFProperties.from_dict(self._pidf_properties)

    def save_module(self, name: str, data: Dict[str, Any]) -> None:
        """
        Save a module document to file.

        Args:
            name: Module name
            data: Module document to save
        """
        module_path = self.modules_dir / f"{name}.yml"
        with open(module_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        self._modules[name] = deepcopy(data)
        logger.info(f"Saved module: {name}")

    @staticmethod
    def validate_module(data: Dict[str, Any]) -> List[str]:
        """
        Validate module document structure and return list of errors.

        Args:
            data: Module document to validate

        Returns:
            List of error messages (empty if valid)
        """
        errors = []
        if not isinstance(data, dict):
            return ["Module document must be a dictionary"]

        for key in ("drive", "angle", "location"):
            if key not in data:
                errors.append(f"Missing required key: {key}")

        for key in ("drive", "angle", "encoder"):
            device = data.get(key)
            if device is None:
                continue
            if not isinstance(device, dict):
                errors.append(f"'{key}' must be a dictionary")
            elif "type" not in device:
                errors.append(f"'{key}' must have a 'type' field")

        if "location" in data:
            location = data["location"]
            if not isinstance(location, dict):
                errors.append("'location' must be a dictionary")
            else:
                front = location.get("front", 0)
                left = location.get("left", 0)
                if not isinstance(front, (int, float)) or not isinstance(left, (int, float)):
                    errors.append("'location' values must be numbers (inches)")
                elif front == 0 and left == 0:
                    errors.append("'location' cannot have both 'front' and 'left' set to 0")

        if "inverted" in data and not isinstance(data["inverted"], dict):
            errors.append("'inverted' must be a dictionary")

        for key in ("conversionFactors", "conversionFactor"):
            if key in data and not isinstance(data[key], dict):
                errors.append(f"'{key}' must be a dictionary")

        offset = data.get("absoluteEncoderOffset", 0)
        if not isinstance(offset, (int, float)):
            errors.append("'absoluteEncoderOffset' must be a number (degrees)")

        return errors

    @staticmethod
    def create_empty_module(drive_type: str, angle_type: str, encoder_type: Optional[str] = None) -> Dict[str, Any]:
        """
        Create a module document template.

        Args:
            drive_type: Drive motor type, e.g. 'sparkmax'
            angle_type: Angle motor type
            encoder_type: Absolute encoder type, or None for no encoder

        Returns:
            Module document dictionary
        """
        return {
            "drive": {"type": drive_type, "id": 0, "canbus": None},
            "angle": {"type": angle_type, "id": 0, "canbus": None},
            "encoder": {"type": encoder_type, "id": 0, "canbus": None} if encoder_type else None,
            "inverted": {"drive": False, "angle": False},
            "absoluteEncoderOffset": 0,
            "absoluteEncoderInverted": False,
            "location": {"front": 0, "left": 0},
            "conversionFactors": {
                "drive": {"gearRatio": 0, "diameter": 0, "factor": 0},
                "angle": {"gearRatio": 0, "factor": 0},
            },
            "useCosineCompensator": True,
        }

    def build_modules(self, builder: ModuleConfigBuilder) -> List[ResolvedModuleConfiguration]:
        """
        Build every loaded module, in sorted name order.

        Raises:
            ConfigurationError: On the first module that fails validation
        """
        physical = self.get_physical_characteristics()
        pidf = self.get_pidf_properties()
        modules = []
        for name in self.list_modules():
            try:
                modules.append(
                    builder.build(self.get_module_descriptor(name), pidf.angle, pidf.drive, physical, name)
                )
            except ConfigurationError as e:
                logger.error(f"Module {name} could not be configured: {e}")
                raise
        return modules


# Example usage and testing
if __name__ == "__main__":
    import sys

    from swerve_config.hardware.alerts import LoggingAlertSink
    from swerve_config.hardware.simulated import SimulatedDeviceFactory

    # Set up logging
    logging.basicConfig(level=logging.INFO)

    cm = ConfigManager(sys.argv[1] if len(sys.argv) > 1 else None)
    print("Available modules:", cm.list_modules())

    for name in cm.list_modules():
        errors = cm.validate_module(cm.get_module_data(name))
        if errors:
            print(f"\n{name}: {errors}")

    sink = LoggingAlertSink()
    builder = ModuleConfigBuilder(SimulatedDeviceFactory(), sink)
    for module in cm.build_modules(builder):
        print(f"\n{module.name}: location {module.location_m} m, factors {module.conversion_factors}")

    print(f"\nActive advisories: {[str(alert) for alert in sink.active_alerts()]}")
