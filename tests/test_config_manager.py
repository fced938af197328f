"""
Unit tests for ConfigManager.

Tests loading, saving, validating and building a swerve configuration directory.
"""

import pytest
import yaml

from swerve_config.config.builder import ResolvedModuleConfiguration
from swerve_config.config.descriptors import ConversionFactors, ModuleDescriptor
from swerve_config.config.manager import ConfigManager
from swerve_config.errors import ConfigurationError, ModulePlacementError


class TestConfigManagerInit:
    """Test ConfigManager initialization."""

    def test_loads_modules(self, swerve_config_dir):
        """Test that every module file in the directory is loaded."""
        manager = ConfigManager(str(swerve_config_dir))

        assert manager.list_modules() == ["backleft", "backright", "frontleft", "frontright"]

    def test_pidf_file_is_not_a_module(self, swerve_config_dir):
        """Test that the PIDF document is not listed as a module."""
        manager = ConfigManager(str(swerve_config_dir))

        assert "pidfproperties" not in manager.list_modules()

    def test_missing_directory_is_created(self, tmp_path):
        """Test that a missing modules directory is created empty."""
        config_dir = tmp_path / "swerve"

        manager = ConfigManager(str(config_dir))

        assert manager.list_modules() == []
        assert (config_dir / "modules").is_dir()

    def test_malformed_yaml_is_skipped(self, swerve_config_dir):
        """Test that a module file with broken YAML is skipped."""
        # ConfigManager logs YAML errors and continues with the other files
        (swerve_config_dir / "modules" / "broken.yml").write_text("{ invalid yaml content: [")

        manager = ConfigManager(str(swerve_config_dir))

        assert "broken" not in manager.list_modules()
        assert len(manager.list_modules()) == 4

    def test_non_mapping_module_is_skipped(self, swerve_config_dir):
        """Test that a module file holding a list is skipped."""
        (swerve_config_dir / "modules" / "list.yml").write_text("- a\n- b\n")

        manager = ConfigManager(str(swerve_config_dir))

        assert "list" not in manager.list_modules()

    def test_yaml_suffix_accepted(self, swerve_config_dir, sample_module_data):
        """Test that the .yaml suffix is accepted for module files."""
        with open(swerve_config_dir / "modules" / "extra.yaml", "w") as f:
            yaml.dump(sample_module_data, f)

        manager = ConfigManager(str(swerve_config_dir))

        assert "extra" in manager.list_modules()


class TestConfigManagerGetMethods:
    """Test ConfigManager getter methods."""

    def test_get_module_descriptor(self, swerve_config_dir):
        """Test parsing a loaded module into a descriptor."""
        manager = ConfigManager(str(swerve_config_dir))

        descriptor = manager.get_module_descriptor("frontright")

        assert isinstance(descriptor, ModuleDescriptor)
        assert descriptor.location.front == 12
        assert descriptor.location.left == -12

    def test_get_nonexistent_module(self, swerve_config_dir):
        """Test that an unknown module name returns None."""
        manager = ConfigManager(str(swerve_config_dir))

        assert manager.get_module_descriptor("middle") is None
        assert manager.get_module_data("middle") is None

    def test_get_module_data_returns_copy(self, swerve_config_dir):
        """Test that module data is returned as an independent copy."""
        manager = ConfigManager(str(swerve_config_dir))

        data = manager.get_module_data("frontleft")
        data["location"]["front"] = 0

        assert manager.get_module_data("frontleft")["location"]["front"] == 12

    def test_get_physical_characteristics(self, swerve_config_dir):
        """Test parsing the physical properties document."""
        manager = ConfigManager(str(swerve_config_dir))

        physical = manager.get_physical_characteristics()

        assert physical.conversion_factor == ConversionFactors(drive=0.05, angle=0.1)
        assert physical.analog_max_voltage == 3.3

    def test_get_pidf_properties(self, swerve_config_dir):
        """Test parsing the PIDF properties document."""
        manager = ConfigManager(str(swerve_config_dir))

        pidf = manager.get_pidf_properties()

        assert pidf.angle.p == 0.01
        assert pidf.angle.output_max == 0.5

    def test_missing_optional_documents_use_defaults(self, tmp_path, sample_module_data):
        """Test defaults when physical and PIDF documents are absent."""
        (tmp_path / "modules").mkdir()
        with open(tmp_path / "modules" / "frontleft.yml", "w") as f:
            yaml.dump(sample_module_data, f)

        manager = ConfigManager(str(tmp_path))

        assert manager.get_physical_characteristics().conversion_factor is None
        assert manager.get_pidf_properties().drive.p == 0.0


    def test_physical_properties_list_is_configuration_error(self, swerve_config_dir):
        """Test that a physical properties file holding a list raises ConfigurationError."""
        (swerve_config_dir / "physicalproperties.yml").write_text("- a\n- b\n")
        manager = ConfigManager(str(swerve_config_dir))

        with pytest.raises(ConfigurationError):
            manager.get_physical_characteristics()


class TestConfigManagerSave:
    """Test saving module documents."""

    def test_save_module_round_trip(self, swerve_config_dir, sample_module_data):
        """Test that a saved module is loaded by a new manager."""
        manager = ConfigManager(str(swerve_config_dir))
        sample_module_data["absoluteEncoderOffset"] = 42.5

        manager.save_module("spare", sample_module_data)
        reloaded = ConfigManager(str(swerve_config_dir))

        assert "spare" in reloaded.list_modules()
        assert reloaded.get_module_descriptor("spare").absolute_encoder_offset == 42.5


class TestConfigValidation:
    """Test module document validation."""

    def test_validate_valid_module(self, sample_module_data):
        """Test that a complete module document has no errors."""
        assert ConfigManager.validate_module(sample_module_data) == []

    def test_validate_empty_module(self):
        """Test that an empty document reports every required key."""
        errors = ConfigManager.validate_module({})

        assert "Missing required key: drive" in errors
        assert "Missing required key: angle" in errors
        assert "Missing required key: location" in errors

    def test_validate_zero_location(self, sample_module_data):
        """Test that a module at the robot center is reported."""
        sample_module_data["location"] = {"front": 0, "left": 0}

        errors = ConfigManager.validate_module(sample_module_data)

        assert any("front" in error and "left" in error for error in errors)

    def test_validate_invalid_data_types(self, sample_module_data):
        """Test that wrongly typed fields are reported."""
        sample_module_data["inverted"] = "yes"
        sample_module_data["absoluteEncoderOffset"] = "north"
        sample_module_data["drive"] = {"id": 4}

        errors = ConfigManager.validate_module(sample_module_data)

        assert "'inverted' must be a dictionary" in errors
        assert "'absoluteEncoderOffset' must be a number (degrees)" in errors
        assert "'drive' must have a 'type' field" in errors

    def test_validate_not_a_dictionary(self):
        """Test that a non-mapping document is rejected."""
        assert ConfigManager.validate_module([1, 2]) == ["Module document must be a dictionary"]

    def test_empty_template_needs_location(self):
        """Test that the empty template still needs a location."""
        template = ConfigManager.create_empty_module("sparkmax", "sparkmax", "cancoder")

        errors = ConfigManager.validate_module(template)

        assert errors == ["'location' cannot have both 'front' and 'left' set to 0"]

    def test_template_without_encoder(self):
        """Test that a template without an encoder parses to no encoder."""
        template = ConfigManager.create_empty_module("talonfx", "talonfx")

        assert template["encoder"] is None
        assert ModuleDescriptor.from_dict(template).encoder is None


class TestBuildModules:
    """Test building every module in a directory."""

    def test_build_all_modules(self, swerve_config_dir, builder):
        """Test building every module in name order."""
        manager = ConfigManager(str(swerve_config_dir))

        modules = manager.build_modules(builder)

        assert [module.name for module in modules] == ["backleft", "backright", "frontleft", "frontright"]
        assert all(isinstance(module, ResolvedModuleConfiguration) for module in modules)
        assert modules[0].location_m == pytest.approx((-0.3048, 0.3048))

    def test_modules_use_own_factors(self, swerve_config_dir, builder):
        """Test that module geometry wins over the fallback factors."""
        manager = ConfigManager(str(swerve_config_dir))

        modules = manager.build_modules(builder)

        # Module geometry wins over the physical properties fallback
        assert modules[0].conversion_factors.angle == pytest.approx(360 / 21.4285714)

    def test_build_stops_on_invalid_module(self, swerve_config_dir, sample_module_data, builder):
        """Test that building stops at a misplaced module."""
        sample_module_data["location"] = {"front": 0, "left": 0}
        with open(swerve_config_dir / "modules" / "center.yml", "w") as f:
            yaml.dump(sample_module_data, f)
        manager = ConfigManager(str(swerve_config_dir))

        with pytest.raises(ModulePlacementError):
            manager.build_modules(builder)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
