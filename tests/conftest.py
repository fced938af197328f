"""
Shared pytest fixtures for swerve_config tests.

Provides simulated hardware, module documents and configuration directories.
"""

import pytest
import yaml

from swerve_config.config.builder import ModuleConfigBuilder
from swerve_config.config.descriptors import ConversionFactors, PhysicalCharacteristics, PIDFConfig
from swerve_config.hardware.alerts import AlertSink
from swerve_config.hardware.base import DeviceSpec
from swerve_config.hardware.simulated import SimulatedDeviceFactory, SimulatedMotor


@pytest.fixture
def alert_sink():
    """
    Alert sink that only records advisory state.

    Returns:
        AlertSink: Fresh sink with no active advisories
    """
    return AlertSink()


@pytest.fixture
def device_factory():
    """Simulated device factory that remembers the devices it created."""
    return SimulatedDeviceFactory()


@pytest.fixture
def spark_max_motor(device_factory):
    """
    SPARK MAX angle motor.

    Returns:
        SimulatedMotor: Motor with default configuration
    """
    return device_factory.create_motor(DeviceSpec(type="sparkmax", id=10), is_drive_motor=False)


@pytest.fixture
def talon_fx_motor(device_factory):
    """TalonFX motor, which has no data port for attached encoders."""
    return device_factory.create_motor(DeviceSpec(type="talonfx", id=11), is_drive_motor=False)


@pytest.fixture
def builder(device_factory, alert_sink):
    """ModuleConfigBuilder wired to simulated hardware and a recording sink."""
    return ModuleConfigBuilder(device_factory, alert_sink)


@pytest.fixture
def pidf():
    """Sample angle PIDF."""
    return PIDFConfig(p=0.01, d=0.1)


@pytest.fixture
def physical_characteristics():
    """
    Physical characteristics with a complete conversion factor fallback.

    Returns:
        PhysicalCharacteristics: drive 0.05 m/rot, angle 0.1 deg/rot
    """
    return PhysicalCharacteristics(conversion_factor=ConversionFactors(drive=0.05, angle=0.1))


@pytest.fixture
def sample_module_data():
    """
    Sample module document as written in a module file.

    Returns:
        dict: Module with SPARK MAX motors and an analog absolute encoder
    """
    return {
        "drive": {"type": "sparkmax", "id": 4, "canbus": None},
        "angle": {"type": "sparkmax", "id": 3, "canbus": None},
        "encoder": {"type": "sparkmax_analog", "id": 3, "canbus": None},
        "inverted": {"drive": False, "angle": True},
        "absoluteEncoderOffset": -114.609,
        "absoluteEncoderInverted": False,
        "location": {"front": 12, "left": 12},
        "conversionFactors": {
            "drive": {"gearRatio": 6.75, "diameter": 4, "factor": 0},
            "angle": {"gearRatio": 21.4285714, "factor": 0},
        },
        "useCosineCompensator": True,
    }


@pytest.fixture
def sample_physical_properties():
    """Sample physical properties document."""
    return {
        "optimalVoltage": 12,
        "wheelGripCoefficientOfFriction": 1.19,
        "currentLimit": {"drive": 40, "angle": 20},
        "rampRate": {"drive": 0.25, "angle": 0.25},
        "analogMaxVoltage": 3.3,
        "conversionFactors": {"drive": 0.05, "angle": 0.1},
    }


@pytest.fixture
def sample_pidf_properties():
    """Sample PIDF properties document."""
    return {
        "drive": {"p": 0.0020645, "i": 0, "d": 0, "f": 0, "iz": 0},
        "angle": {"p": 0.01, "i": 0, "d": 0, "f": 0, "iz": 0, "output": {"min": -0.5, "max": 0.5}},
    }


@pytest.fixture
def swerve_config_dir(tmp_path, sample_module_data, sample_physical_properties, sample_pidf_properties):
    """
    Create a swerve configuration directory with four modules.

    Returns:
        Path: Configuration directory
    """
    modules_dir = tmp_path / "modules"
    modules_dir.mkdir()

    with open(tmp_path / "physicalproperties.yml", "w") as f:
        yaml.dump(sample_physical_properties, f)
    with open(modules_dir / "pidfproperties.yml", "w") as f:
        yaml.dump(sample_pidf_properties, f)

    locations = {
        "frontleft": (12, 12),
        "frontright": (12, -12),
        "backleft": (-12, 12),
        "backright": (-12, -12),
    }
    for index, (name, (front, left)) in enumerate(locations.items()):
        module = dict(sample_module_data)
        module["drive"] = {"type": "sparkmax", "id": 2 * index + 1}
        module["angle"] = {"type": "sparkmax", "id": 2 * index + 2}
        module["encoder"] = {"type": "sparkmax_analog", "id": 2 * index + 2}
        module["location"] = {"front": front, "left": left}
        with open(modules_dir / f"{name}.yml", "w") as f:
            yaml.dump(module, f)

    return tmp_path


@pytest.fixture
def failing_motor_factory(device_factory):
    """
    Make every motor created by the device factory reject configuration writes.

    Returns:
        SimulatedDeviceFactory: The patched factory
    """
    create_motor = device_factory.create_motor

    def create_failing_motor(spec, is_drive_motor):
        motor: SimulatedMotor = create_motor(spec, is_drive_motor)
        motor.writes.always_fail = True
        return motor

    device_factory.create_motor = create_failing_motor
    return device_factory
