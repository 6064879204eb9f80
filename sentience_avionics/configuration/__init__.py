"""Configuration bundles and typed configuration sections."""

from sentience_avionics.configuration.sections import (
    SentienceConfiguration,
    OutputConfiguration,
    LogConfiguration,
    RobotConfiguration,
    StartupConfiguration,
    SensorConfiguration,
    EffectorConfiguration,
    ProcessorConfiguration,
)
from sentience_avionics.configuration.configurator import Configurator

__all__ = [
    "Configurator",
    "SentienceConfiguration",
    "OutputConfiguration",
    "LogConfiguration",
    "RobotConfiguration",
    "StartupConfiguration",
    "SensorConfiguration",
    "EffectorConfiguration",
    "ProcessorConfiguration",
]
