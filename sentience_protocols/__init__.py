"""Sentience protocol layer (L0).

Enums, payload value types and typing.Protocol interfaces shared by every
other layer. This package imports nothing from the rest of the project.
"""

from sentience_protocols.types import (
    CapabilityKind,
    RobotFamily,
    SensorFamily,
    EffectorFamily,
    ProcessorFamily,
    FAMILY_TYPES,
    LifecycleState,
    LogLevel,
    LogTarget,
    OutputMethod,
    ErrorKind,
    EffectorCommand,
    EffectorStatus,
    EffectorState,
    SensorData,
    SensorEventArgs,
    EffectorEventArgs,
)
from sentience_protocols.interfaces import (
    LoggerProtocol,
    ConfigurationResolverProtocol,
    LifecycleProtocol,
    RobotProtocol,
    SensorProtocol,
    EffectorProtocol,
    ProcessorProtocol,
)

__all__ = [
    # Capabilities
    "CapabilityKind",
    "RobotFamily",
    "SensorFamily",
    "EffectorFamily",
    "ProcessorFamily",
    "FAMILY_TYPES",
    # Lifecycle
    "LifecycleState",
    # Logging / output
    "LogLevel",
    "LogTarget",
    "OutputMethod",
    "ErrorKind",
    # Payloads
    "EffectorCommand",
    "EffectorStatus",
    "EffectorState",
    "SensorData",
    "SensorEventArgs",
    "EffectorEventArgs",
    # Protocols
    "LoggerProtocol",
    "ConfigurationResolverProtocol",
    "LifecycleProtocol",
    "RobotProtocol",
    "SensorProtocol",
    "EffectorProtocol",
    "ProcessorProtocol",
]
