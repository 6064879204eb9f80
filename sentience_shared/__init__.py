"""Shared utilities for the Sentience runtime.

This package provides common utilities that can be used by all layers
without creating circular dependencies. It sits at L0 alongside
sentience_protocols.

Exports:
- Logging: Logger, configure_logging, create_logger, get_component_logger
- Errors: SentienceError and its categories, Messages
- Serialization: from_json, utc_now
- Coordinates: Coordinate, CartesianCoordinate, CoordinateComponent, Direction
"""

from sentience_shared.logging import (
    Logger,
    configure_logging,
    reset_logging,
    create_logger,
    get_component_logger,
    get_current_logger,
    set_current_logger,
    log_at,
)
from sentience_shared.serialization import (
    from_json,
    utc_now,
)
from sentience_shared.errors import (
    Messages,
    SentienceError,
    ConfigurationError,
    ConfigurationSectionNotFoundError,
    FactoryError,
    FactoryItemNotFoundError,
    DiscoveryError,
    LifecycleError,
    RobotError,
    RobotStartupError,
    SensorError,
    EffectorError,
    CoordinateError,
    InvalidDimensionError,
)
from sentience_shared.coordinates import (
    Direction,
    CoordinateComponent,
    Coordinate,
    CartesianCoordinate,
)

__all__ = [
    # Logging
    "Logger",
    "configure_logging",
    "reset_logging",
    "create_logger",
    "get_component_logger",
    "get_current_logger",
    "set_current_logger",
    "log_at",
    # Serialization
    "from_json",
    "utc_now",
    # Errors
    "Messages",
    "SentienceError",
    "ConfigurationError",
    "ConfigurationSectionNotFoundError",
    "FactoryError",
    "FactoryItemNotFoundError",
    "DiscoveryError",
    "LifecycleError",
    "RobotError",
    "RobotStartupError",
    "SensorError",
    "EffectorError",
    "CoordinateError",
    "InvalidDimensionError",
    # Coordinates
    "Direction",
    "CoordinateComponent",
    "Coordinate",
    "CartesianCoordinate",
]
