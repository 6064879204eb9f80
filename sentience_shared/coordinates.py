"""Coordinate value types shared by sensors, effectors and robots.

A Coordinate is a set of CoordinateComponents keyed by a one-letter
dimension. Each concrete coordinate type declares which dimensions it
permits.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from sentience_protocols import LoggerProtocol, LogLevel
from sentience_shared.errors import (
    COMPONENT_UNAVAILABLE,
    COMPONENT_VALUE_UNAVAILABLE,
    DIMENSION_NOT_PERMITTED,
    InvalidDimensionError,
    Messages,
)
from sentience_shared.logging import get_component_logger, log_at


class Direction(str, Enum):
    """General directions in the environment."""
    FORWARDS = "forwards"
    BACKWARDS = "backwards"
    LEFT = "left"
    RIGHT = "right"
    NONE = "none"  # No direction, or stop


@dataclass
class CoordinateComponent:
    """One dimension of a coordinate.

    An uncertainty of -1 means unknown.
    """
    dimension: str
    value: float = 0.0
    uncertainty: float = -1.0

    @property
    def sign(self) -> int:
        if self.value > 0:
            return 1
        if self.value < 0:
            return -1
        return 0


class Coordinate:
    """Base coordinate. Subclasses set PERMITTED_DIMENSIONS."""

    PERMITTED_DIMENSIONS: Tuple[str, ...] = ()

    def __init__(self, logger: Optional[LoggerProtocol] = None):
        self._components: Dict[str, CoordinateComponent] = {}
        self._logger = get_component_logger(type(self).__name__, logger)

    @property
    def permitted_dimensions(self) -> Tuple[str, ...]:
        return self.PERMITTED_DIMENSIONS

    def add_component(self, component: CoordinateComponent) -> None:
        """Add or replace a component, checking its dimension is permitted."""
        if component.dimension not in self.permitted_dimensions:
            raise InvalidDimensionError(
                DIMENSION_NOT_PERMITTED,
                Messages(
                    full=(
                        f"The coordinate component added ({component.dimension}) was not "
                        f"within the permitted components list of {type(self).__name__}"
                    ),
                    summary="Prohibited coordinate component",
                    developer=(
                        f"The coordinate component ({component.dimension}) is not permitted "
                        "in this type of coordinate"
                    ),
                    user="An error occurred in the coordinate space",
                ),
                context={"dimension": component.dimension},
                logger=self._logger,
            )
        log_at(self._logger, LogLevel.DEBUG, "coordinate_component_added",
               code=10011, dimension=component.dimension)
        self._components[component.dimension] = component

    def _missing(self, code: int, dimension: str) -> InvalidDimensionError:
        return InvalidDimensionError(
            code,
            Messages(
                full=f"The coordinate component requested ({dimension}) does not exist in this coordinate",
                summary="Unavailable coordinate component",
                developer=(
                    f"The coordinate component ({dimension}) is not present in this type of coordinate"
                ),
                user="An error occurred in the coordinate space",
            ),
            context={"dimension": dimension},
            logger=self._logger,
        )

    def get_component(self, dimension: str) -> CoordinateComponent:
        if dimension not in self._components:
            raise self._missing(COMPONENT_UNAVAILABLE, dimension)
        log_at(self._logger, LogLevel.DEBUG, "coordinate_component_returned",
               code=10012, dimension=dimension)
        return self._components[dimension]

    def get_component_value(self, dimension: str) -> float:
        if dimension not in self._components:
            raise self._missing(COMPONENT_VALUE_UNAVAILABLE, dimension)
        log_at(self._logger, LogLevel.DEBUG, "coordinate_value_returned",
               code=10013, dimension=dimension)
        return self._components[dimension].value

    def vector_length(self) -> float:
        """Euclidean length over every permitted dimension.

        Raises InvalidDimensionError when a permitted dimension is unset.
        """
        total = sum(self.get_component_value(dim) ** 2 for dim in self.permitted_dimensions)
        length = math.sqrt(total)
        log_at(self._logger, LogLevel.DEBUG, "coordinate_length_computed",
               code=10014, length=length)
        return length

    def __contains__(self, dimension: str) -> bool:
        return dimension in self._components


class CartesianCoordinate(Coordinate):
    """An (x, y, z) coordinate."""

    PERMITTED_DIMENSIONS = ("x", "y", "z")

    def __init__(
        self,
        x: Optional[CoordinateComponent] = None,
        y: Optional[CoordinateComponent] = None,
        z: Optional[CoordinateComponent] = None,
        logger: Optional[LoggerProtocol] = None,
    ):
        super().__init__(logger)
        for component in (x, y, z):
            if component is not None:
                self.add_component(component)

    @classmethod
    def of(cls, x: float, y: float, z: float) -> "CartesianCoordinate":
        return cls(
            CoordinateComponent("x", x),
            CoordinateComponent("y", y),
            CoordinateComponent("z", z),
        )


__all__ = [
    "Direction",
    "CoordinateComponent",
    "Coordinate",
    "CartesianCoordinate",
]
