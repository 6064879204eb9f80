"""Simulated odometry sensor."""

import struct
from typing import List, Optional

from pydantic import Field

from sentience_protocols import LoggerProtocol, SensorFamily
from sentience_avionics.capabilities import export_sensor
from sentience_avionics.configuration import SensorConfiguration
from sentience_control_tower import Sensor

# One little-endian double per batch
READING_FORMAT = "<d"


def decode_reading(raw: bytes) -> float:
    return struct.unpack(READING_FORMAT, raw)[0]


class SimulatedOdometryConfiguration(SensorConfiguration):
    """Readings replayed by replay()."""

    readings: List[float] = Field(default_factory=list)


@export_sensor(SensorFamily.DISPLACEMENT)
class SimulatedOdometrySensor(Sensor):
    """Publishes displacement readings as packed doubles."""

    configuration_type = SimulatedOdometryConfiguration

    def __init__(self, logger: Optional[LoggerProtocol] = None):
        super().__init__(logger)
        self._published = 0

    @property
    def published(self) -> int:
        return self._published

    def sample(self, displacement: float) -> int:
        """Publish one reading. Returns the number of listeners notified."""
        notified = self._publish(struct.pack(READING_FORMAT, displacement))
        self._published += 1
        return notified

    def replay(self) -> int:
        """Publish every configured reading in order. Returns the count."""
        for reading in self.configuration.readings:
            self.sample(reading)
        return len(self.configuration.readings)


__all__ = [
    "READING_FORMAT",
    "decode_reading",
    "SimulatedOdometryConfiguration",
    "SimulatedOdometrySensor",
]
