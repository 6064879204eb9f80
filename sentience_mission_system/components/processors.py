"""Pass-through sensor processor."""

import dataclasses
from typing import List, Optional

from sentience_protocols import LoggerProtocol, ProcessorFamily, SensorEventArgs
from sentience_avionics.capabilities import export_processor
from sentience_control_tower import EventChannel, Listener, Processor, Sensor


@export_processor(ProcessorFamily.SENSOR)
class PassThroughProcessor(Processor):
    """Relays sensor batches unchanged, as their source.

    Listeners of ``data_received`` see the processor, not the sensor, as
    the event's sensor. Each relayed event is a copy, so other listeners of
    the source sensor still see the sensor.
    """

    def __init__(self, logger: Optional[LoggerProtocol] = None):
        super().__init__(logger)
        self.data_received = EventChannel("data_received", logger=self._logger)
        self._sources: List[Sensor] = []

    def subscribe_data_received(self, listener: Listener) -> None:
        self.data_received.subscribe(listener)

    def attach(self, sensor: Sensor) -> None:
        """Relay everything ``sensor`` publishes."""
        if sensor in self._sources:
            return
        sensor.subscribe_data_received(self.relay)
        self._sources.append(sensor)

    def relay(self, args: SensorEventArgs) -> int:
        self.require_active("relay")
        return self.data_received.fire(dataclasses.replace(args, sensor=self))

    def _on_deactivate(self) -> None:
        for sensor in self._sources:
            sensor.unsubscribe_data_received(self.relay)
        self._sources.clear()
        self.data_received.clear()


__all__ = ["PassThroughProcessor"]
