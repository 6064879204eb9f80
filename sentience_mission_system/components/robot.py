"""Simulated mobile robot assembled from catalog parts."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sentience_protocols import (
    EffectorCommand,
    EffectorEventArgs,
    LoggerProtocol,
    RobotFamily,
    SensorEventArgs,
)
from sentience_shared.errors import FACTORIES_MISSING, Messages, RobotError
from sentience_avionics.capabilities import CapabilityFactory, export_robot
from sentience_avionics.configuration import RobotConfiguration
from sentience_control_tower import Effector, Processor, Robot, Sensor, SentienceComponent
from sentience_mission_system.components.processors import PassThroughProcessor


class PartConfiguration(BaseModel):
    """One sub-component: its type id and the section configuring it."""

    model_config = ConfigDict(extra="ignore")

    type: str = Field(min_length=1)
    section: Optional[str] = None


class SimulatedRobotConfiguration(RobotConfiguration):
    sensors: List[PartConfiguration] = Field(default_factory=list)
    effectors: List[PartConfiguration] = Field(default_factory=list)
    processors: List[PartConfiguration] = Field(default_factory=list)


@export_robot(RobotFamily.MOBILE)
class SimulatedRobot(Robot):
    """A mobile robot that drives every effector with each command.

    On initialise() it resolves its sensors, effectors and processors
    through the factories, configures each from its named section (or the
    part's default configuration), initialises them, and wires their
    events. Parts are torn down in reverse order on deactivate().
    """

    configuration_type = SimulatedRobotConfiguration

    def __init__(self, logger: Optional[LoggerProtocol] = None):
        super().__init__(logger)
        self._sensors: List[Sensor] = []
        self._effectors: List[Effector] = []
        self._processors: List[Processor] = []
        self._started: List[SentienceComponent] = []
        self.received: List[SensorEventArgs] = []
        self.completed: List[EffectorEventArgs] = []
        self.stuck: List[EffectorEventArgs] = []

    @property
    def sensors(self) -> List[Sensor]:
        return list(self._sensors)

    @property
    def effectors(self) -> List[Effector]:
        return list(self._effectors)

    @property
    def processors(self) -> List[Processor]:
        return list(self._processors)

    def drive(self, command: EffectorCommand) -> int:
        """Send ``command`` to every effector.

        Returns:
            Number of effectors commanded (0 while paused)
        """
        self.require_active("drive")
        if self.paused:
            self._logger.info("drive_ignored_while_paused", action=command.action)
            return 0
        for effector in self._effectors:
            effector.handle_command(command)
        return len(self._effectors)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def _on_initialise(self) -> None:
        if self.factories is None:
            raise RobotError(
                FACTORIES_MISSING,
                Messages(
                    full=f"{type(self).__name__} was initialised without capability factories",
                    summary="Robot has no factories",
                    developer="Call give_factories() before initialise()",
                    user="The robot could not load its parts.",
                ),
                logger=self._logger,
            )

        config: SimulatedRobotConfiguration = self.configuration
        try:
            for part in config.sensors:
                self._sensors.append(self._start_part(self.factories.sensors, part))
            for part in config.effectors:
                self._effectors.append(self._start_part(self.factories.effectors, part))
            for part in config.processors:
                self._processors.append(self._start_part(self.factories.processors, part))
        except Exception:
            self._stop_parts()
            raise

        self._wire()
        self._logger.info(
            "robot_assembled",
            sensors=len(self._sensors),
            effectors=len(self._effectors),
            processors=len(self._processors),
        )

    def _on_deactivate(self) -> None:
        self._stop_parts()

    # =========================================================================
    # ASSEMBLY
    # =========================================================================

    def _start_part(self, factory: CapabilityFactory, part: PartConfiguration) -> Any:
        component = factory.one_by_type(part.type)
        model = component.get_configuration_type()
        section = self.section(part.section, model) if part.section else model()
        component.configure(section)
        component.initialise()
        self._started.append(component)
        self._logger.debug("part_started", kind=factory.kind.value, type=part.type)
        return component

    def _wire(self) -> None:
        relays = [p for p in self._processors if isinstance(p, PassThroughProcessor)]
        for sensor in self._sensors:
            if relays:
                for relay in relays:
                    relay.attach(sensor)
            else:
                sensor.subscribe_data_received(self._on_sensor_data)
        for relay in relays:
            relay.subscribe_data_received(self._on_sensor_data)
        for effector in self._effectors:
            effector.effect_complete.subscribe(self._on_effect_complete)
            effector.effector_stuck.subscribe(self._on_effector_stuck)

    def _stop_parts(self) -> None:
        """Deactivate started parts newest first; re-raise the first failure."""
        first_error: Optional[Exception] = None
        while self._started:
            component = self._started.pop()
            try:
                component.deactivate()
            except Exception as e:
                self._logger.error(
                    "part_deactivation_failed",
                    part=type(component).__name__,
                    error=str(e),
                )
                if first_error is None:
                    first_error = e
        self._sensors.clear()
        self._effectors.clear()
        self._processors.clear()
        if first_error is not None:
            raise first_error

    # =========================================================================
    # EVENTS
    # =========================================================================

    def _on_sensor_data(self, args: SensorEventArgs) -> None:
        self.received.append(args)

    def _on_effect_complete(self, args: EffectorEventArgs) -> None:
        self.completed.append(args)

    def _on_effector_stuck(self, args: EffectorEventArgs) -> None:
        self.stuck.append(args)
        self._logger.warning(
            "effector_stuck",
            effector=type(args.effector).__name__,
            command_id=args.command.command_id if args.command else None,
        )


__all__ = [
    "PartConfiguration",
    "SimulatedRobotConfiguration",
    "SimulatedRobot",
]
