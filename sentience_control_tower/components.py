"""Base classes for the four capability kinds.

Robot, Sensor, Effector and Processor add the command/event protocol on
top of SentienceComponent. Concrete components subclass one of these and
register with an export decorator.
"""

from typing import Any, Optional, Type, Union

from sentience_protocols import (
    ConfigurationResolverProtocol,
    EffectorCommand,
    EffectorEventArgs,
    EffectorState,
    LoggerProtocol,
    SensorData,
    SensorEventArgs,
)
from sentience_shared.errors import CONFIGURATOR_MISSING, Messages, RobotError
from sentience_avionics.configuration import (
    EffectorConfiguration,
    ProcessorConfiguration,
    RobotConfiguration,
    SensorConfiguration,
    SentienceConfiguration,
)
from sentience_control_tower.events import EventChannel, Listener
from sentience_control_tower.lifecycle import SentienceComponent


# =============================================================================
# EFFECTOR
# =============================================================================

class Effector(SentienceComponent):
    """An actuator driven by commands.

    Channels:
        effect_complete: every requested effect finished
        effector_stuck: the effector should be treated as failed
        state_change: the declared operating state changed

    Subclasses implement ``_on_command`` and report back with
    ``_complete``, ``_stuck`` and ``_change_state``.
    """

    configuration_type: Type[SentienceConfiguration] = EffectorConfiguration

    def __init__(
        self,
        logger: Optional[LoggerProtocol] = None,
        isolate_listener_errors: bool = False,
    ):
        super().__init__(logger)
        self.effect_complete = EventChannel("effect_complete", isolate_listener_errors, self._logger)
        self.effector_stuck = EventChannel("effector_stuck", isolate_listener_errors, self._logger)
        self.state_change = EventChannel("state_change", isolate_listener_errors, self._logger)
        self._effector_state = EffectorState()

    @property
    def effector_state(self) -> EffectorState:
        return self._effector_state

    def handle_command(self, command: EffectorCommand) -> None:
        """Single command entry point. Requires the effector to be active."""
        self.require_active("handle_command")
        self._logger.debug(
            "effector_command_received",
            action=command.action,
            command_id=command.command_id,
        )
        self._on_command(command)

    def _on_command(self, command: EffectorCommand) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not handle commands")

    def _complete(self, command: Optional[EffectorCommand] = None) -> int:
        """Fire effect_complete. Returns the number of listeners notified."""
        self.require_active("effect_complete")
        return self.effect_complete.fire(
            EffectorEventArgs(self, command=command, state=self._effector_state)
        )

    def _stuck(self, command: Optional[EffectorCommand] = None) -> int:
        """Fire effector_stuck. Returns the number of listeners notified."""
        self.require_active("effector_stuck")
        return self.effector_stuck.fire(
            EffectorEventArgs(self, command=command, state=self._effector_state)
        )

    def _change_state(self, state: EffectorState) -> bool:
        """Record a new operating state; fires state_change only if it differs."""
        if state == self._effector_state:
            return False
        previous = self._effector_state
        self._effector_state = state
        self._logger.debug(
            "effector_state_changed",
            from_status=previous.status.value,
            to_status=state.status.value,
        )
        self.state_change.fire(EffectorEventArgs(self, state=state))
        return True

    def deactivate(self) -> None:
        try:
            super().deactivate()
        finally:
            self.effect_complete.clear()
            self.effector_stuck.clear()
            self.state_change.clear()


# =============================================================================
# SENSOR
# =============================================================================

class Sensor(SentienceComponent):
    """A data source.

    ``data_received`` fires once per acquired batch with SensorEventArgs.
    """

    configuration_type: Type[SentienceConfiguration] = SensorConfiguration

    def __init__(
        self,
        logger: Optional[LoggerProtocol] = None,
        isolate_listener_errors: bool = False,
    ):
        super().__init__(logger)
        self.data_received = EventChannel("data_received", isolate_listener_errors, self._logger)

    def subscribe_data_received(self, listener: Listener) -> None:
        self.data_received.subscribe(listener)

    def unsubscribe_data_received(self, listener: Listener) -> None:
        self.data_received.unsubscribe(listener)

    def _publish(self, data: Union[SensorData, bytes]) -> int:
        """Fire data_received for one batch. Requires the sensor to be active."""
        self.require_active("publish")
        if not isinstance(data, SensorData):
            data = SensorData(data)
        return self.data_received.fire(SensorEventArgs(self, data))

    def deactivate(self) -> None:
        try:
            super().deactivate()
        finally:
            self.data_received.clear()


# =============================================================================
# PROCESSOR
# =============================================================================

class Processor(SentienceComponent):
    """A mid-layer processor between sensors, effectors and the robot."""

    configuration_type: Type[SentienceConfiguration] = ProcessorConfiguration


# =============================================================================
# ROBOT
# =============================================================================

class Robot(SentienceComponent):
    """A robot assembled from sensors, effectors and processors.

    The orchestrator hands it the global configuration resolver and the
    typed factories before calling initialise().
    """

    configuration_type: Type[SentienceConfiguration] = RobotConfiguration

    def __init__(self, logger: Optional[LoggerProtocol] = None):
        super().__init__(logger)
        self._configurator: Optional[ConfigurationResolverProtocol] = None
        self._factories: Any = None
        self._paused = False

    @property
    def configurator(self) -> Optional[ConfigurationResolverProtocol]:
        return self._configurator

    @property
    def factories(self) -> Any:
        return self._factories

    @property
    def paused(self) -> bool:
        return self._paused

    def give_global_configuration(self, configurator: ConfigurationResolverProtocol) -> None:
        """Keep the resolver for pulling further sections later."""
        self._reject_if_deactivated("give_global_configuration")
        self._configurator = configurator

    def give_factories(self, factories: Any) -> None:
        """Keep the typed factories used to resolve sub-components."""
        self._reject_if_deactivated("give_factories")
        self._factories = factories

    def section(
        self,
        key: str,
        model: Type[SentienceConfiguration] = SentienceConfiguration,
    ) -> Any:
        """Fetch a named section through the global resolver.

        Raises:
            RobotError: No resolver was given (103)
            ConfigurationError: Section missing or invalid
        """
        if self._configurator is None:
            raise RobotError(
                CONFIGURATOR_MISSING,
                Messages(
                    full=f"{type(self).__name__} asked for section {key} before receiving a configurator",
                    summary="Robot has no configuration",
                    developer="Call give_global_configuration() before initialise()",
                    user="The robot could not read its configuration.",
                ),
                context={"key": key},
                logger=self._logger,
            )
        return self._configurator.get_section(key, model)

    def pause(self) -> None:
        self.require_active("pause")
        if self._paused:
            return
        self._on_pause()
        self._paused = True
        self._logger.info("robot_paused")

    def resume(self) -> None:
        self.require_active("resume")
        if not self._paused:
            return
        self._on_resume()
        self._paused = False
        self._logger.info("robot_resumed")

    def _on_pause(self) -> None:
        """Stop issuing commands."""

    def _on_resume(self) -> None:
        """Continue issuing commands."""

    def deactivate(self) -> None:
        try:
            super().deactivate()
        finally:
            self._paused = False


__all__ = [
    "Effector",
    "Sensor",
    "Processor",
    "Robot",
]
