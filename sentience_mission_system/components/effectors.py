"""Simulated drive effector."""

from typing import Optional

from pydantic import Field

from sentience_protocols import (
    EffectorCommand,
    EffectorFamily,
    EffectorState,
    EffectorStatus,
    LoggerProtocol,
)
from sentience_shared.errors import EFFECTOR_COMMAND_UNSUPPORTED, EffectorError, Messages
from sentience_avionics.capabilities import export_effector
from sentience_avionics.configuration import EffectorConfiguration
from sentience_control_tower import Effector

MOVE = "move"
STOP = "stop"


class SimulatedDriveConfiguration(EffectorConfiguration):
    """Speed limit of the simulated drive.

    Commands above ``max_speed`` get the drive stuck.
    """

    max_speed: float = Field(default=1.0, ge=0.0)


@export_effector(EffectorFamily.NON_HOLONOMIC_MOTION)
class SimulatedDriveEffector(Effector):
    """A differential drive that completes every command immediately.

    Commands:
        move: parameters ``speed`` (default 0) and ``duration`` (default 1)
        stop: back to idle
    """

    configuration_type = SimulatedDriveConfiguration

    def __init__(self, logger: Optional[LoggerProtocol] = None):
        super().__init__(logger)
        self._travelled = 0.0

    @property
    def travelled(self) -> float:
        """Signed distance driven since initialise()."""
        return self._travelled

    def _on_initialise(self) -> None:
        self._travelled = 0.0

    def _on_command(self, command: EffectorCommand) -> None:
        if command.action == STOP:
            self._change_state(EffectorState(EffectorStatus.IDLE))
            self._complete(command)
            return

        if command.action != MOVE:
            raise EffectorError(
                EFFECTOR_COMMAND_UNSUPPORTED,
                Messages(
                    full=f"{type(self).__name__} cannot perform {command.action!r}",
                    summary="Unsupported effector command",
                    developer=f"Supported actions are {MOVE!r} and {STOP!r}",
                    user="The robot was asked to do something it cannot do.",
                ),
                context={"action": command.action, "command_id": command.command_id},
                logger=self._logger,
            )

        speed = float(command.parameters.get("speed", 0.0))
        duration = float(command.parameters.get("duration", 1.0))
        if abs(speed) > self.configuration.max_speed:
            self._change_state(EffectorState(EffectorStatus.STUCK, {"speed": speed}))
            self._stuck(command)
            return

        self._change_state(EffectorState(EffectorStatus.BUSY, {"speed": speed}))
        self._travelled += speed * duration
        self._complete(command)
        self._change_state(EffectorState(EffectorStatus.IDLE))


__all__ = [
    "MOVE",
    "STOP",
    "SimulatedDriveConfiguration",
    "SimulatedDriveEffector",
]
