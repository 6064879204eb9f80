"""Built-in simulated components.

Importing this package registers them in the default registration table.
They make a complete robot that runs without hardware.
"""

from sentience_mission_system.components.effectors import (
    SimulatedDriveConfiguration,
    SimulatedDriveEffector,
)
from sentience_mission_system.components.sensors import (
    SimulatedOdometryConfiguration,
    SimulatedOdometrySensor,
    decode_reading,
)
from sentience_mission_system.components.processors import PassThroughProcessor
from sentience_mission_system.components.robot import (
    PartConfiguration,
    SimulatedRobot,
    SimulatedRobotConfiguration,
)

__all__ = [
    "SimulatedDriveConfiguration",
    "SimulatedDriveEffector",
    "SimulatedOdometryConfiguration",
    "SimulatedOdometrySensor",
    "decode_reading",
    "PassThroughProcessor",
    "PartConfiguration",
    "SimulatedRobot",
    "SimulatedRobotConfiguration",
]
