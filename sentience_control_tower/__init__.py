"""Sentience Control Tower - component kernel.

Lifecycle state machine, observer channels, and the Robot / Sensor /
Effector / Processor base classes components are written against.
"""

from sentience_control_tower.lifecycle import SentienceComponent, can_transition
from sentience_control_tower.events import EventChannel, Listener
from sentience_control_tower.components import Effector, Processor, Robot, Sensor

__all__ = [
    # Lifecycle
    "SentienceComponent",
    "can_transition",
    # Events
    "EventChannel",
    "Listener",
    # Components
    "Effector",
    "Sensor",
    "Processor",
    "Robot",
]
