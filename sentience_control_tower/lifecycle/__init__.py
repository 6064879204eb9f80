"""Lifecycle contract - configure, initialise, deactivate."""

from sentience_control_tower.lifecycle.component import SentienceComponent, can_transition

__all__ = [
    "SentienceComponent",
    "can_transition",
]
