"""Synchronous observer channels."""

from sentience_control_tower.events.channel import MAX_RECORDED_ERRORS, EventChannel, Listener

__all__ = [
    "EventChannel",
    "Listener",
    "MAX_RECORDED_ERRORS",
]
