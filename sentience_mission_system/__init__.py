"""Sentience Mission System - application layer.

Composition root, System Orchestrator, Output collaborator, command line
entry point, and the built-in simulated components.
"""

from sentience_mission_system.output import Output
from sentience_mission_system.context import AppContext
from sentience_mission_system.bootstrap import (
    SentienceManager,
    build_discovery_scope,
    create_app_context,
)

__all__ = [
    "Output",
    "AppContext",
    "SentienceManager",
    "build_discovery_scope",
    "create_app_context",
]
