"""Logging bring-up for the Sentience runtime.

Base logging functionality comes from sentience_shared.logging. This module
applies it from the two places configuration comes from:

- process settings, before any bundle is loaded (configure_from_settings)
- the bundle's ``log`` section, during bootstrap (configure_from_section)

Usage:
    from sentience_avionics.logging import configure_from_section

    section = configurator.get_section("log", LogConfiguration)
    configure_from_section(section)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sentience_protocols import LoggerProtocol
from sentience_shared.logging import (
    Logger,
    configure_logging,
    create_logger,
    get_component_logger,
    get_current_logger,
    set_current_logger,
    levels_from,
)

if TYPE_CHECKING:
    from sentience_avionics.configuration import LogConfiguration
    from sentience_avionics.settings import Settings


def configure_from_settings(settings: "Settings", *, force: bool = False) -> None:
    """Apply the pre-bundle logging defaults from process settings."""
    configure_logging(
        levels=levels_from(settings.log_level),
        targets=settings.log_targets,
        logfile=settings.log_file,
        json_output=settings.log_json,
        force=force,
    )


def configure_from_section(
    section: "LogConfiguration",
    logger: Optional[LoggerProtocol] = None,
) -> None:
    """Apply a bundle's log section, replacing whatever was configured.

    Raises:
        OSError: If the log file cannot be opened
    """
    configure_logging(
        levels=section.levels,
        targets=section.targets,
        logfile=section.logfile,
        json_output=section.json_output,
        force=True,
    )
    get_component_logger("logging", logger).info(
        "logging_configured",
        targets=[t.value for t in section.targets],
        levels=[lvl.value for lvl in section.levels],
        logfile=section.logfile,
    )


__all__ = [
    "configure_from_settings",
    "configure_from_section",
    # Re-exports
    "Logger",
    "configure_logging",
    "create_logger",
    "get_component_logger",
    "get_current_logger",
    "set_current_logger",
]
