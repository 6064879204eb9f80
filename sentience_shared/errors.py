"""Error taxonomy for the Sentience runtime.

One tagged base exception, SentienceError, carries:
- kind: ErrorKind tag (configuration, factory, lifecycle, ...)
- code: stable integer code
- messages: four-part Messages (full, summary, developer, user)
- level: LogLevel the error is logged at
- timestamp and the originating cause

Errors are logged when they are constructed, not when they are caught.

Code bands:
    1xx  orchestrator / configuration
    2xx  effector factory
    3xx  processor factory
    4xx  robot factory
    5xx  sensor factory
    6xx  discovery / registration
    7xx  lifecycle
    8xx  events
    9xx  environment (coordinates)
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Union

from sentience_protocols import CapabilityKind, ErrorKind, LoggerProtocol, LogLevel
from sentience_shared.logging import get_component_logger, log_at
from sentience_shared.serialization import utc_now


# =============================================================================
# ERROR CODES
# =============================================================================

# Orchestrator
ROBOT_START_FAILED = 100
BOOTSTRAP_UNEXPECTED = 101
ROBOT_TYPE_UNAVAILABLE = 102
CONFIGURATOR_MISSING = 103
FACTORIES_MISSING = 104

# Configuration
SECTION_NOT_FOUND = 150
SECTION_INVALID = 151
BUNDLE_UNREADABLE = 152
WRONG_CONFIGURATION_TYPE = 155
OUTPUT_CONFIGURATION_INVALID = 156

# Effector commands
EFFECTOR_COMMAND_UNSUPPORTED = 250

# Discovery / registration
SCOPE_PATH_MISSING = 601
PLUGIN_IMPORT_FAILED = 602
TYPE_NOT_REGISTERED = 603
MODULE_IMPORT_FAILED = 604
REGISTRATION_REJECTED = 605

# Lifecycle
NOT_CONFIGURED = 701
ALREADY_INITIALISED = 702
ALREADY_DEACTIVATED = 703
NOT_ACTIVE = 704

# Events
LISTENER_FAILED = 801

# Environment
DIMENSION_NOT_PERMITTED = 901
COMPONENT_UNAVAILABLE = 902
COMPONENT_VALUE_UNAVAILABLE = 903


# =============================================================================
# MESSAGES
# =============================================================================

@dataclass(frozen=True)
class Messages:
    """Four audiences for one error."""
    full: str
    summary: str = ""
    developer: str = ""
    user: str = ""

    @classmethod
    def of(cls, text: str) -> "Messages":
        """Use one text for every audience."""
        return cls(full=text, summary=text, developer=text, user=text)

    def to_dict(self) -> Dict[str, str]:
        return {
            "full": self.full,
            "summary": self.summary,
            "developer": self.developer,
            "user": self.user,
        }


# =============================================================================
# BASE ERROR
# =============================================================================

class SentienceError(Exception):
    """Base error for the Sentience runtime.

    Subclasses only fix the kind tag and default level.
    """

    kind: ErrorKind = ErrorKind.GENERAL
    default_level: LogLevel = LogLevel.ERROR

    def __init__(
        self,
        code: int,
        messages: Union[Messages, str],
        *,
        level: Optional[LogLevel] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
        capability: Optional[CapabilityKind] = None,
        logger: Optional[LoggerProtocol] = None,
    ):
        if isinstance(messages, str):
            messages = Messages.of(messages)
        self.code = code
        self.messages = messages
        self.level = level or self.default_level
        self.context: Dict[str, Any] = dict(context or {})
        self.cause = cause
        self.capability = capability
        self.timestamp: datetime = utc_now()
        super().__init__(f"[{code}] {messages.summary or messages.full}")
        if cause is not None:
            self.__cause__ = cause
        self._log(logger)

    def _log(self, logger: Optional[LoggerProtocol]) -> None:
        fields: Dict[str, Any] = {
            "code": self.code,
            "kind": self.kind.value,
            **{f"message_{k}": v for k, v in self.messages.to_dict().items()},
        }
        if self.capability is not None:
            fields["capability"] = self.capability.value
        if self.context:
            fields["context"] = self.context
        if self.cause is not None:
            fields["cause"] = repr(self.cause)
        log_at(get_component_logger("errors", logger), self.level, "sentience_error", **fields)

    @property
    def user_message(self) -> str:
        return self.messages.user or self.messages.summary or self.messages.full

    @property
    def developer_message(self) -> str:
        return self.messages.developer or self.messages.full

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "code": self.code,
            "level": self.level.value,
            "messages": self.messages.to_dict(),
            "capability": self.capability.value if self.capability else None,
            "timestamp": self.timestamp.isoformat(),
            "context": dict(self.context),
        }


# =============================================================================
# CATEGORIES
# =============================================================================

class ConfigurationError(SentienceError):
    """A configuration was missing, malformed, or of the wrong type."""
    kind = ErrorKind.CONFIGURATION
    default_level = LogLevel.CRITICAL


class ConfigurationSectionNotFoundError(ConfigurationError):
    """The active bundle has no section under the requested key."""


class FactoryError(SentienceError):
    """A lookup mechanism itself failed (query or instantiation)."""
    kind = ErrorKind.FACTORY


class FactoryItemNotFoundError(SentienceError):
    """A single-result lookup matched no descriptor.

    ``capability`` says which factory missed.
    """
    kind = ErrorKind.FACTORY_ITEM_NOT_FOUND


class DiscoveryError(SentienceError):
    """A discovery scope could not be read or registered."""
    kind = ErrorKind.DISCOVERY
    default_level = LogLevel.CRITICAL


class LifecycleError(SentienceError):
    """A lifecycle call arrived in a state that does not allow it."""
    kind = ErrorKind.LIFECYCLE


class RobotError(SentienceError):
    kind = ErrorKind.ROBOT


class RobotStartupError(RobotError):
    """The orchestrator could not resolve or start the configured robot."""
    default_level = LogLevel.CRITICAL


class SensorError(SentienceError):
    kind = ErrorKind.SENSOR


class EffectorError(SentienceError):
    kind = ErrorKind.EFFECTOR


class CoordinateError(SentienceError):
    kind = ErrorKind.ENVIRONMENT


class InvalidDimensionError(CoordinateError):
    """A coordinate dimension is not permitted or not present."""
    default_level = LogLevel.ALERT


__all__ = [
    "Messages",
    "SentienceError",
    "ConfigurationError",
    "ConfigurationSectionNotFoundError",
    "FactoryError",
    "FactoryItemNotFoundError",
    "DiscoveryError",
    "LifecycleError",
    "RobotError",
    "RobotStartupError",
    "SensorError",
    "EffectorError",
    "CoordinateError",
    "InvalidDimensionError",
]
