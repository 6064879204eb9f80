"""Python type definitions for the Sentience protocol layer.

These enums and dataclasses define the contract between the host runtime
and pluggable components (robots, sensors, effectors, processors).
Nothing in here has behaviour beyond validation and small helpers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Type
from uuid import uuid4


# =============================================================================
# CAPABILITIES
# =============================================================================

class CapabilityKind(str, Enum):
    """The capability contracts a component can implement."""
    ROBOT = "robot"
    SENSOR = "sensor"
    EFFECTOR = "effector"
    PROCESSOR = "processor"


class RobotFamily(str, Enum):
    """Coarse robot categories."""
    MOBILE = "mobile"
    STATIC = "static"
    ANY = "any"


class SensorFamily(str, Enum):
    """Sensing modes."""
    CAMERA = "camera"
    DEPTH = "depth"
    ORIENTATION = "orientation"
    ACCELERATION = "acceleration"
    VELOCITY = "velocity"
    DISPLACEMENT = "displacement"
    GPS = "gps"
    ROTATION = "rotation"
    ANGULAR_VELOCITY = "angular_velocity"
    UNKNOWN = "unknown"


class EffectorFamily(str, Enum):
    """Motion styles for effectors.

    UNKNOWN exists for completeness; implementations should declare a
    concrete family.
    """
    HOLONOMIC_MOTION = "holonomic_motion"
    NON_HOLONOMIC_MOTION = "non_holonomic_motion"
    PLANAR = "planar"
    UNKNOWN = "unknown"


class ProcessorFamily(str, Enum):
    """Where a mid-layer processor sits."""
    EFFECTOR = "effector"
    SENSOR = "sensor"
    SUBSUMPTION = "subsumption"


# Family enum owned by each capability kind
FAMILY_TYPES: Dict[CapabilityKind, Type[Enum]] = {
    CapabilityKind.ROBOT: RobotFamily,
    CapabilityKind.SENSOR: SensorFamily,
    CapabilityKind.EFFECTOR: EffectorFamily,
    CapabilityKind.PROCESSOR: ProcessorFamily,
}


# =============================================================================
# LIFECYCLE
# =============================================================================

class LifecycleState(str, Enum):
    """Component lifecycle states.

    State transitions:
        UNINITIALISED -> CONFIGURED -> ACTIVE -> DEACTIVATED
        any non-terminal state -> DEACTIVATED
    """
    UNINITIALISED = "uninitialised"
    CONFIGURED = "configured"
    ACTIVE = "active"
    DEACTIVATED = "deactivated"  # Terminal


# =============================================================================
# LOGGING / OUTPUT
# =============================================================================

class LogLevel(str, Enum):
    """Log severities in increasing order.

    ALL is not a severity; in a level set it admits everything.
    """
    METRIC = "metric"
    DATA_EVENT = "data_event"
    MESSAGE = "message"
    DEBUG = "debug"
    NOTIFICATION = "notification"
    ALERT = "alert"
    WARNING = "warning"
    ERROR = "error"
    EMERGENCY = "emergency"
    CRITICAL = "critical"
    FAILURE = "failure"
    ALL = "all"


class LogTarget(str, Enum):
    """Where log records are written."""
    NONE = "none"
    CONSOLE = "console"
    FILE = "file"
    UI = "ui"


class OutputMethod(str, Enum):
    """User-facing output channels."""
    NONE = "none"
    CONSOLE = "console"
    UI = "ui"
    LINE_DISPLAY = "line_display"


class ErrorKind(str, Enum):
    """Tag carried by every SentienceError."""
    GENERAL = "general"
    CONFIGURATION = "configuration"
    FACTORY = "factory"
    FACTORY_ITEM_NOT_FOUND = "factory_item_not_found"
    DISCOVERY = "discovery"
    LIFECYCLE = "lifecycle"
    ROBOT = "robot"
    SENSOR = "sensor"
    EFFECTOR = "effector"
    ENVIRONMENT = "environment"


# =============================================================================
# COMMAND / EVENT PAYLOADS
# =============================================================================

@dataclass(frozen=True)
class EffectorCommand:
    """A command issued by a robot to an effector."""
    action: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    command_id: str = field(default_factory=lambda: str(uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action,
            "parameters": dict(self.parameters),
            "command_id": self.command_id,
        }


class EffectorStatus(str, Enum):
    """Operating status reported by an effector."""
    IDLE = "idle"
    BUSY = "busy"
    STUCK = "stuck"
    DISABLED = "disabled"


@dataclass(frozen=True)
class EffectorState:
    """Declared operating state of an effector."""
    status: EffectorStatus = EffectorStatus.IDLE
    detail: Dict[str, Any] = field(default_factory=dict)


class SensorData:
    """A batch of raw data acquired by a sensor."""

    def __init__(self, raw: bytes) -> None:
        self._raw = bytes(raw)

    def as_raw(self) -> bytes:
        """Return the raw bytes of this batch."""
        return self._raw

    def __len__(self) -> int:
        return len(self._raw)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SensorData):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(self._raw)

    def __repr__(self) -> str:
        return f"SensorData({len(self._raw)} bytes)"


@dataclass
class SensorEventArgs:
    """Payload of a DataReceived event.

    The sensor back-reference can be replaced by a relay so listeners see
    the relay as the source.
    """
    sensor: Any
    data: SensorData

    def override_sensor(self, sensor: Any) -> None:
        self.sensor = sensor


@dataclass
class EffectorEventArgs:
    """Payload of EffectComplete / EffectorStuck events."""
    effector: Any
    command: Optional[EffectorCommand] = None
    state: Optional[EffectorState] = None

    def override_effector(self, effector: Any) -> None:
        self.effector = effector
