"""Typed configuration sections.

Every section read from a bundle is validated into one of these pydantic
models. Unknown keys are ignored so a component may read the same section
as its own, richer subclass.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sentience_protocols import LogLevel, LogTarget, OutputMethod


def _lower(value: Any) -> Any:
    if isinstance(value, str):
        return value.lower()
    if isinstance(value, list):
        return [v.lower() if isinstance(v, str) else v for v in value]
    return value


class SentienceConfiguration(BaseModel):
    """Base of every configuration section."""

    model_config = ConfigDict(extra="ignore", use_enum_values=False)


class OutputConfiguration(SentienceConfiguration):
    """User-facing output channel."""

    method: OutputMethod = OutputMethod.CONSOLE

    @field_validator('method', mode='before')
    @classmethod
    def lower_method(cls, v: Any) -> Any:
        return _lower(v)


class LogConfiguration(SentienceConfiguration):
    """Log targets, log file and admitted severities."""

    targets: List[LogTarget] = Field(default_factory=lambda: [LogTarget.CONSOLE])
    logfile: str = "trace.txt"
    levels: List[LogLevel] = Field(default_factory=lambda: [
        LogLevel.ALERT,
        LogLevel.CRITICAL,
        LogLevel.WARNING,
        LogLevel.ERROR,
        LogLevel.EMERGENCY,
        LogLevel.FAILURE,
    ])
    json_output: bool = False

    @field_validator('targets', 'levels', mode='before')
    @classmethod
    def lower_values(cls, v: Any) -> Any:
        return _lower(v)


class RobotConfiguration(SentienceConfiguration):
    """Names the robot implementation to start.

    ``robot_type`` is a registered type id ("package.module.ClassName") or
    a bare class name.
    """

    robot_type: str = Field(min_length=1)


class StartupConfiguration(SentienceConfiguration):
    """Arguments the process was started with."""

    args: List[str] = Field(default_factory=list)

    @property
    def bundle_name(self) -> Optional[str]:
        """First non-empty argument, if any."""
        if self.args and self.args[0].strip():
            return self.args[0].strip()
        return None


class SensorConfiguration(SentienceConfiguration):
    """Base section for sensors."""

    name: Optional[str] = None


class EffectorConfiguration(SentienceConfiguration):
    """Base section for effectors."""

    name: Optional[str] = None


class ProcessorConfiguration(SentienceConfiguration):
    """Base section for mid-layer processors."""

    name: Optional[str] = None


__all__ = [
    "SentienceConfiguration",
    "OutputConfiguration",
    "LogConfiguration",
    "RobotConfiguration",
    "StartupConfiguration",
    "SensorConfiguration",
    "EffectorConfiguration",
    "ProcessorConfiguration",
]
