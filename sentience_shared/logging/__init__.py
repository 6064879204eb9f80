"""Centralized Logging Infrastructure for the Sentience runtime.

This module provides the core logging utilities that can be used by all
layers. It implements LoggerProtocol from sentience_protocols.

The structlog pipeline is installed once. Reconfiguration (a new level
set, new targets, a new renderer) swaps module state and the handlers of
the shared stdlib sink, so loggers created before the bundle's log section
was applied pick up the new behaviour without being rebuilt.

Usage:
    from sentience_shared.logging import create_logger, get_component_logger

    # Create logger for injection
    logger = create_logger("configurator", bundle="default")

    # Get component-bound logger
    logger = get_component_logger("RobotFactory", injected_logger)
"""

from __future__ import annotations

import logging
import sys
import threading
from contextvars import ContextVar
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Union

import structlog

from sentience_protocols import LoggerProtocol, LogLevel, LogTarget

# Name of the stdlib logger every record is routed through
SINK_NAME = "sentience"

DEFAULT_LOGFILE = "trace.txt"

DEFAULT_LEVELS: FrozenSet[LogLevel] = frozenset({
    LogLevel.ALERT,
    LogLevel.WARNING,
    LogLevel.ERROR,
    LogLevel.EMERGENCY,
    LogLevel.CRITICAL,
    LogLevel.FAILURE,
})

# Severity ordering (ALL excluded, it is a wildcard)
SEVERITY_ORDER: List[LogLevel] = [lvl for lvl in LogLevel if lvl is not LogLevel.ALL]

# structlog method used to emit each severity
_METHOD_FOR_LEVEL: Dict[LogLevel, str] = {
    LogLevel.METRIC: "debug",
    LogLevel.DATA_EVENT: "debug",
    LogLevel.MESSAGE: "debug",
    LogLevel.DEBUG: "debug",
    LogLevel.NOTIFICATION: "info",
    LogLevel.ALERT: "warning",
    LogLevel.WARNING: "warning",
    LogLevel.ERROR: "error",
    LogLevel.EMERGENCY: "critical",
    LogLevel.CRITICAL: "critical",
    LogLevel.FAILURE: "critical",
}

# Severity implied by a plain method call
_LEVEL_FOR_METHOD: Dict[str, LogLevel] = {
    "debug": LogLevel.DEBUG,
    "info": LogLevel.NOTIFICATION,
    "warning": LogLevel.WARNING,
    "warn": LogLevel.WARNING,
    "error": LogLevel.ERROR,
    "exception": LogLevel.ERROR,
    "critical": LogLevel.CRITICAL,
    "fatal": LogLevel.CRITICAL,
}

# Module state
_CONFIGURED = False
_PIPELINE_INSTALLED = False
_ALLOWED_LEVELS: FrozenSet[LogLevel] = DEFAULT_LEVELS
_RENDERER: Any = None

# Coarse lock around the shared sink so multi-line records never interleave
_SINK_LOCK = threading.RLock()

_current_logger: ContextVar[Optional[LoggerProtocol]] = ContextVar(
    "current_logger",
    default=None
)


def _coerce_level(value: Union[str, LogLevel]) -> LogLevel:
    if isinstance(value, LogLevel):
        return value
    return LogLevel(str(value).lower())


def levels_from(minimum: Union[str, LogLevel]) -> FrozenSet[LogLevel]:
    """Return every severity at or above ``minimum``.

    Accepts LogLevel values and the stdlib names (INFO, WARNING, ...).
    """
    name = minimum.value if isinstance(minimum, LogLevel) else str(minimum).lower()
    if name in _LEVEL_FOR_METHOD:
        floor = _LEVEL_FOR_METHOD[name]
    else:
        floor = _coerce_level(name)
    if floor is LogLevel.ALL:
        return frozenset({LogLevel.ALL})
    start = SEVERITY_ORDER.index(floor)
    return frozenset(SEVERITY_ORDER[start:])


def is_enabled(level: Union[str, LogLevel]) -> bool:
    """Check whether records of ``level`` are currently emitted."""
    lvl = _coerce_level(level)
    return LogLevel.ALL in _ALLOWED_LEVELS or lvl in _ALLOWED_LEVELS


def _filter_severity(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Drop records whose severity is not in the configured level set."""
    severity = event_dict.pop("severity", None)
    level = _coerce_level(severity) if severity is not None else _LEVEL_FOR_METHOD.get(
        method_name, LogLevel.MESSAGE
    )
    if not is_enabled(level):
        raise structlog.DropEvent
    event_dict["level"] = level.value
    return event_dict


def _render(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Any:
    renderer = _RENDERER or structlog.dev.ConsoleRenderer(colors=False)
    return renderer(logger, method_name, event_dict)


def _install_pipeline() -> None:
    """Install the structlog processor chain exactly once."""
    global _PIPELINE_INSTALLED

    if _PIPELINE_INSTALLED:
        return

    sink = logging.getLogger(SINK_NAME)
    sink.setLevel(logging.DEBUG)
    sink.propagate = False
    if not sink.handlers:
        sink.addHandler(logging.StreamHandler(sys.stdout))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _filter_severity,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _render,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    _PIPELINE_INSTALLED = True


def _apply_targets(targets: Iterable[LogTarget], logfile: str) -> None:
    """Replace the handlers of the shared sink."""
    sink = logging.getLogger(SINK_NAME)
    for handler in list(sink.handlers):
        sink.removeHandler(handler)
        handler.close()

    for target in targets:
        if target is LogTarget.CONSOLE:
            sink.addHandler(logging.StreamHandler(sys.stdout))
        elif target is LogTarget.FILE:
            sink.addHandler(logging.FileHandler(logfile, mode="w", encoding="utf-8"))
        # NONE and UI have no sink of their own

    if not sink.handlers:
        sink.addHandler(logging.NullHandler())


class Logger:
    """LoggerProtocol implementation backed by structlog.

    This is the primary logger implementation used throughout Sentience.
    Every emission holds the shared sink lock.
    """

    def __init__(
        self,
        base_logger: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Initialize logger.

        Args:
            base_logger: Underlying structlog logger (created if None)
            context: Bound context fields
        """
        _install_pipeline()
        self._logger = base_logger or structlog.get_logger(SINK_NAME)
        self._context = context or {}

        if self._context:
            self._logger = self._logger.bind(**self._context)

    def _emit(self, method: str, msg: str, **kwargs: Any) -> None:
        with _SINK_LOCK:
            getattr(self._logger, method)(msg, **kwargs)

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log debug message."""
        self._emit("debug", msg, **kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log notification message."""
        self._emit("info", msg, **kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log warning message."""
        self._emit("warning", msg, **kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        """Log error message."""
        self._emit("error", msg, **kwargs)

    def critical(self, msg: str, **kwargs: Any) -> None:
        """Log critical message."""
        self._emit("critical", msg, **kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self._emit("exception", msg, **kwargs)

    def send(self, level: Union[str, LogLevel], msg: str, **kwargs: Any) -> None:
        """Log at an explicit Sentience severity (metric, alert, failure...)."""
        lvl = _coerce_level(level)
        method = _METHOD_FOR_LEVEL.get(lvl, "debug")
        self._emit(method, msg, severity=lvl.value, **kwargs)

    def metric(self, msg: str, **kwargs: Any) -> None:
        """Log a metric event."""
        self.send(LogLevel.METRIC, msg, **kwargs)

    def bind(self, **kwargs: Any) -> "Logger":
        """Create child logger with additional context."""
        new_context = {**self._context, **kwargs}
        return Logger(
            base_logger=structlog.get_logger(SINK_NAME),
            context=new_context,
        )


def configure_logging(
    level: Union[str, LogLevel, None] = None,
    *,
    levels: Optional[Iterable[Union[str, LogLevel]]] = None,
    targets: Optional[Iterable[Union[str, LogTarget]]] = None,
    logfile: str = DEFAULT_LOGFILE,
    json_output: bool = False,
    force: bool = False,
) -> None:
    """Configure logging for the Sentience runtime.

    Called once with process defaults at startup, then again with
    ``force=True`` when a configuration bundle supplies a log section.

    Args:
        level: Minimum severity; expands to every severity at or above it
        levels: Explicit severity set (wins over ``level``)
        targets: Log targets (console, file, none, ui)
        logfile: File written by the FILE target
        json_output: If True, output JSON; if False, console format
        force: Reconfigure even if already configured
    """
    global _CONFIGURED, _ALLOWED_LEVELS, _RENDERER

    if _CONFIGURED and not force:
        return

    _install_pipeline()

    if levels is not None:
        _ALLOWED_LEVELS = frozenset(_coerce_level(lvl) for lvl in levels)
    elif level is not None:
        _ALLOWED_LEVELS = levels_from(level)
    else:
        _ALLOWED_LEVELS = DEFAULT_LEVELS

    if json_output:
        _RENDERER = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        _RENDERER = structlog.dev.ConsoleRenderer(colors=False)

    resolved_targets = [
        t if isinstance(t, LogTarget) else LogTarget(str(t).lower())
        for t in (targets if targets is not None else [LogTarget.CONSOLE])
    ]
    with _SINK_LOCK:
        _apply_targets(resolved_targets, logfile)

    _CONFIGURED = True


def reset_logging() -> None:
    """Restore default logging state.

    Primarily for testing purposes.
    """
    global _CONFIGURED, _ALLOWED_LEVELS, _RENDERER
    _ALLOWED_LEVELS = DEFAULT_LEVELS
    _RENDERER = None
    _CONFIGURED = False


def is_configured() -> bool:
    return _CONFIGURED


def create_logger(
    component: str,
    **context: Any,
) -> Logger:
    """Create a logger for dependency injection.

    Args:
        component: Component name (e.g., "configurator", "robot_factory")
        **context: Additional context to bind

    Returns:
        LoggerProtocol implementation
    """
    return Logger(context={"component": component, **context})


def get_current_logger() -> LoggerProtocol:
    """Get current logger for context-based access.

    Returns:
        LoggerProtocol - either the context-bound logger or a default.
    """
    logger = _current_logger.get()
    if logger is None:
        return Logger()
    return logger


def set_current_logger(logger: LoggerProtocol) -> None:
    """Set current logger for context-based access."""
    _current_logger.set(logger)


def get_component_logger(
    component: str,
    logger: Optional[LoggerProtocol] = None,
) -> LoggerProtocol:
    """Get a logger bound to a component name.

    This is the canonical way to initialize a logger in services and
    factories.

    Args:
        component: Component name (e.g., "Configurator", "RobotFactory")
        logger: Optional injected logger. If None, uses context logger.

    Returns:
        LoggerProtocol bound to the component name
    """
    base_logger = logger or get_current_logger()
    return base_logger.bind(component=component)


def log_at(logger: LoggerProtocol, level: Union[str, LogLevel], msg: str, **kwargs: Any) -> None:
    """Log at a Sentience severity on any LoggerProtocol.

    Loggers without ``send`` (e.g. mocks or foreign adapters) receive the
    nearest plain method call.
    """
    lvl = _coerce_level(level)
    if isinstance(logger, Logger):
        logger.send(lvl, msg, **kwargs)
        return
    method = _METHOD_FOR_LEVEL.get(lvl, "debug")
    if method == "critical" and not hasattr(logger, "critical"):
        method = "error"
    getattr(logger, method)(msg, severity=lvl.value, **kwargs)


__all__ = [
    # Configuration
    "configure_logging",
    "reset_logging",
    "is_configured",
    "is_enabled",
    "levels_from",
    "DEFAULT_LEVELS",
    "DEFAULT_LOGFILE",
    "SEVERITY_ORDER",
    "SINK_NAME",
    # Logger creation
    "create_logger",
    "get_component_logger",
    "log_at",
    # Types
    "Logger",
    # Context
    "get_current_logger",
    "set_current_logger",
]
