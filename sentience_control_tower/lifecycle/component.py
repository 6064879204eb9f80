"""Component lifecycle - the configure / initialise / deactivate contract.

State transitions:
    UNINITIALISED -> CONFIGURED -> ACTIVE -> DEACTIVATED
    CONFIGURED -> CONFIGURED (reconfigure)
    UNINITIALISED | CONFIGURED -> DEACTIVATED

DEACTIVATED is terminal. initialise() is single-shot. Repeated
deactivate() calls are no-ops.

Layering: imports from sentience_protocols, sentience_shared and the
avionics configuration models.
"""

import threading
from typing import Any, Dict, Optional, Set, Type

from sentience_protocols import LifecycleState, LoggerProtocol
from sentience_shared.errors import (
    ALREADY_DEACTIVATED,
    ALREADY_INITIALISED,
    NOT_ACTIVE,
    NOT_CONFIGURED,
    WRONG_CONFIGURATION_TYPE,
    ConfigurationError,
    LifecycleError,
    Messages,
)
from sentience_shared.logging import get_component_logger
from sentience_avionics.configuration import SentienceConfiguration


# Valid state transitions
_VALID_TRANSITIONS: Dict[LifecycleState, Set[LifecycleState]] = {
    LifecycleState.UNINITIALISED: {LifecycleState.CONFIGURED, LifecycleState.DEACTIVATED},
    LifecycleState.CONFIGURED: {
        LifecycleState.CONFIGURED,   # Reconfigure
        LifecycleState.ACTIVE,
        LifecycleState.DEACTIVATED,
    },
    LifecycleState.ACTIVE: {LifecycleState.DEACTIVATED},
    LifecycleState.DEACTIVATED: set(),  # Terminal state
}


def can_transition(current: LifecycleState, target: LifecycleState) -> bool:
    return target in _VALID_TRANSITIONS[current]


class SentienceComponent:
    """Base class for every discoverable component.

    Subclasses set ``configuration_type`` and override the ``_on_*`` hooks.
    Callers serialize lifecycle calls on one instance; the internal lock
    only keeps state reads consistent.

    Usage:
        class Lidar(SentienceComponent):
            configuration_type = LidarConfiguration

            def _on_initialise(self) -> None:
                self._port = open_port(self.configuration.port)

        lidar = Lidar()
        lidar.configure(LidarConfiguration(port="/dev/ttyUSB0"))
        lidar.initialise()
        ...
        lidar.deactivate()
    """

    configuration_type: Type[SentienceConfiguration] = SentienceConfiguration
    # Code raised when configure() is handed the wrong type
    configuration_error_code: int = WRONG_CONFIGURATION_TYPE

    def __init__(self, logger: Optional[LoggerProtocol] = None):
        self._logger = get_component_logger(type(self).__name__, logger)
        self._state = LifecycleState.UNINITIALISED
        self._configuration: Optional[SentienceConfiguration] = None
        self._state_lock = threading.RLock()

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state == LifecycleState.ACTIVE

    @property
    def is_deactivated(self) -> bool:
        return self._state == LifecycleState.DEACTIVATED

    @property
    def configuration(self) -> Optional[SentienceConfiguration]:
        return self._configuration

    def get_configuration_type(self) -> Type[SentienceConfiguration]:
        """The configuration section type configure() accepts."""
        return self.configuration_type

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def configure(self, config: Any) -> None:
        """Accept a configuration. Allowed before initialise() only.

        Raises:
            ConfigurationError: ``config`` is not the declared type (155)
            LifecycleError: Already active (702) or deactivated (703)
        """
        with self._state_lock:
            self._reject_if_deactivated("configure")
            if self._state == LifecycleState.ACTIVE:
                raise self._lifecycle_error(
                    ALREADY_INITIALISED,
                    "configure",
                    "cannot be reconfigured once initialised",
                )

            expected = self.get_configuration_type()
            if not isinstance(config, expected):
                raise ConfigurationError(
                    self.configuration_error_code,
                    Messages(
                        full=(
                            f"{type(self).__name__} expects a {expected.__name__} but was "
                            f"given a {type(config).__name__}"
                        ),
                        summary="Incorrect configuration type",
                        developer=(
                            f"Pass a {expected.__name__} (see get_configuration_type()) "
                            f"to {type(self).__name__}.configure()"
                        ),
                        user="The system configuration is incorrect.",
                    ),
                    context={
                        "component": type(self).__name__,
                        "expected": expected.__name__,
                        "actual": type(config).__name__,
                    },
                    logger=self._logger,
                )

            self._on_configure(config)
            self._configuration = config
            self._transition(LifecycleState.CONFIGURED)

    def initialise(self) -> None:
        """Go active. Single-shot.

        If ``_on_initialise`` raises, the component stays configured and
        the error propagates.

        Raises:
            LifecycleError: Not configured (701), already initialised (702),
                or deactivated (703)
        """
        with self._state_lock:
            self._reject_if_deactivated("initialise")
            if self._state == LifecycleState.UNINITIALISED:
                raise self._lifecycle_error(
                    NOT_CONFIGURED,
                    "initialise",
                    "must be configured before it is initialised",
                )
            if self._state == LifecycleState.ACTIVE:
                raise self._lifecycle_error(
                    ALREADY_INITIALISED,
                    "initialise",
                    "has already been initialised",
                )

            self._on_initialise()
            self._transition(LifecycleState.ACTIVE)

    def deactivate(self) -> None:
        """Release resources and enter the terminal state.

        Safe from any state. The component ends deactivated even if
        ``_on_deactivate`` raises; the error is then re-raised.
        """
        with self._state_lock:
            if self._state == LifecycleState.DEACTIVATED:
                return
            try:
                self._on_deactivate()
            finally:
                self._transition(LifecycleState.DEACTIVATED)

    def require_active(self, operation: str) -> None:
        """Guard for command and event entry points.

        Raises:
            LifecycleError: Deactivated (703) or not yet active (704)
        """
        if self._state == LifecycleState.ACTIVE:
            return
        self._reject_if_deactivated(operation)
        raise self._lifecycle_error(
            NOT_ACTIVE,
            operation,
            f"is {self._state.value}, not active",
        )

    # =========================================================================
    # HOOKS
    # =========================================================================

    def _on_configure(self, config: Any) -> None:
        """Validate or apply ``config``. Raising leaves the state unchanged."""

    def _on_initialise(self) -> None:
        """Acquire resources and wire collaborators."""

    def _on_deactivate(self) -> None:
        """Release resources. ``state`` still holds the pre-deactivation state."""

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _transition(self, target: LifecycleState) -> None:
        previous = self._state
        if not can_transition(previous, target):
            raise self._lifecycle_error(
                ALREADY_DEACTIVATED if previous == LifecycleState.DEACTIVATED else NOT_ACTIVE,
                f"transition to {target.value}",
                f"cannot move from {previous.value} to {target.value}",
            )
        self._state = target
        self._logger.debug(
            "component_state_changed",
            from_state=previous.value,
            to_state=target.value,
        )

    def _reject_if_deactivated(self, operation: str) -> None:
        if self._state == LifecycleState.DEACTIVATED:
            raise self._lifecycle_error(
                ALREADY_DEACTIVATED,
                operation,
                "has been deactivated",
            )

    def _lifecycle_error(self, code: int, operation: str, problem: str) -> LifecycleError:
        name = type(self).__name__
        return LifecycleError(
            code,
            Messages(
                full=f"{name}.{operation} rejected: component {problem}",
                summary="Invalid lifecycle call",
                developer=f"{name} {problem}; {operation} is not valid in state {self._state.value}",
                user="A component was used incorrectly.",
            ),
            context={"component": name, "operation": operation, "state": self._state.value},
            logger=self._logger,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(state={self._state.value})"


__all__ = [
    "SentienceComponent",
    "can_transition",
]
