"""Protocol definitions - interfaces for dependency injection.

These are typing.Protocol classes. They describe what the host runtime
expects from a component without requiring it to inherit from the base
classes in sentience_control_tower.

Only methods are declared so that issubclass() checks work at
registration time.
"""

from typing import Any, Callable, List, Optional, Protocol, Type, runtime_checkable


# =============================================================================
# LOGGING
# =============================================================================

@runtime_checkable
class LoggerProtocol(Protocol):
    """Structured logging interface."""

    def info(self, message: str, **kwargs: Any) -> None: ...
    def debug(self, message: str, **kwargs: Any) -> None: ...
    def warning(self, message: str, **kwargs: Any) -> None: ...
    def error(self, message: str, **kwargs: Any) -> None: ...
    def bind(self, **kwargs: Any) -> "LoggerProtocol": ...


# =============================================================================
# CONFIGURATION
# =============================================================================

@runtime_checkable
class ConfigurationResolverProtocol(Protocol):
    """Loads named configuration bundles and hands out typed sections."""

    def list_bundles(self) -> List[str]: ...
    def select_bundle(self, name: str) -> bool: ...
    def has_section(self, key: str) -> bool: ...
    def get_section(
        self,
        key: str,
        model: Optional[Type[Any]] = None,
        deserialise_as: Optional[Type[Any]] = None,
    ) -> Any: ...


# =============================================================================
# LIFECYCLE
# =============================================================================

@runtime_checkable
class LifecycleProtocol(Protocol):
    """The three-call protocol every discoverable component honours.

    configure() must succeed before initialise(); deactivate() is terminal.
    """

    def configure(self, config: Any) -> None: ...
    def initialise(self) -> None: ...
    def deactivate(self) -> None: ...
    def get_configuration_type(self) -> Type[Any]: ...


# =============================================================================
# CAPABILITIES
# =============================================================================

@runtime_checkable
class RobotProtocol(LifecycleProtocol, Protocol):
    """A robot assembled from sensors, effectors and processors."""

    def pause(self) -> None: ...
    def resume(self) -> None: ...
    def give_global_configuration(self, configurator: ConfigurationResolverProtocol) -> None: ...
    def give_factories(self, factories: Any) -> None: ...


@runtime_checkable
class SensorProtocol(LifecycleProtocol, Protocol):
    """A data source. Fires DataReceived once per acquired batch."""

    def subscribe_data_received(self, listener: Callable[..., Any]) -> None: ...


@runtime_checkable
class EffectorProtocol(LifecycleProtocol, Protocol):
    """An actuator driven by commands."""

    def handle_command(self, command: Any) -> None: ...


@runtime_checkable
class ProcessorProtocol(LifecycleProtocol, Protocol):
    """A mid-layer processor between sensors, effectors and the robot."""
