"""Capability registration - the explicit registration table.

Components declare their capability kind and family with a static
registration call, usually through one of the export decorators:

    @export_sensor(SensorFamily.DISPLACEMENT)
    class WheelOdometry(Sensor):
        ...

Provides:
- CapabilityDescriptor: Immutable (kind, family, concrete type) metadata
- Registration: Descriptor + constructor + registration sequence number
- RegistrationTable: The table discovery scopes read from
- export / export_robot / export_sensor / export_effector / export_processor
"""

import itertools
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type, Union

from sentience_protocols import (
    FAMILY_TYPES,
    CapabilityKind,
    EffectorFamily,
    EffectorProtocol,
    LoggerProtocol,
    ProcessorFamily,
    ProcessorProtocol,
    RobotFamily,
    RobotProtocol,
    SensorFamily,
    SensorProtocol,
)
from sentience_shared.errors import REGISTRATION_REJECTED, DiscoveryError, Messages
from sentience_shared.logging import get_component_logger

# Capability contract each kind must satisfy
CAPABILITY_CONTRACTS: Dict[CapabilityKind, type] = {
    CapabilityKind.ROBOT: RobotProtocol,
    CapabilityKind.SENSOR: SensorProtocol,
    CapabilityKind.EFFECTOR: EffectorProtocol,
    CapabilityKind.PROCESSOR: ProcessorProtocol,
}

TypeToken = Union[type, str]


def type_id_for(cls: type) -> str:
    """Default type id: ``module.QualName``."""
    return f"{cls.__module__}.{cls.__qualname__}"


def coerce_family(kind: CapabilityKind, family: Any) -> Optional[Enum]:
    """Return ``family`` as a member of the kind's family enum, or None.

    Members of another kind's family enum are never accepted, even when
    their values coincide.
    """
    domain = FAMILY_TYPES[kind]
    if isinstance(family, domain):
        return family
    if isinstance(family, Enum) or not isinstance(family, str):
        return None
    try:
        return domain(family.lower())
    except ValueError:
        return None


# ═══════════════════════════════════════════════════════════════════════════
# DESCRIPTORS
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CapabilityDescriptor:
    """Immutable capability metadata.

    Set once at registration and never mutated.
    """
    kind: CapabilityKind
    family: Enum
    concrete_type: type
    type_id: str

    @property
    def type_name(self) -> str:
        return self.concrete_type.__name__

    def matches_type(self, token: TypeToken) -> bool:
        """True if ``token`` names this descriptor's concrete type.

        A class token matches by identity; a string matches the type id or
        the bare class name.
        """
        if isinstance(token, type):
            return self.concrete_type is token
        return token == self.type_id or token == self.type_name

    def to_dict(self) -> Dict[str, str]:
        return {
            "kind": self.kind.value,
            "family": self.family.value,
            "type_id": self.type_id,
        }


@dataclass(frozen=True)
class Registration:
    """A descriptor plus the constructor used to build its instance."""
    descriptor: CapabilityDescriptor
    constructor: Callable[[], Any]
    sequence: int

    @property
    def module(self) -> str:
        return self.descriptor.concrete_type.__module__


# ═══════════════════════════════════════════════════════════════════════════
# REGISTRATION TABLE
# ═══════════════════════════════════════════════════════════════════════════

class RegistrationTable:
    """Registry of every exported component.

    Each registration records a monotonically increasing sequence number,
    which fixes discovery order within a module.

    Usage:
        table = RegistrationTable()
        table.register(MyRobot, CapabilityKind.ROBOT, RobotFamily.MOBILE)

        # Or as a decorator
        @export_robot(RobotFamily.MOBILE, table=table)
        class MyRobot(Robot):
            ...
    """

    def __init__(self, logger: Optional[LoggerProtocol] = None):
        self._logger = get_component_logger("RegistrationTable", logger)
        self._registrations: Dict[type, Registration] = {}
        self._type_ids: Dict[str, type] = {}
        self._sequence = itertools.count()
        self._lock = threading.RLock()

    def _reject(self, cls: Any, reason: str, **context: Any) -> DiscoveryError:
        name = getattr(cls, "__qualname__", repr(cls))
        return DiscoveryError(
            REGISTRATION_REJECTED,
            Messages(
                full=f"Registration of {name} was rejected: {reason}",
                summary="Component registration rejected",
                developer=reason,
                user="A component could not be loaded.",
            ),
            context={"type": name, **context},
            logger=self._logger,
        )

    def register(
        self,
        cls: type,
        kind: Union[CapabilityKind, str],
        family: Any,
        type_id: Optional[str] = None,
        factory: Optional[Callable[[], Any]] = None,
    ) -> CapabilityDescriptor:
        """Register a component class.

        Args:
            cls: Concrete component class
            kind: Capability kind it implements
            family: Member (or value) of the kind's family enum
            type_id: Stable identifier; defaults to ``module.QualName``
            factory: Zero-argument constructor; defaults to ``cls``

        Returns:
            The descriptor attached to the class

        Raises:
            DiscoveryError: Wrong family domain, contract not satisfied,
                or class / type id already registered (605)
        """
        try:
            kind = CapabilityKind(kind)
        except ValueError:
            raise self._reject(cls, f"unknown capability kind {kind!r}")

        if not isinstance(cls, type):
            raise self._reject(cls, "only classes can be registered")

        resolved_family = coerce_family(kind, family)
        if resolved_family is None:
            raise self._reject(
                cls,
                f"{family!r} is not a {FAMILY_TYPES[kind].__name__}",
                kind=kind.value,
            )

        contract = CAPABILITY_CONTRACTS[kind]
        if not issubclass(cls, contract):
            raise self._reject(
                cls,
                f"does not implement the {kind.value} contract ({contract.__name__})",
                kind=kind.value,
            )

        type_id = type_id or type_id_for(cls)
        descriptor = CapabilityDescriptor(
            kind=kind,
            family=resolved_family,
            concrete_type=cls,
            type_id=type_id,
        )

        with self._lock:
            if cls in self._registrations:
                raise self._reject(cls, "already registered", kind=kind.value)
            if type_id in self._type_ids:
                raise self._reject(cls, f"type id {type_id} already in use", kind=kind.value)
            self._registrations[cls] = Registration(
                descriptor=descriptor,
                constructor=factory or cls,
                sequence=next(self._sequence),
            )
            self._type_ids[type_id] = cls

        self._logger.debug(
            "component_registered",
            kind=kind.value,
            family=resolved_family.value,
            type_id=type_id,
        )
        return descriptor

    def registrations(self, kind: Optional[CapabilityKind] = None) -> List[Registration]:
        """All registrations in sequence order, optionally for one kind."""
        with self._lock:
            items = list(self._registrations.values())
        if kind is not None:
            items = [r for r in items if r.descriptor.kind == kind]
        return sorted(items, key=lambda r: r.sequence)

    def for_module(self, module_name: str) -> List[Registration]:
        """Registrations whose class is defined in ``module_name``."""
        return [r for r in self.registrations() if r.module == module_name]

    def for_type(self, cls: type) -> Optional[Registration]:
        with self._lock:
            return self._registrations.get(cls)

    def unregister_module(self, module_name: str) -> int:
        """Drop every registration made by ``module_name``.

        Used when a module fails part-way through its import, so a later
        import of the same module can register again.

        Returns:
            Number of registrations removed
        """
        with self._lock:
            stale = [
                cls for cls, registration in self._registrations.items()
                if registration.module == module_name
            ]
            for cls in stale:
                registration = self._registrations.pop(cls)
                self._type_ids.pop(registration.descriptor.type_id, None)
        if stale:
            self._logger.debug(
                "module_registrations_dropped",
                module=module_name,
                count=len(stale),
            )
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._registrations.clear()
            self._type_ids.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._registrations)

    def __contains__(self, cls: object) -> bool:
        with self._lock:
            return cls in self._registrations


# ═══════════════════════════════════════════════════════════════════════════
# GLOBAL TABLE
# ═══════════════════════════════════════════════════════════════════════════

_table: Optional[RegistrationTable] = None


def get_registration_table() -> RegistrationTable:
    """Get the process default registration table.

    The export decorators register here unless given a table.
    """
    global _table
    if _table is None:
        _table = RegistrationTable()
    return _table


def set_registration_table(table: RegistrationTable) -> None:
    """Replace the default table. Primarily for testing."""
    global _table
    _table = table


def reset_registration_table() -> None:
    """Drop the default table; a new one is created on next access."""
    global _table
    _table = None


# ═══════════════════════════════════════════════════════════════════════════
# EXPORT DECORATORS
# ═══════════════════════════════════════════════════════════════════════════

def export(
    kind: Union[CapabilityKind, str],
    family: Any,
    *,
    type_id: Optional[str] = None,
    factory: Optional[Callable[[], Any]] = None,
    table: Optional[RegistrationTable] = None,
) -> Callable[[Type[Any]], Type[Any]]:
    """Class decorator registering a component.

    Returns the class unchanged.
    """
    def decorator(cls: Type[Any]) -> Type[Any]:
        (table or get_registration_table()).register(
            cls, kind, family, type_id=type_id, factory=factory
        )
        return cls
    return decorator


def export_robot(family: Any = RobotFamily.ANY, **kwargs: Any) -> Callable[[Type[Any]], Type[Any]]:
    return export(CapabilityKind.ROBOT, family, **kwargs)


def export_sensor(family: Any = SensorFamily.UNKNOWN, **kwargs: Any) -> Callable[[Type[Any]], Type[Any]]:
    return export(CapabilityKind.SENSOR, family, **kwargs)


def export_effector(family: Any = EffectorFamily.UNKNOWN, **kwargs: Any) -> Callable[[Type[Any]], Type[Any]]:
    return export(CapabilityKind.EFFECTOR, family, **kwargs)


def export_processor(family: Any, **kwargs: Any) -> Callable[[Type[Any]], Type[Any]]:
    return export(CapabilityKind.PROCESSOR, family, **kwargs)


__all__ = [
    "CAPABILITY_CONTRACTS",
    "TypeToken",
    "type_id_for",
    "coerce_family",
    "CapabilityDescriptor",
    "Registration",
    "RegistrationTable",
    "get_registration_table",
    "set_registration_table",
    "reset_registration_table",
    "export",
    "export_robot",
    "export_sensor",
    "export_effector",
    "export_processor",
]
