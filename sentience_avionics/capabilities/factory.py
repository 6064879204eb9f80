"""Typed factories - the query surface over a catalog.

One factory per capability kind. Multi-result lookups return a list (empty
when nothing matches); single-result lookups return the first match in
discovery order or raise FactoryItemNotFoundError. Lookups never return
None.

Error codes are offsets from the kind's base (effector 200, processor 300,
robot 400, sensor 500):
    +1  by_family failed
    +2  by_type failed
    +3  instantiation failed in a single-result lookup
    +4  nothing found by family
    +5  nothing found by type
    +6  family from another kind's enum
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar, Union, overload

from sentience_protocols import FAMILY_TYPES, CapabilityKind, LoggerProtocol, LogLevel
from sentience_shared.errors import FactoryError, FactoryItemNotFoundError, Messages
from sentience_shared.logging import get_component_logger, log_at
from sentience_avionics.capabilities.catalog import Catalog, CatalogEntry
from sentience_avionics.capabilities.registration import (
    CapabilityDescriptor,
    TypeToken,
    coerce_family,
)

T = TypeVar("T")

FACTORY_CODE_BASES: Dict[CapabilityKind, int] = {
    CapabilityKind.EFFECTOR: 200,
    CapabilityKind.PROCESSOR: 300,
    CapabilityKind.ROBOT: 400,
    CapabilityKind.SENSOR: 500,
}

BY_FAMILY_FAILED = 1
BY_TYPE_FAILED = 2
INSTANTIATION_FAILED = 3
NOT_FOUND_BY_FAMILY = 4
NOT_FOUND_BY_TYPE = 5
WRONG_FAMILY_DOMAIN = 6

# Debug trace code bases per kind
_TRACE_CODE_BASES: Dict[CapabilityKind, int] = {
    CapabilityKind.EFFECTOR: 10020,
    CapabilityKind.PROCESSOR: 10029,
    CapabilityKind.ROBOT: 10041,
    CapabilityKind.SENSOR: 10047,
}


class CapabilityFactory:
    """Lookups over one catalog for one capability kind."""

    def __init__(
        self,
        kind: CapabilityKind,
        catalog: Catalog,
        logger: Optional[LoggerProtocol] = None,
    ):
        self._kind = CapabilityKind(kind)
        self._catalog = catalog
        self._family_type = FAMILY_TYPES[self._kind]
        self._code_base = FACTORY_CODE_BASES[self._kind]
        self._trace_base = _TRACE_CODE_BASES[self._kind]
        self._logger = get_component_logger(f"{self._kind.value.capitalize()}Factory", logger)

    @property
    def kind(self) -> CapabilityKind:
        return self._kind

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def family_type(self) -> Type[Enum]:
        return self._family_type

    # ═══════════════════════════════════════════════════════════════════════
    # INTROSPECTION
    # ═══════════════════════════════════════════════════════════════════════

    def descriptors(self) -> List[CapabilityDescriptor]:
        return self._catalog.descriptors(self._kind)

    def families(self) -> List[Enum]:
        """Distinct families present, in discovery order."""
        seen: List[Enum] = []
        for descriptor in self.descriptors():
            if descriptor.family not in seen:
                seen.append(descriptor.family)
        return seen

    def __len__(self) -> int:
        return len(self.descriptors())

    # ═══════════════════════════════════════════════════════════════════════
    # LOOKUPS
    # ═══════════════════════════════════════════════════════════════════════

    def by_family(self, family: Any) -> List[Any]:
        """Every instance of ``family``, in discovery order.

        Raises:
            FactoryError: Wrong family domain, or an instance failed to build
        """
        resolved = self._check_family(family)
        self._trace(0, "factory_by_family", family=resolved.value)
        try:
            return [entry.instance() for entry in self._matching_family(resolved)]
        except Exception as e:
            raise self._failure(
                BY_FAMILY_FAILED,
                f"Lookup of {self._kind.value}s in family {resolved.value} failed: {e}",
                cause=e,
                family=resolved.value,
            ) from e

    def by_type(self, token: TypeToken) -> List[Any]:
        """Every instance whose concrete type matches ``token``.

        ``token`` is a class or a type id string (full id or bare class name).

        Raises:
            FactoryError: Invalid token, or an instance failed to build
        """
        self._check_token(token, BY_TYPE_FAILED)
        self._trace(1, "factory_by_type", type=_token_name(token))
        try:
            return [entry.instance() for entry in self._matching_type(token)]
        except Exception as e:
            raise self._failure(
                BY_TYPE_FAILED,
                f"Lookup of {self._kind.value}s of type {_token_name(token)} failed: {e}",
                cause=e,
                type=_token_name(token),
            ) from e

    def one_by_family(self, family: Any) -> Any:
        """First instance of ``family`` in discovery order.

        Raises:
            FactoryError: Wrong family domain (+6) or instantiation failed (+3)
            FactoryItemNotFoundError: No entry in the family (+4)
        """
        resolved = self._check_family(family)
        self._trace(2, "factory_one_by_family", family=resolved.value)
        entry = next(iter(self._matching_family(resolved)), None)
        if entry is None:
            raise self._not_found(
                NOT_FOUND_BY_FAMILY,
                f"family {resolved.value}",
                family=resolved.value,
            )
        return self._instantiate(entry)

    @overload
    def one_by_type(self, token: Type[T]) -> T: ...

    @overload
    def one_by_type(self, token: str) -> Any: ...

    def one_by_type(self, token: Union[type, str]) -> Any:
        """First instance whose concrete type matches ``token``.

        Passing a class gives a statically-typed result.

        Raises:
            FactoryError: Invalid token (+2) or instantiation failed (+3)
            FactoryItemNotFoundError: No entry of that type (+5)
        """
        self._check_token(token, BY_TYPE_FAILED)
        self._trace(3, "factory_one_by_type", type=_token_name(token))
        entry = next(iter(self._matching_type(token)), None)
        if entry is None:
            raise self._not_found(
                NOT_FOUND_BY_TYPE,
                f"type {_token_name(token)}",
                type=_token_name(token),
            )
        return self._instantiate(entry)

    # ═══════════════════════════════════════════════════════════════════════
    # INTERNALS
    # ═══════════════════════════════════════════════════════════════════════

    def _entries(self) -> List[CatalogEntry]:
        return self._catalog.entries(self._kind)

    def _matching_family(self, family: Enum) -> List[CatalogEntry]:
        return [e for e in self._entries() if e.descriptor.family is family]

    def _matching_type(self, token: TypeToken) -> List[CatalogEntry]:
        return [e for e in self._entries() if e.descriptor.matches_type(token)]

    def _instantiate(self, entry: CatalogEntry) -> Any:
        try:
            return entry.instance()
        except Exception as e:
            raise self._failure(
                INSTANTIATION_FAILED,
                f"{entry.descriptor.type_id} matched but could not be instantiated: {e}",
                cause=e,
                type=entry.descriptor.type_id,
            ) from e

    def _check_family(self, family: Any) -> Enum:
        resolved = coerce_family(self._kind, family)
        if resolved is None:
            raise self._failure(
                WRONG_FAMILY_DOMAIN,
                f"{family!r} is not a {self._family_type.__name__}",
                family=repr(family),
            )
        return resolved

    def _check_token(self, token: Any, offset: int) -> None:
        if isinstance(token, type) or (isinstance(token, str) and token):
            return
        raise self._failure(
            offset,
            f"{token!r} is not a class or a type id",
            type=repr(token),
        )

    def _failure(
        self,
        offset: int,
        detail: str,
        cause: Optional[BaseException] = None,
        **context: Any,
    ) -> FactoryError:
        kind = self._kind.value
        return FactoryError(
            self._code_base + offset,
            Messages(
                full=detail,
                summary=f"{kind.capitalize()} factory failure",
                developer=f"The {kind} factory failed: {detail}",
                user=f"A {kind} could not be loaded.",
            ),
            context=context,
            cause=cause,
            capability=self._kind,
            logger=self._logger,
        )

    def _not_found(self, offset: int, wanted: str, **context: Any) -> FactoryItemNotFoundError:
        kind = self._kind.value
        return FactoryItemNotFoundError(
            self._code_base + offset,
            Messages(
                full=f"No {kind} of {wanted} exists in catalog {self._catalog.scope_key!r}",
                summary=f"{kind.capitalize()} not found",
                developer=f"Register a {kind} of {wanted} or check the requested {kind}",
                user=f"The requested {kind} is not available.",
            ),
            context=context,
            capability=self._kind,
            logger=self._logger,
        )

    def _trace(self, offset: int, event: str, **fields: Any) -> None:
        log_at(self._logger, LogLevel.DEBUG, event, code=self._trace_base + offset, **fields)


def _token_name(token: Any) -> str:
    if isinstance(token, type):
        return f"{token.__module__}.{token.__qualname__}"
    return str(token)


# ═══════════════════════════════════════════════════════════════════════════
# PER-KIND FACTORIES
# ═══════════════════════════════════════════════════════════════════════════

class RobotFactory(CapabilityFactory):
    def __init__(self, catalog: Catalog, logger: Optional[LoggerProtocol] = None):
        super().__init__(CapabilityKind.ROBOT, catalog, logger)


class SensorFactory(CapabilityFactory):
    def __init__(self, catalog: Catalog, logger: Optional[LoggerProtocol] = None):
        super().__init__(CapabilityKind.SENSOR, catalog, logger)


class EffectorFactory(CapabilityFactory):
    def __init__(self, catalog: Catalog, logger: Optional[LoggerProtocol] = None):
        super().__init__(CapabilityKind.EFFECTOR, catalog, logger)


class ProcessorFactory(CapabilityFactory):
    def __init__(self, catalog: Catalog, logger: Optional[LoggerProtocol] = None):
        super().__init__(CapabilityKind.PROCESSOR, catalog, logger)


_FACTORY_TYPES: Dict[CapabilityKind, Callable[..., CapabilityFactory]] = {
    CapabilityKind.ROBOT: RobotFactory,
    CapabilityKind.SENSOR: SensorFactory,
    CapabilityKind.EFFECTOR: EffectorFactory,
    CapabilityKind.PROCESSOR: ProcessorFactory,
}


class CapabilityFactories:
    """The four typed factories over one catalog.

    They share the catalog, so an instance resolved through one factory is
    the instance every other lookup of that entry returns.
    """

    def __init__(self, catalog: Catalog, logger: Optional[LoggerProtocol] = None):
        self._catalog = catalog
        self._factories: Dict[CapabilityKind, CapabilityFactory] = {
            kind: factory_type(catalog, logger)
            for kind, factory_type in _FACTORY_TYPES.items()
        }

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def robots(self) -> RobotFactory:
        return self._factories[CapabilityKind.ROBOT]

    @property
    def sensors(self) -> SensorFactory:
        return self._factories[CapabilityKind.SENSOR]

    @property
    def effectors(self) -> EffectorFactory:
        return self._factories[CapabilityKind.EFFECTOR]

    @property
    def processors(self) -> ProcessorFactory:
        return self._factories[CapabilityKind.PROCESSOR]

    def for_kind(self, kind: Union[CapabilityKind, str]) -> CapabilityFactory:
        return self._factories[CapabilityKind(kind)]


__all__ = [
    "FACTORY_CODE_BASES",
    "BY_FAMILY_FAILED",
    "BY_TYPE_FAILED",
    "INSTANTIATION_FAILED",
    "NOT_FOUND_BY_FAMILY",
    "NOT_FOUND_BY_TYPE",
    "WRONG_FAMILY_DOMAIN",
    "CapabilityFactory",
    "RobotFactory",
    "SensorFactory",
    "EffectorFactory",
    "ProcessorFactory",
    "CapabilityFactories",
]
