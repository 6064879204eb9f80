"""Capability catalogs and the registry that caches them.

A Catalog holds the lazily-instantiated entries discovered in one scope.
The CatalogRegistry builds each catalog at most once per scope key and
hands the same instance to every later caller.
"""

import threading
from typing import Any, Callable, Dict, Hashable, Iterator, List, Optional, Sequence

from sentience_protocols import CapabilityKind, LoggerProtocol
from sentience_shared.logging import get_component_logger
from sentience_avionics.capabilities.discovery import DiscoveryScope
from sentience_avionics.capabilities.registration import (
    CapabilityDescriptor,
    RegistrationTable,
    get_registration_table,
)


class CatalogEntry:
    """A descriptor and its lazily-built, shared instance.

    The constructor runs at most once. A failing constructor leaves the
    entry unbuilt, so the next resolution tries again.
    """

    def __init__(
        self,
        descriptor: CapabilityDescriptor,
        constructor: Callable[[], Any],
        position: int,
    ):
        self._descriptor = descriptor
        self._constructor = constructor
        self._position = position
        self._instance: Any = None
        self._built = False
        self._lock = threading.Lock()

    @property
    def descriptor(self) -> CapabilityDescriptor:
        return self._descriptor

    @property
    def position(self) -> int:
        """Discovery position within the catalog."""
        return self._position

    @property
    def is_instantiated(self) -> bool:
        return self._built

    def instance(self) -> Any:
        """Return the shared instance, building it on first use."""
        if self._built:
            return self._instance
        with self._lock:
            if not self._built:
                self._instance = self._constructor()
                self._built = True
        return self._instance

    def __repr__(self) -> str:
        return f"CatalogEntry({self._descriptor.type_id}, position={self._position})"


class Catalog:
    """Entries discovered in one scope, in discovery order."""

    def __init__(self, scope_key: Hashable, entries: Sequence[CatalogEntry]):
        self._scope_key = scope_key
        self._entries = tuple(entries)

    @property
    def scope_key(self) -> Hashable:
        return self._scope_key

    def entries(self, kind: Optional[CapabilityKind] = None) -> List[CatalogEntry]:
        if kind is None:
            return list(self._entries)
        return [e for e in self._entries if e.descriptor.kind == kind]

    def descriptors(self, kind: Optional[CapabilityKind] = None) -> List[CapabilityDescriptor]:
        return [e.descriptor for e in self.entries(kind)]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"Catalog({self._scope_key!r}, entries={len(self._entries)})"


class CatalogRegistry:
    """Builds and caches catalogs by scope key.

    Owned by the orchestrator's AppContext. "Check cache, else build and
    insert" runs under one lock, so concurrent first requests for a key
    cause a single discovery pass. A failed discovery caches nothing.

    Usage:
        registry = CatalogRegistry()
        catalog = registry.get_or_build(ModuleScope("my_robots"))
        assert registry.get_or_build(ModuleScope("my_robots")) is catalog
    """

    def __init__(
        self,
        table: Optional[RegistrationTable] = None,
        logger: Optional[LoggerProtocol] = None,
    ):
        self._table = table
        self._logger = get_component_logger("CatalogRegistry", logger)
        self._catalogs: Dict[Hashable, Catalog] = {}
        self._lock = threading.Lock()

    @property
    def table(self) -> RegistrationTable:
        return self._table if self._table is not None else get_registration_table()

    def get_or_build(self, scope: DiscoveryScope) -> Catalog:
        """Return the catalog for ``scope``, discovering it on first request.

        Raises:
            DiscoveryError: If the scope cannot be loaded
        """
        key = scope.key
        with self._lock:
            existing = self._catalogs.get(key)
            if existing is not None:
                return existing

            registrations = scope.resolve(self.table, self._logger)
            catalog = Catalog(
                key,
                [
                    CatalogEntry(r.descriptor, r.constructor, position)
                    for position, r in enumerate(registrations)
                ],
            )
            self._catalogs[key] = catalog

        self._logger.info(
            "catalog_built",
            scope=repr(scope),
            entries=len(catalog),
            types=[d.type_id for d in catalog.descriptors()],
        )
        return catalog

    def get(self, key: Hashable) -> Optional[Catalog]:
        with self._lock:
            return self._catalogs.get(key)

    def has(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._catalogs

    def keys(self) -> List[Hashable]:
        with self._lock:
            return list(self._catalogs)

    def clear(self) -> None:
        """Drop every cached catalog (and so every cached instance)."""
        with self._lock:
            self._catalogs.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._catalogs)


__all__ = [
    "CatalogEntry",
    "Catalog",
    "CatalogRegistry",
]
