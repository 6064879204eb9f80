"""Discovery scopes.

A scope decides which registrations make up one catalog, and in what
order. Order is by module position within the scope, then by registration
sequence, so the same inputs always give the same order.

Scopes:
- ModuleScope: a package and its submodules, imported in sorted order
- DirectoryScope: ``*.py`` plugin files in one directory, sorted by name
- TypeSetScope: an explicit list of classes
- AggregateScope: several scopes in turn, first occurrence of a type wins
"""

import hashlib
import importlib
import importlib.util
import pkgutil
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from types import ModuleType
from typing import Hashable, Iterable, List, Optional, Sequence

from sentience_protocols import LoggerProtocol
from sentience_shared.errors import (
    MODULE_IMPORT_FAILED,
    PLUGIN_IMPORT_FAILED,
    SCOPE_PATH_MISSING,
    TYPE_NOT_REGISTERED,
    DiscoveryError,
    Messages,
)
from sentience_shared.logging import get_component_logger
from sentience_avionics.capabilities.registration import (
    Registration,
    RegistrationTable,
    get_registration_table,
)

# Prefix of the synthetic module names given to plugin files
PLUGIN_MODULE_PREFIX = "_sentience_plugin"


class DiscoveryScope(ABC):
    """One source of components."""

    @property
    @abstractmethod
    def key(self) -> Hashable:
        """Cache key of the catalog built from this scope."""

    @abstractmethod
    def resolve(
        self,
        table: RegistrationTable,
        logger: Optional[LoggerProtocol] = None,
    ) -> List[Registration]:
        """Load the scope and return its registrations in discovery order.

        Raises:
            DiscoveryError: If the scope cannot be loaded
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.key!r})"


def _collect(table: RegistrationTable, module_names: Iterable[str]) -> List[Registration]:
    found: List[Registration] = []
    for name in module_names:
        found.extend(table.for_module(name))
    return found


def _drop_module(table: Optional[RegistrationTable], module_name: str) -> None:
    """Forget what a failed module registered, so a retry can register again.

    Export decorators write to the default table unless told otherwise, so
    both the scope's table and the default one are cleared.
    """
    tables = {id(t): t for t in (table, get_registration_table()) if t is not None}
    for t in tables.values():
        t.unregister_module(module_name)


class ModuleScope(DiscoveryScope):
    """Every component registered by a package or any of its submodules.

    ``tests`` subpackages are not imported.
    """

    def __init__(self, package: str):
        self._package = package

    @property
    def package(self) -> str:
        return self._package

    @property
    def key(self) -> Hashable:
        return ("module", self._package)

    def _import(
        self,
        name: str,
        logger: LoggerProtocol,
        table: Optional[RegistrationTable] = None,
    ) -> ModuleType:
        try:
            return importlib.import_module(name)
        except Exception as e:
            # Python drops the failed module; its registrations go with it
            _drop_module(table, name)
            raise DiscoveryError(
                MODULE_IMPORT_FAILED,
                Messages(
                    full=f"Module {name} could not be imported while discovering {self._package}: {e}",
                    summary="Component module import failed",
                    developer=f"import {name} raised {type(e).__name__}",
                    user="Components could not be loaded.",
                ),
                context={"module": name, "scope": self._package},
                cause=e,
                logger=logger,
            ) from e

    def module_names(
        self,
        logger: Optional[LoggerProtocol] = None,
        table: Optional[RegistrationTable] = None,
    ) -> List[str]:
        """The package followed by its submodules, sorted."""
        log = get_component_logger("ModuleScope", logger)
        root = self._import(self._package, log, table)
        names = [self._package]
        if hasattr(root, "__path__"):
            submodules = sorted(
                info.name
                for info in pkgutil.walk_packages(root.__path__, prefix=f"{self._package}.")
                if "tests" not in info.name.split(".")
            )
            names.extend(submodules)
        return names

    def resolve(self, table, logger=None):
        log = get_component_logger("ModuleScope", logger)
        names = self.module_names(log, table)
        for name in names:
            self._import(name, log, table)
        return _collect(table, names)


class DirectoryScope(DiscoveryScope):
    """Plugin files in one directory.

    Each ``*.py`` file not starting with ``_`` is loaded once per process
    under a synthetic module name; loading the same directory again reuses
    the loaded modules.
    """

    def __init__(self, path: str):
        self._path = Path(path).resolve()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def key(self) -> Hashable:
        return ("directory", str(self._path))

    def plugin_files(self) -> List[Path]:
        return sorted(
            p for p in self._path.glob("*.py")
            if p.is_file() and not p.name.startswith("_")
        )

    def module_name_for(self, file: Path) -> str:
        digest = hashlib.sha1(str(self._path).encode("utf-8")).hexdigest()[:12]
        return f"{PLUGIN_MODULE_PREFIX}_{digest}_{file.stem}"

    def _load(self, file: Path, table: RegistrationTable, logger: LoggerProtocol) -> str:
        name = self.module_name_for(file)
        if name in sys.modules:
            return name

        spec = importlib.util.spec_from_file_location(name, file)
        if spec is None or spec.loader is None:
            raise DiscoveryError(
                PLUGIN_IMPORT_FAILED,
                Messages(
                    full=f"Plugin file {file} cannot be loaded as a module",
                    summary="Plugin load failed",
                    developer=f"No import spec for {file}",
                    user="Components could not be loaded.",
                ),
                context={"file": str(file)},
                logger=logger,
            )

        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            del sys.modules[name]
            _drop_module(table, name)
            raise DiscoveryError(
                PLUGIN_IMPORT_FAILED,
                Messages(
                    full=f"Plugin file {file} raised while loading: {e}",
                    summary="Plugin load failed",
                    developer=f"Executing {file} raised {type(e).__name__}",
                    user="Components could not be loaded.",
                ),
                context={"file": str(file)},
                cause=e,
                logger=logger,
            ) from e

        logger.debug("plugin_loaded", file=str(file), module=name)
        return name

    def resolve(self, table, logger=None):
        log = get_component_logger("DirectoryScope", logger)
        if not self._path.is_dir():
            raise DiscoveryError(
                SCOPE_PATH_MISSING,
                Messages(
                    full=f"Plugin directory {self._path} does not exist or is not a directory",
                    summary="Plugin directory unavailable",
                    developer=f"Check plugin_dirs; {self._path} is missing",
                    user="Components could not be loaded.",
                ),
                context={"path": str(self._path)},
                logger=log,
            )
        names = [self._load(file, table, log) for file in self.plugin_files()]
        return _collect(table, names)


class TypeSetScope(DiscoveryScope):
    """An explicit, ordered set of registered classes."""

    def __init__(self, types: Sequence[type], name: Optional[str] = None):
        self._types = tuple(types)
        self._name = name

    @property
    def types(self) -> Sequence[type]:
        return self._types

    @property
    def key(self) -> Hashable:
        ids = tuple(f"{t.__module__}.{t.__qualname__}" for t in self._types)
        return ("types", self._name, ids)

    def resolve(self, table, logger=None):
        log = get_component_logger("TypeSetScope", logger)
        found: List[Registration] = []
        for cls in self._types:
            registration = table.for_type(cls)
            if registration is None:
                raise DiscoveryError(
                    TYPE_NOT_REGISTERED,
                    Messages(
                        full=f"{cls.__qualname__} is in a type set but was never registered",
                        summary="Unregistered component type",
                        developer=f"Decorate {cls.__qualname__} with an export decorator",
                        user="Components could not be loaded.",
                    ),
                    context={"type": cls.__qualname__},
                    logger=log,
                )
            found.append(registration)
        return found


class AggregateScope(DiscoveryScope):
    """Several scopes resolved in turn.

    When two children yield the same class, the first occurrence wins.
    """

    def __init__(self, name: str, scopes: Sequence[DiscoveryScope]):
        self._name = name
        self._scopes = tuple(scopes)

    @property
    def scopes(self) -> Sequence[DiscoveryScope]:
        return self._scopes

    @property
    def key(self) -> Hashable:
        return ("aggregate", self._name, tuple(scope.key for scope in self._scopes))

    def resolve(self, table, logger=None):
        seen = set()
        found: List[Registration] = []
        for scope in self._scopes:
            for registration in scope.resolve(table, logger):
                concrete = registration.descriptor.concrete_type
                if concrete in seen:
                    continue
                seen.add(concrete)
                found.append(registration)
        return found


__all__ = [
    "PLUGIN_MODULE_PREFIX",
    "DiscoveryScope",
    "ModuleScope",
    "DirectoryScope",
    "TypeSetScope",
    "AggregateScope",
]
