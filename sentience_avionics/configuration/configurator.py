"""Configuration bundle store.

A bundle is a JSON object stored as ``<config_dir>/<name><extension>``.
Its top-level keys are section names (matched case-insensitively); the
values are deserialized into typed sections on demand.

Usage:
    configurator = Configurator("config", ".sentience")
    if configurator.select_bundle("default"):
        robot = configurator.get_section("robot", RobotConfiguration)
"""

import copy
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import ValidationError

from sentience_protocols import LoggerProtocol
from sentience_shared.errors import (
    BUNDLE_UNREADABLE,
    SECTION_INVALID,
    SECTION_NOT_FOUND,
    WRONG_CONFIGURATION_TYPE,
    ConfigurationError,
    ConfigurationSectionNotFoundError,
    Messages,
)
from sentience_shared.logging import get_component_logger
from sentience_shared.serialization import from_json
from sentience_avionics.configuration.sections import SentienceConfiguration

T = TypeVar("T", bound=SentienceConfiguration)


class Configurator:
    """Loads named configuration bundles and hands out typed sections.

    Implements ConfigurationResolverProtocol. The active bundle is replaced
    as a whole, and only when the new bundle was read and parsed
    successfully.
    """

    def __init__(
        self,
        config_dir: str = "config",
        extension: str = ".sentience",
        logger: Optional[LoggerProtocol] = None,
    ):
        self._config_dir = Path(config_dir)
        self._extension = extension if extension.startswith(".") else f".{extension}"
        self._logger = get_component_logger("Configurator", logger)
        self._lock = threading.Lock()
        self._sections: Dict[str, Any] = {}
        self._active: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Any, logger: Optional[LoggerProtocol] = None) -> "Configurator":
        return cls(settings.config_dir, settings.config_extension, logger=logger)

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @property
    def extension(self) -> str:
        return self._extension

    @property
    def active_bundle(self) -> Optional[str]:
        """Name of the active bundle, None before the first selection."""
        return self._active

    # =========================================================================
    # BUNDLES
    # =========================================================================

    def list_bundles(self) -> List[str]:
        """Names of the bundles in the store, sorted."""
        if not self._config_dir.is_dir():
            return []
        names = [
            path.name[: -len(self._extension)]
            for path in self._config_dir.iterdir()
            if path.is_file() and path.name.endswith(self._extension)
        ]
        return sorted(name for name in names if name)

    def bundle_path(self, name: str) -> Path:
        return self._config_dir / f"{name}{self._extension}"

    def select_bundle(self, name: str) -> bool:
        """Load a bundle and make it the active one.

        Returns:
            True if the bundle was loaded. On False the previously active
            bundle stays in place.
        """
        if not name or Path(name).name != name:
            self._logger.warning("bundle_name_invalid", bundle=name, code=BUNDLE_UNREADABLE)
            return False

        path = self.bundle_path(name)
        try:
            parsed = from_json(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            self._logger.warning(
                "bundle_unavailable",
                bundle=name,
                path=str(path),
                error=str(e),
                code=BUNDLE_UNREADABLE,
            )
            return False

        if not isinstance(parsed, dict):
            self._logger.warning(
                "bundle_not_an_object",
                bundle=name,
                path=str(path),
                code=BUNDLE_UNREADABLE,
            )
            return False

        sections = {str(key).lower(): value for key, value in parsed.items()}
        with self._lock:
            self._sections = sections
            self._active = name

        self._logger.info("bundle_selected", bundle=name, sections=sorted(sections))
        return True

    # =========================================================================
    # SECTIONS
    # =========================================================================

    def sections(self) -> List[str]:
        """Section keys of the active bundle, sorted."""
        with self._lock:
            return sorted(self._sections)

    def has_section(self, key: str) -> bool:
        with self._lock:
            return key.lower() in self._sections

    def get_section(
        self,
        key: str,
        model: Optional[Type[T]] = SentienceConfiguration,
        deserialise_as: Optional[Type[T]] = None,
    ) -> Any:
        """Return a section of the active bundle.

        Args:
            key: Section name, matched case-insensitively
            model: Section model; None returns the raw JSON value
            deserialise_as: Concrete subclass of ``model`` to build instead

        Raises:
            ConfigurationSectionNotFoundError: No section under ``key`` (150)
            ConfigurationError: Content does not validate (151), or
                ``deserialise_as`` is not a ``model`` subclass (155)
        """
        with self._lock:
            sections = self._sections
            bundle = self._active

        try:
            raw = sections[key.lower()]
        except KeyError as e:
            raise ConfigurationSectionNotFoundError(
                SECTION_NOT_FOUND,
                Messages(
                    full=(
                        f"The requested configuration key ({key}) cannot be located in "
                        f"the currently loaded configuration bundle ({bundle})"
                    ),
                    summary="Invalid key in configuration",
                    developer=(
                        "Please validate your configuration to ensure that the required "
                        f"keys are specified. Looking for: {key}"
                    ),
                    user="The system configuration is incorrect.",
                ),
                context={"key": key, "bundle": bundle},
                cause=e,
                logger=self._logger,
            ) from e

        if model is None and deserialise_as is None:
            return copy.deepcopy(raw)

        target = deserialise_as or model
        if deserialise_as is not None and model is not None and not issubclass(deserialise_as, model):
            raise ConfigurationError(
                WRONG_CONFIGURATION_TYPE,
                Messages(
                    full=(
                        f"Section {key} was requested as {deserialise_as.__name__}, "
                        f"which is not a {model.__name__}"
                    ),
                    summary="Incompatible configuration type",
                    developer=f"{deserialise_as.__name__} must subclass {model.__name__}",
                    user="The system configuration is incorrect.",
                ),
                context={"key": key, "bundle": bundle},
                logger=self._logger,
            )

        try:
            return target.model_validate(raw)
        except ValidationError as e:
            raise ConfigurationError(
                SECTION_INVALID,
                Messages(
                    full=f"Section {key} of bundle {bundle} is not a valid {target.__name__}: {e}",
                    summary="Invalid configuration section",
                    developer=f"Section {key} failed validation as {target.__name__}",
                    user="The system configuration is incorrect.",
                ),
                context={"key": key, "bundle": bundle, "errors": e.error_count()},
                cause=e,
                logger=self._logger,
            ) from e


__all__ = ["Configurator"]
