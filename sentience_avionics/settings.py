"""Process settings for Sentience Avionics.

These are the settings that exist before any configuration bundle has been
read: where bundles live, which bundle is the default, which component
modules and plugin directories to discover, and the logging defaults used
until a bundle's log section takes over.

All values can be overridden with SENTIENCE_* environment variables or a
.env file.
"""

from typing import TYPE_CHECKING, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sentience_protocols import LogLevel, LogTarget

if TYPE_CHECKING:
    from sentience_protocols import LoggerProtocol


class Settings(BaseSettings):
    """Infrastructure settings."""

    # =========================================================================
    # CONFIGURATION BUNDLES
    # =========================================================================
    config_dir: str = "config"
    config_extension: str = ".sentience"
    default_bundle: str = "default"

    # =========================================================================
    # DISCOVERY
    # =========================================================================
    # Packages scanned for registered components (imported with submodules)
    component_modules: List[str] = Field(
        default_factory=lambda: ["sentience_mission_system.components"]
    )
    # Directories of *.py plugin files
    plugin_dirs: List[str] = Field(default_factory=list)

    # =========================================================================
    # LOGGING DEFAULTS (before the bundle's log section is applied)
    # =========================================================================
    log_level: str = "alert"  # Minimum severity
    log_targets: List[str] = Field(default_factory=lambda: ["console"])
    log_file: str = "trace.txt"
    log_json: bool = False

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator('config_extension', mode='after')
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Bundle extensions always carry the leading dot."""
        if not v:
            raise ValueError("config_extension must not be empty")
        return v if v.startswith(".") else f".{v}"

    @field_validator('log_level', mode='after')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        value = v.lower()
        valid = {lvl.value for lvl in LogLevel} | {"info"}
        if value not in valid:
            raise ValueError(f"Invalid log level: {v}. Must be one of {sorted(valid)}")
        return value

    @field_validator('log_targets', mode='after')
    @classmethod
    def validate_log_targets(cls, v: List[str]) -> List[str]:
        values = [t.lower() for t in v]
        for target in values:
            LogTarget(target)
        return values

    model_config = SettingsConfigDict(
        env_prefix="SENTIENCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # =========================================================================
    # HELPER METHODS
    # =========================================================================
    def log_settings(self, logger: "LoggerProtocol") -> None:
        """Log the effective process settings."""
        logger.info(
            "sentience_settings",
            config_dir=self.config_dir,
            default_bundle=self.default_bundle,
            component_modules=self.component_modules,
            plugin_dirs=self.plugin_dirs,
        )


# =============================================================================
# GLOBAL SETTINGS (Lazy Initialization)
# =============================================================================

_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance.

    Created on first access from the environment.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings_instance: Settings) -> None:
    """Set the global settings instance.

    Primarily for testing purposes.
    """
    global _settings
    _settings = settings_instance


def reset_settings() -> None:
    """Reset the global settings instance.

    Forces re-creation on next get_settings() call.
    """
    global _settings
    _settings = None


__all__ = [
    "Settings",
    "get_settings",
    "set_settings",
    "reset_settings",
]
