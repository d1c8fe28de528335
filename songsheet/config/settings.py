"""Global settings instance for SongSheet.

This module provides a unified settings object over the structured
configuration loaded from config.toml and environment overrides.
"""

import logging
from pathlib import Path

from songsheet.config.loader import load_config
from songsheet.config.schema import (
    GameConfig,
    ImportConfig,
    MatchingConfig,
    SongsheetConfig,
)

logger = logging.getLogger(__name__)


class Settings:
    """Unified settings object.

    Provides a flat interface for accessing configuration values while
    internally using the structured SongsheetConfig.
    """

    def __init__(self, config: SongsheetConfig | None = None):
        """Initialize settings.

        Args:
            config: Optional SongsheetConfig instance. If not provided, loads from file.
        """
        self._config = config or load_config()

    @property
    def config(self) -> SongsheetConfig:
        """Get the full configuration object."""
        return self._config

    # Application
    @property
    def app_name(self) -> str:
        return self._config.app_name

    @property
    def debug(self) -> bool:
        return self._config.server.debug

    # Server
    @property
    def host(self) -> str:
        return self._config.server.host

    @property
    def port(self) -> int:
        return self._config.server.port

    @property
    def cors_origins(self) -> list[str]:
        return self._config.server.cors_origins

    # Storage
    @property
    def structures_path(self) -> Path:
        return self._config.storage.structures_dir

    @property
    def max_upload_size_mb(self) -> int:
        return self._config.storage.max_upload_mb

    @property
    def max_upload_size_bytes(self) -> int:
        return self._config.storage.max_upload_bytes

    # Import
    @property
    def import_options(self) -> ImportConfig:
        return self._config.import_

    @property
    def matching(self) -> MatchingConfig:
        return self._config.matching

    @property
    def games(self) -> dict[str, GameConfig]:
        return self._config.games

    # Logging
    @property
    def log_level(self) -> str:
        return self._config.logging.level

    @property
    def log_format(self) -> str:
        return self._config.logging.format


# Global settings instance - lazily initialized
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.

    The settings are loaded once and cached for subsequent calls.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance.

    This is primarily useful for testing to reload configuration.
    """
    global _settings
    _settings = None


class _SettingsProxy:
    """Proxy object that lazily loads settings on first access."""

    def __getattr__(self, name: str):
        return getattr(get_settings(), name)

    def __repr__(self) -> str:
        return repr(get_settings())


settings = _SettingsProxy()
