"""SongSheet configuration module.

This module provides TOML-based configuration with environment variable overrides.

Configuration is loaded from the following locations (in order of priority):
1. Environment variables (highest priority)
2. ./config.toml (project root - for development)
3. ~/.config/songsheet/config.toml (user config)
4. /etc/songsheet/config.toml (system config)
"""

from songsheet.config.schema import (
    DifficultyConfig,
    GameConfig,
    ImportConfig,
    LoggingConfig,
    MatchingConfig,
    ServerConfig,
    SongsheetConfig,
    StorageConfig,
)
from songsheet.config.settings import get_settings, reset_settings, settings

__all__ = [
    "DifficultyConfig",
    "GameConfig",
    "ImportConfig",
    "LoggingConfig",
    "MatchingConfig",
    "ServerConfig",
    "SongsheetConfig",
    "StorageConfig",
    "get_settings",
    "reset_settings",
    "settings",
]
