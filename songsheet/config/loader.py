"""Configuration loader for SongSheet.

Loads configuration from TOML files. Environment variables can override
any scalar configuration value.
"""

import logging
import os
from pathlib import Path
from typing import Any

from songsheet.config.schema import SongsheetConfig

logger = logging.getLogger(__name__)

# Try to import tomllib (Python 3.11+) or fall back to tomli
try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found]


def get_config_search_paths() -> list[Path]:
    """Get the list of paths to search for configuration files.

    Returns paths in priority order (first found wins):
    1. ./config.toml (project root - for development)
    2. ~/.config/songsheet/config.toml (user config)
    3. /etc/songsheet/config.toml (system config)
    """
    return [
        Path.cwd() / "config.toml",
        Path.home() / ".config" / "songsheet" / "config.toml",
        Path("/etc/songsheet/config.toml"),
    ]


def find_config_file() -> Path | None:
    """Find the first existing config file from search paths."""
    for path in get_config_search_paths():
        if path.exists() and path.is_file():
            logger.debug(f"Found config file: {path}")
            return path
    return None


def load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary."""
    with open(path, "rb") as f:
        return tomllib.load(f)


# Env var suffix -> (section, key)
ENV_MAPPINGS: dict[str, tuple[str, str]] = {
    # Server
    "SERVER_HOST": ("server", "host"),
    "SERVER_PORT": ("server", "port"),
    "SERVER_DEBUG": ("server", "debug"),
    "DEBUG": ("server", "debug"),  # Shorthand
    "HOST": ("server", "host"),  # Shorthand
    "PORT": ("server", "port"),  # Shorthand
    # Storage
    "STORAGE_DATA_DIR": ("storage", "data_dir"),
    "DATA_DIR": ("storage", "data_dir"),  # Shorthand
    "STORAGE_MAX_UPLOAD_MB": ("storage", "max_upload_mb"),
    # Import
    "IMPORT_MAX_ROWS": ("import", "max_rows"),
    "IMPORT_HEADER_SEARCH_ROWS": ("import", "header_search_rows"),
    "IMPORT_SAMPLE_ROWS": ("import", "sample_rows"),
    "IMPORT_OFFSET_WINDOW": ("import", "offset_window"),
    "IMPORT_MIN_SERIAL_YEAR": ("import", "min_serial_year"),
    # Logging
    "LOG_LEVEL": ("logging", "level"),
}

INT_KEYS = {
    "port",
    "max_upload_mb",
    "max_rows",
    "header_search_rows",
    "sample_rows",
    "offset_window",
    "min_serial_year",
}

BOOL_KEYS = {"debug"}


def apply_env_overrides(config_dict: dict[str, Any], prefix: str = "SONGSHEET") -> None:
    """Apply environment variable overrides to configuration dictionary.

    Environment variables are mapped as follows:
    - SONGSHEET_SERVER_HOST -> config_dict["server"]["host"]
    - SONGSHEET_IMPORT_MAX_ROWS -> config_dict["import"]["max_rows"]
    - etc.

    Note: This modifies config_dict in place.
    """
    for suffix, path in ENV_MAPPINGS.items():
        value = os.environ.get(f"{prefix}_{suffix}")
        if value is None:
            continue

        section, key = path
        if section not in config_dict:
            config_dict[section] = {}

        if key in INT_KEYS:
            config_dict[section][key] = int(value)
        elif key in BOOL_KEYS:
            config_dict[section][key] = value.lower() in ("true", "1", "yes")
        elif key == "level":
            config_dict[section][key] = value.upper()
        else:
            config_dict[section][key] = value


def load_config(config_file: Path | None = None) -> SongsheetConfig:
    """Load configuration from TOML file with environment variable overrides.

    Args:
        config_file: Optional path to config file. If not provided,
                     searches default locations.

    Returns:
        SongsheetConfig instance with all settings loaded.
    """
    config_dict: dict[str, Any] = {}

    if config_file is None:
        config_file = find_config_file()

    if config_file and config_file.exists():
        logger.info(f"Loading config from: {config_file}")
        config_dict = load_toml_file(config_file)
    else:
        logger.info("No config file found, using defaults with env overrides")

    apply_env_overrides(config_dict)

    return SongsheetConfig(**config_dict)
