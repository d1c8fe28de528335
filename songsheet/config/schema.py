"""Pydantic models for SongSheet configuration.

These models define the structure of the config.toml file.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    # CORS configuration - empty list means same-origin only
    cors_origins: list[str] = []


class StorageConfig(BaseModel):
    """File storage configuration."""

    data_dir: Path = Field(default_factory=lambda: Path("data"))
    max_upload_mb: int = 50

    @property
    def structures_dir(self) -> Path:
        """Get the directory holding persisted spreadsheet structures."""
        return self.data_dir / "structures"

    @property
    def max_upload_bytes(self) -> int:
        """Get max upload size in bytes."""
        return self.max_upload_mb * 1024 * 1024


class ImportConfig(BaseModel):
    """Spreadsheet import tuning."""

    # Safety limit on the number of rows read from one sheet
    max_rows: int = 10000
    # Rows scanned when looking for the header and first data row
    header_search_rows: int = 10
    # Data rows handed to the inferencer for offset correction
    sample_rows: int = 3
    # Columns searched on either side of a misaligned anchor column
    offset_window: int = 2
    # Spreadsheet date serials resolving before this year are rejected
    min_serial_year: int = 1990
    # Rows included in analysis previews
    preview_rows: int = 5


class MatchingConfig(BaseModel):
    """Extra keywords merged into the built-in matching tables.

    Keys are lowercase; values are appended after the built-in entries so
    the defaults keep their priority.
    """

    field_keywords: dict[str, list[str]] = {}
    tier_synonyms: dict[str, list[str]] = {}
    abbreviations: dict[str, str] = {}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class DifficultyConfig(BaseModel):
    """A difficulty entry of a game declared in config.toml."""

    id: str
    name: str | None = None
    color: str = "#888888"
    order: int | None = None
    min_level: int = 1
    max_level: int = 30


class GameConfig(BaseModel):
    """A game declared in config.toml under [games.<id>]."""

    title: str
    description: str | None = None
    difficulties: list[DifficultyConfig] = []


class SongsheetConfig(BaseModel):
    """Main SongSheet configuration loaded from config.toml."""

    app_name: str = "SongSheet"
    server: ServerConfig = Field(default_factory=ServerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    import_: ImportConfig = Field(default_factory=ImportConfig, alias="import")
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    games: dict[str, GameConfig] = {}

    model_config = {"populate_by_name": True}
