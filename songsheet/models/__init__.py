"""Data models for SongSheet."""

from songsheet.models.game import DifficultyDefinition, GameSchema
from songsheet.models.song import DifficultyInfo, SongInfo, SongRecord
from songsheet.models.structure import (
    INFO_FIELDS,
    UNSET,
    ColumnMapping,
    InfoColumns,
    SpreadsheetStructure,
)

__all__ = [
    # Game schema
    "DifficultyDefinition",
    "GameSchema",
    # Structure
    "ColumnMapping",
    "InfoColumns",
    "SpreadsheetStructure",
    "INFO_FIELDS",
    "UNSET",
    # Songs
    "DifficultyInfo",
    "SongInfo",
    "SongRecord",
]
