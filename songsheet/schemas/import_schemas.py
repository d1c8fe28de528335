"""Pydantic schemas for spreadsheet import functionality."""

from typing import Any

from pydantic import BaseModel, Field

from songsheet.models.song import SongRecord
from songsheet.models.structure import SpreadsheetStructure
from songsheet.services.validator import ValidationIssue


class AnalyzeResponse(BaseModel):
    """Response after analysing an uploaded spreadsheet."""

    filename: str
    structure: SpreadsheetStructure
    headers: list[str]
    preview_rows: list[list[Any]]
    sheet_names: list[str]
    from_store: bool = Field(False, description="Structure was loaded from the store, not inferred")


class MappingUpdateRequest(BaseModel):
    """Request to point one mapping field at a different column."""

    field: str = Field(..., description="song_no, name, implementation_no, difficulties, combos, video_urls or info")
    sub_field: str | None = Field(None, description="Difficulty id, or metadata field for 'info'")
    column_index: int = Field(..., ge=-1, description="Zero-based column, -1 to unset")


class ParseResponse(BaseModel):
    """Response after parsing songs from a spreadsheet."""

    filename: str
    game_id: str
    song_count: int
    songs: list[SongRecord]
    issues: list[ValidationIssue]
    structure: SpreadsheetStructure
