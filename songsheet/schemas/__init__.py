"""Pydantic schemas for SongSheet API."""

from songsheet.schemas.import_schemas import (
    AnalyzeResponse,
    MappingUpdateRequest,
    ParseResponse,
)

__all__ = [
    "AnalyzeResponse",
    "MappingUpdateRequest",
    "ParseResponse",
]
