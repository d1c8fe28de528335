"""Services for SongSheet application."""

from songsheet.services.structure_store import StructureStore
from songsheet.services.validator import ValidationIssue, validate_songs

__all__ = ["StructureStore", "ValidationIssue", "validate_songs"]
