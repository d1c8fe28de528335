"""Manual correction of an inferred column mapping."""

import logging

from songsheet.models.structure import (
    DIFFICULTY_SUB_FIELDS,
    INFO_FIELDS,
    SCALAR_FIELDS,
    UNSET,
    SpreadsheetStructure,
)

logger = logging.getLogger(__name__)

VALID_MAPPING_FIELDS = SCALAR_FIELDS + DIFFICULTY_SUB_FIELDS + ("info",)


def _is_valid_field(field: str, sub_field: str | None) -> bool:
    """Check that a (field, sub_field) pair names a mapping slot.

    Args:
        field: Top-level mapping field.
        sub_field: Difficulty id or metadata field name, where required.

    Returns:
        True if the pair is addressable.
    """
    if field in SCALAR_FIELDS:
        return sub_field is None
    if field in DIFFICULTY_SUB_FIELDS:
        return bool(sub_field)
    if field == "info":
        return sub_field in INFO_FIELDS
    return False


def update_column_mapping(
    structure: SpreadsheetStructure,
    field: str,
    sub_field: str | None,
    column_index: int,
) -> SpreadsheetStructure:
    """Return a copy of ``structure`` with one field pointed at a new column.

    Args:
        structure: The structure to correct; left untouched.
        field: ``song_no``, ``name``, ``implementation_no``, ``difficulties``,
            ``combos``, ``video_urls`` or ``info``.
        sub_field: Difficulty id for per-difficulty fields, metadata field
            name for ``info``, ``None`` for scalar fields.
        column_index: New zero-based column, or ``UNSET`` (-1) to clear.

    Returns:
        The corrected structure.

    Raises:
        ValueError: If the field path is unknown or the index is below -1.
    """
    if not _is_valid_field(field, sub_field):
        path = f"{field}.{sub_field}" if sub_field else field
        raise ValueError(f"Unknown mapping field: {path}")
    if column_index < UNSET:
        raise ValueError(f"Invalid column index: {column_index}")

    updated = structure.model_copy(deep=True)
    mapping = updated.column_mapping
    if sub_field is None:
        setattr(mapping, field, column_index)
    elif field == "info":
        setattr(mapping.info, sub_field, column_index)
    else:
        getattr(mapping, field)[sub_field] = column_index

    logger.debug("Mapping for %s: %s.%s -> %d", structure.game_id, field, sub_field, column_index)
    return updated
