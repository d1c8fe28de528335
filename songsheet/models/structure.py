"""Spreadsheet structure models: which column holds which song field."""

from collections.abc import Iterator

from pydantic import BaseModel, Field

# Column index meaning "not present in this sheet"
UNSET = -1

INFO_FIELDS = (
    "artist",
    "lyricist",
    "composer",
    "arranger",
    "duration",
    "bpm",
    "added_date",
    "tags",
)

SCALAR_FIELDS = ("song_no", "name", "implementation_no")

DIFFICULTY_SUB_FIELDS = ("difficulties", "combos", "video_urls")


class InfoColumns(BaseModel):
    """Column indices of the metadata fields."""

    artist: int = UNSET
    lyricist: int = UNSET
    composer: int = UNSET
    arranger: int = UNSET
    duration: int = UNSET
    bpm: int = UNSET
    added_date: int = UNSET
    tags: int = UNSET


class ColumnMapping(BaseModel):
    """Assignment of spreadsheet column indices to song fields.

    Scalar fields hold a single index. ``difficulties``, ``combos`` and
    ``video_urls`` map a difficulty id to the column carrying its level,
    combo count and video link respectively. ``UNSET`` marks a field that
    is not present in the sheet.
    """

    song_no: int = UNSET
    name: int = UNSET
    implementation_no: int = UNSET
    difficulties: dict[str, int] = Field(default_factory=dict)
    combos: dict[str, int] = Field(default_factory=dict)
    video_urls: dict[str, int] = Field(default_factory=dict)
    info: InfoColumns = Field(default_factory=InfoColumns)

    def iter_fields(self) -> Iterator[tuple[str, str | None, int]]:
        """Yield ``(field, sub_field, index)`` for every field, set or not."""
        for field in SCALAR_FIELDS:
            yield field, None, getattr(self, field)
        for field in DIFFICULTY_SUB_FIELDS:
            for difficulty_id, index in getattr(self, field).items():
                yield field, difficulty_id, index
        for info_field in INFO_FIELDS:
            yield "info", info_field, getattr(self.info, info_field)

    def assigned_indices(self) -> set[int]:
        """Return every column index currently assigned to some field."""
        return {index for _, _, index in self.iter_fields() if index >= 0}

    def _map_indices(self, func) -> "ColumnMapping":
        """Return a copy with ``func`` applied to every assigned index."""

        def apply(index: int) -> int:
            return func(index) if index >= 0 else index

        info = InfoColumns(
            **{f: apply(getattr(self.info, f)) for f in INFO_FIELDS}
        )
        return ColumnMapping(
            song_no=apply(self.song_no),
            name=apply(self.name),
            implementation_no=apply(self.implementation_no),
            difficulties={k: apply(v) for k, v in self.difficulties.items()},
            combos={k: apply(v) for k, v in self.combos.items()},
            video_urls={k: apply(v) for k, v in self.video_urls.items()},
            info=info,
        )

    def shifted(self, offset: int) -> "ColumnMapping":
        """Shift every assigned index by ``offset``, clamping at zero."""
        return self._map_indices(lambda index: max(0, index + offset))

    def clamped(self, width: int) -> "ColumnMapping":
        """Unset every index that falls outside a sheet of ``width`` columns."""
        return self._map_indices(lambda index: index if index < width else UNSET)

    def out_of_bounds(self, width: int) -> list[str]:
        """List the field paths whose index is outside ``width`` columns."""
        problems = []
        for field, sub_field, index in self.iter_fields():
            if index < UNSET or index >= width:
                problems.append(f"{field}.{sub_field}" if sub_field else field)
        return problems


class SpreadsheetStructure(BaseModel):
    """How to read one game's spreadsheet layout."""

    game_id: str = Field(..., min_length=1)
    sheet_name: str
    header_row: int = Field(0, ge=0)
    data_start_row: int = Field(1, ge=0)
    column_mapping: ColumnMapping = Field(default_factory=ColumnMapping)
