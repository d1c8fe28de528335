"""Row extraction: turn spreadsheet rows into song records."""

import logging
from collections.abc import Sequence
from typing import Any

from songsheet.models.game import GameSchema
from songsheet.models.song import DifficultyInfo, SongInfo, SongRecord
from songsheet.models.structure import UNSET, ColumnMapping

from .converters import (
    DEFAULT_MIN_SERIAL_YEAR,
    cell_text,
    coerce_bpm,
    coerce_combo,
    coerce_date,
    coerce_int,
    coerce_level,
    coerce_song_number,
    format_duration,
    normalize_video_url,
    placeholder_title,
    split_tags,
)
from .errors import MissingTitleError

logger = logging.getLogger(__name__)


def _cell(row: Sequence[Any], index: int) -> Any:
    if index == UNSET or index < 0 or index >= len(row):
        return None
    return row[index]


def _text_or_none(value: Any) -> str | None:
    return cell_text(value) or None


def row_to_song(
    row: Sequence[Any],
    position: int,
    mapping: ColumnMapping,
    game: GameSchema,
    strict_titles: bool = False,
    min_serial_year: int = DEFAULT_MIN_SERIAL_YEAR,
) -> SongRecord:
    """Convert one spreadsheet row to a SongRecord.

    Args:
        row: Raw cell values.
        position: 1-based position of the row among the body rows.
        mapping: Column mapping to read through.
        game: Game whose difficulties every record carries.
        strict_titles: Raise instead of substituting a placeholder title.
        min_serial_year: Earliest year accepted for serial-number dates.

    Returns:
        The song record.

    Raises:
        MissingTitleError: If ``strict_titles`` is set and the title is empty.
    """
    song_no = coerce_song_number(_cell(row, mapping.song_no), position)

    name = cell_text(_cell(row, mapping.name))
    if not name:
        if strict_titles:
            raise MissingTitleError(position)
        name = placeholder_title(position)
        logger.debug("Row %d has no title, using placeholder", position)

    difficulties = {}
    for difficulty_id in game.difficulty_ids():
        difficulties[difficulty_id] = DifficultyInfo(
            level=coerce_level(_cell(row, mapping.difficulties.get(difficulty_id, UNSET))),
            combo=coerce_combo(_cell(row, mapping.combos.get(difficulty_id, UNSET))),
            video_url=normalize_video_url(
                _cell(row, mapping.video_urls.get(difficulty_id, UNSET))
            ),
        )

    columns = mapping.info
    info = SongInfo(
        artist=_text_or_none(_cell(row, columns.artist)),
        lyricist=_text_or_none(_cell(row, columns.lyricist)),
        composer=_text_or_none(_cell(row, columns.composer)),
        arranger=_text_or_none(_cell(row, columns.arranger)),
        duration=format_duration(_cell(row, columns.duration)),
        bpm=coerce_bpm(_cell(row, columns.bpm)),
        added_date=coerce_date(_cell(row, columns.added_date), min_serial_year),
        tags=split_tags(_cell(row, columns.tags)),
    )

    return SongRecord(
        id=f"{game.id}_{song_no}",
        game_id=game.id,
        song_no=song_no,
        implementation_no=coerce_int(_cell(row, mapping.implementation_no)),
        name=name,
        difficulties=difficulties,
        info=info,
    )


def extract_rows(
    body_rows: Sequence[Sequence[Any]],
    mapping: ColumnMapping,
    game: GameSchema,
    strict_titles: bool = False,
    min_serial_year: int = DEFAULT_MIN_SERIAL_YEAR,
) -> list[SongRecord]:
    """Convert every body row to a SongRecord, preserving order.

    Row positions used for song number and title fallbacks are 1-based over
    ``body_rows``. Extraction is a pure function of its inputs.
    """
    songs = [
        row_to_song(row, position, mapping, game, strict_titles, min_serial_year)
        for position, row in enumerate(body_rows, start=1)
    ]
    logger.debug("Extracted %d songs for %s", len(songs), game.id)
    return songs
