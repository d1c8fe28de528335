"""Consistency checks over extracted song records."""

import logging
from collections import defaultdict
from typing import Literal

from pydantic import BaseModel

from songsheet.models.game import GameSchema
from songsheet.models.song import SongRecord
from songsheet.services.import_service.converters import is_placeholder_title, is_youtube_url

logger = logging.getLogger(__name__)

IssueType = Literal["missing", "invalid", "inconsistent", "duplicate"]
Severity = Literal["warning", "error"]


class ValidationIssue(BaseModel):
    """A problem found in one song record."""

    song_id: str
    song_name: str
    field_path: str
    issue_type: IssueType
    description: str
    severity: Severity


def _issue(
    song: SongRecord,
    field_path: str,
    issue_type: IssueType,
    description: str,
    severity: Severity = "warning",
) -> ValidationIssue:
    return ValidationIssue(
        song_id=song.id,
        song_name=song.name or "(unknown)",
        field_path=field_path,
        issue_type=issue_type,
        description=description,
        severity=severity,
    )


def _check_song(song: SongRecord, game: GameSchema) -> list[ValidationIssue]:
    issues = []

    if not song.name.strip():
        issues.append(_issue(song, "name", "missing", "Song title is empty", "error"))
    elif is_placeholder_title(song.name):
        issues.append(_issue(song, "name", "missing", "Song title was missing in the sheet"))

    highest_so_far: tuple[str, float] | None = None
    band_floor = 0
    for difficulty in game.ordered_difficulties():
        # Tiers ranked below an earlier tier's range (e.g. CHUNITHM WORLD'S END)
        # sit outside the ladder and are not ordered against it
        in_ladder = difficulty.max_level >= band_floor
        band_floor = max(band_floor, difficulty.min_level)
        info = song.difficulties.get(difficulty.id)
        if info is None:
            continue
        path = f"difficulties.{difficulty.id}"

        if info.level is not None:
            if not difficulty.min_level <= info.level <= difficulty.max_level:
                issues.append(_issue(
                    song, f"{path}.level", "invalid",
                    f"Level {info.level} is outside {difficulty.min_level}-{difficulty.max_level}",
                ))
            if info.combo is None:
                issues.append(_issue(
                    song, f"{path}.combo", "missing",
                    f"{difficulty.name} has a level but no combo count",
                ))
            if in_ladder:
                if highest_so_far is not None and info.level < highest_so_far[1]:
                    issues.append(_issue(
                        song, f"{path}.level", "inconsistent",
                        f"{difficulty.name} level {info.level} is lower than "
                        f"{highest_so_far[0]} level {highest_so_far[1]}",
                    ))
                if highest_so_far is None or info.level > highest_so_far[1]:
                    highest_so_far = (difficulty.name, info.level)

        if info.video_url and not is_youtube_url(info.video_url):
            issues.append(_issue(
                song, f"{path}.video_url", "invalid",
                f"Not a YouTube URL: {info.video_url}",
            ))

    return issues


def validate_songs(songs: list[SongRecord], game: GameSchema) -> list[ValidationIssue]:
    """Check extracted songs for missing, invalid, inconsistent and duplicate data.

    Args:
        songs: Records extracted for ``game``.
        game: The game schema supplying difficulty level ranges and order.

    Returns:
        Issues in song order, followed by duplicate findings.
    """
    issues: list[ValidationIssue] = []
    by_name: dict[tuple[str, str], list[SongRecord]] = defaultdict(list)
    by_number: dict[tuple[str, int], list[SongRecord]] = defaultdict(list)

    for song in songs:
        issues.extend(_check_song(song, game))
        if song.name.strip():
            by_name[(song.game_id, song.name.strip().lower())].append(song)
        by_number[(song.game_id, song.song_no)].append(song)

    for group in by_name.values():
        if len(group) > 1:
            for song in group:
                issues.append(_issue(
                    song, "name", "duplicate",
                    f"Title appears {len(group)} times in this game",
                ))

    for (_, song_no), group in by_number.items():
        if len(group) > 1:
            for song in group:
                issues.append(_issue(
                    song, "song_no", "duplicate",
                    f"Song number {song_no} appears {len(group)} times",
                    "error",
                ))

    if issues:
        logger.info("Validation found %d issues in %d songs", len(issues), len(songs))
    return issues
