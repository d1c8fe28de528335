"""Cell coercion functions for song rows.

Every function here is total: a cell that cannot be interpreted yields
``None`` (or a documented fallback) instead of raising.
"""

import math
import re
from datetime import date, datetime, time, timedelta
from typing import Any

from .constants import (
    PLACEHOLDER_TITLE,
    TAG_DELIMITERS,
    YOUTUBE_ID_PATTERN,
    YOUTUBE_URL_PATTERN,
    YOUTUBE_WATCH_URL,
)

# Spreadsheet serial day 0
SERIAL_EPOCH = date(1899, 12, 30)
DEFAULT_MIN_SERIAL_YEAR = 1990

_NON_DIGITS = re.compile(r"\D")
_NON_LEVEL_CHARS = re.compile(r"[^\d.]")
_NUMERIC_TEXT = re.compile(r"^\d+(?:\.\d+)?$")
_YOUTUBE_URL = re.compile(YOUTUBE_URL_PATTERN)
_YOUTUBE_ID = re.compile(YOUTUBE_ID_PATTERN)
_TAG_SPLIT = re.compile(TAG_DELIMITERS)

_DATE_FORMATS = (
    (re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$"), ("y", "m", "d")),
    (re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$"), ("y", "m", "d")),
    (re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$"), ("d", "m", "y")),
    (re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$"), ("d", "m", "y")),
    (re.compile(r"^(\d{4})年(\d{1,2})月(\d{1,2})日$"), ("y", "m", "d")),
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _integral(number: float) -> int | float:
    return int(number) if float(number).is_integer() else number


def cell_text(value: Any) -> str:
    """Trimmed text of a cell; ``None`` becomes ``""``."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def coerce_int(value: Any) -> int | None:
    """Parse an integer, ignoring any non-digit characters in text."""
    if value is None or isinstance(value, bool):
        return None
    if _is_number(value):
        try:
            return int(value)
        except (ValueError, OverflowError):
            return None
    digits = _NON_DIGITS.sub("", str(value))
    if not digits:
        return None
    try:
        return int(digits)
    except ValueError:
        # Beyond the interpreter's int string conversion limit
        return None


def coerce_song_number(value: Any, position: int) -> int:
    """Song number from a cell, falling back to the 1-based row position."""
    number = coerce_int(value)
    return position if number is None else number


def coerce_level(value: Any) -> int | float | None:
    """Parse a difficulty level such as ``12``, ``"Lv. 12"`` or ``"12.5+"``."""
    if value is None or isinstance(value, bool):
        return None
    if _is_number(value):
        if not math.isfinite(value):
            return None
        return _integral(value)
    cleaned = _NON_LEVEL_CHARS.sub("", str(value)).strip(".")
    if not cleaned:
        return None
    try:
        number = float(cleaned)
    except ValueError:
        return coerce_int(cleaned)
    return _integral(number) if math.isfinite(number) else None


def coerce_combo(value: Any) -> int | None:
    """Parse a combo count such as ``"1,234"``."""
    return coerce_int(value)


def coerce_bpm(value: Any) -> int | float | None:
    if value is None or isinstance(value, bool):
        return None
    if _is_number(value):
        return _integral(value) if math.isfinite(value) else None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    return _integral(number) if math.isfinite(number) else None


def normalize_video_url(value: Any) -> str | None:
    """Normalize a video cell to a YouTube link.

    Full YouTube URLs are kept, bare 11-character video ids are expanded to a
    watch URL and other text mentioning YouTube is kept as-is. Anything else
    is dropped.
    """
    text = cell_text(value)
    if not text:
        return None
    if _YOUTUBE_URL.search(text):
        return text
    if _YOUTUBE_ID.match(text):
        return YOUTUBE_WATCH_URL.format(text)
    lowered = text.lower()
    if "youtube" in lowered or "youtu.be" in lowered:
        return text
    return None


def is_youtube_url(value: str | None) -> bool:
    return bool(value) and bool(_YOUTUBE_URL.search(value))


def _format_seconds(total: float) -> str:
    seconds = int(round(total))
    minutes, seconds = divmod(seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"


def format_duration(value: Any) -> str | None:
    """Render a duration cell as ``"MM:SS"``.

    Accepts seconds, spreadsheet day fractions (numbers below 1),
    ``datetime.time``/``timedelta`` values and ``m:ss`` or ``h:mm:ss`` text.
    Text that is not recognised is returned unchanged.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, timedelta):
        return _format_seconds(value.total_seconds())
    if isinstance(value, datetime):
        value = value.time()
    if isinstance(value, time):
        return _format_seconds(value.hour * 3600 + value.minute * 60 + value.second)
    if _is_number(value):
        if not math.isfinite(value):
            return None
        if 0 < value < 1:
            return _format_seconds(value * 86400)
        return _format_seconds(value)

    text = str(value).strip()
    if not text:
        return None
    parts = text.split(":")
    if 2 <= len(parts) <= 3 and all(p.strip().isdigit() for p in parts):
        numbers = [int(p) for p in parts]
        if len(numbers) == 3:
            hours, minutes, seconds = numbers
            minutes += hours * 60
        else:
            minutes, seconds = numbers
        return f"{minutes:02d}:{seconds:02d}"
    if _NUMERIC_TEXT.match(text):
        return _format_seconds(float(text))
    return text


def _from_serial(serial: float, min_year: int) -> date | None:
    try:
        result = SERIAL_EPOCH + timedelta(days=int(serial))
    except (ValueError, OverflowError):
        return None
    if min_year <= result.year <= date.today().year + 1:
        return result
    return None


def coerce_date(value: Any, min_serial_year: int = DEFAULT_MIN_SERIAL_YEAR) -> date | None:
    """Parse an added-date cell.

    Args:
        value: A date, a spreadsheet serial number or date text.
        min_serial_year: Earliest year a serial number may resolve to;
            serials outside ``min_serial_year``..next year are rejected.

    Returns:
        The parsed date, or None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if _is_number(value):
        return _from_serial(value, min_serial_year)

    text = str(value).strip()
    if not text:
        return None
    if _NUMERIC_TEXT.match(text):
        return _from_serial(float(text), min_serial_year)

    for pattern, order in _DATE_FORMATS:
        match = pattern.match(text)
        if match:
            parts = dict(zip(order, (int(g) for g in match.groups())))
            try:
                return date(parts["y"], parts["m"], parts["d"])
            except ValueError:
                return None

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def split_tags(value: Any) -> list[str] | None:
    """Split a tag cell on commas, ideographic commas and semicolons."""
    text = cell_text(value)
    if not text:
        return None
    tags = [tag.strip() for tag in _TAG_SPLIT.split(text)]
    return [tag for tag in tags if tag] or None


def placeholder_title(position: int) -> str:
    return PLACEHOLDER_TITLE.format(position)


def is_placeholder_title(name: str) -> bool:
    prefix = PLACEHOLDER_TITLE.split("{}")[0]
    return name.startswith(prefix)
