"""Three-tier keyword matching of spreadsheet headers."""

import re
from collections.abc import Callable, Collection, Iterable, Sequence
from datetime import date, datetime
from typing import Any

from .constants import MIN_FUZZY_KEYWORD_LENGTH

_WHITESPACE = re.compile(r"\s+")


def normalize_header(cell: Any) -> str:
    """Lowercase, trimmed text of a header cell (``None`` becomes ``""``)."""
    if cell is None:
        return ""
    if isinstance(cell, float) and cell.is_integer():
        cell = int(cell)
    if isinstance(cell, (date, datetime)):
        cell = cell.isoformat()
    return str(cell).strip().lower()


def normalize_headers(header_row: Sequence[Any]) -> list[str]:
    return [normalize_header(cell) for cell in header_row]


def _compact(text: str) -> str:
    return _WHITESPACE.sub("", text)


def is_fuzzy_keyword(keyword: str) -> bool:
    """Whether a keyword is long enough to take part in substring tiers."""
    return len(_compact(keyword)) >= MIN_FUZZY_KEYWORD_LENGTH


def _candidates(
    headers: Sequence[str],
    exclude: Collection[int],
    skip: Callable[[str], bool] | None,
) -> list[tuple[int, str]]:
    return [
        (index, header)
        for index, header in enumerate(headers)
        if header and index not in exclude and not (skip and skip(header))
    ]


def find_exact(
    headers: Sequence[str],
    keywords: Iterable[str],
    exclude: Collection[int] = (),
) -> int:
    """Return the first column whose header equals a keyword, in keyword order."""
    candidates = _candidates(headers, exclude, None)
    for keyword in keywords:
        for index, header in candidates:
            if header == keyword:
                return index
    return -1


def find_fuzzy(
    headers: Sequence[str],
    keywords: Iterable[str],
    exclude: Collection[int] = (),
    skip: Callable[[str], bool] | None = None,
) -> int:
    """Substring tier, then bidirectional substring tier.

    Short keywords never take part; ``skip`` filters out headers that must
    not be considered for this field.
    """
    fuzzy_keywords = [k for k in keywords if is_fuzzy_keyword(k)]
    candidates = _candidates(headers, exclude, skip)

    for keyword in fuzzy_keywords:
        for index, header in candidates:
            if keyword in header:
                return index

    for keyword in fuzzy_keywords:
        compact_keyword = _compact(keyword)
        for index, header in candidates:
            compact_header = _compact(header)
            if compact_keyword in compact_header:
                return index
            if len(compact_header) >= MIN_FUZZY_KEYWORD_LENGTH and compact_header in compact_keyword:
                return index

    return -1
