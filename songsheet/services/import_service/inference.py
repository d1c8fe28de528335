"""Column structure inference for song spreadsheets.

Given a header row, a few sample data rows and a game schema, guess which
column holds the song number, the title, every difficulty's level, combo
count and video link, and the metadata fields.

Matching runs in phases. Exact keyword matches for every field are settled
first, then the substring and bidirectional tiers fill the remaining fields
from columns nobody has claimed yet. If no level column was found at all, a
pattern-based fallback looks for generic tier headers. Finally the song
number and title columns are checked against sample data and, when both
look misaligned by the same amount, the whole mapping is shifted.

The offset correction assumes one uniform horizontal shift for the whole
sheet; sheets with columns inserted or removed in the middle are not
repaired by it.
"""

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from songsheet.models.game import DifficultyDefinition, GameSchema
from songsheet.models.structure import INFO_FIELDS, UNSET, ColumnMapping

from .constants import COMBO_TEMPLATES, LEVEL_TEMPLATES, VIDEO_TEMPLATES
from .errors import SpreadsheetStructureError
from .keywords import KeywordTables
from .matching import find_exact, find_fuzzy, is_fuzzy_keyword, normalize_headers

logger = logging.getLogger(__name__)

DEFAULT_OFFSET_WINDOW = 2

_DIGITS_ONLY = re.compile(r"^\d+$")


@dataclass
class _FieldSearch:
    """One field to locate: where it goes in the mapping and how to find it."""

    field: str
    sub_field: str | None
    exact_keywords: list[str]
    fuzzy_keywords: list[str]
    skip: Callable[[str], bool] | None = None


def _dedupe(words: Sequence[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for word in words:
        if word and word not in seen:
            seen.add(word)
            result.append(word)
    return result


def difficulty_variants(
    difficulty: DifficultyDefinition,
    keywords: KeywordTables,
) -> tuple[list[str], list[str]]:
    """Build the keyword variants naming one difficulty.

    Returns:
        ``(strong, weak)`` variants. Strong variants (id, display name and synonyms of
        three or more characters) may match fuzzily; weak ones (shorter
        words and prefixes derived from the id) only ever match exactly.
    """
    lowered_id = difficulty.id.lower()
    lowered_name = difficulty.name.lower()
    synonyms = keywords.synonyms_for(difficulty.id, difficulty.name)

    strong: list[str] = []
    weak: list[str] = []
    for word in [lowered_id, lowered_name, *synonyms]:
        (strong if is_fuzzy_keyword(word) else weak).append(word)
    for length in (2, 3):
        if len(lowered_id) > length:
            weak.append(lowered_id[:length])

    strong = _dedupe(strong)
    weak = [w for w in _dedupe(weak) if w not in strong]
    return strong, weak


def _expand(templates: Sequence[str], variants: Sequence[str]) -> list[str]:
    return _dedupe([template.format(variant) for template in templates for variant in variants])


def _difficulty_searches(
    difficulty: DifficultyDefinition,
    keywords: KeywordTables,
) -> list[_FieldSearch]:
    strong, weak = difficulty_variants(difficulty, keywords)
    variants = strong + weak

    def not_combo_or_video(header: str) -> bool:
        return keywords.has_combo_marker(header) or keywords.has_video_marker(header)

    searches = []
    for field, templates, skip in (
        ("difficulties", LEVEL_TEMPLATES, not_combo_or_video),
        ("combos", COMBO_TEMPLATES, keywords.has_video_marker),
        ("video_urls", VIDEO_TEMPLATES, keywords.has_combo_marker),
    ):
        searches.append(
            _FieldSearch(
                field=field,
                sub_field=difficulty.id,
                exact_keywords=_expand(templates, variants),
                fuzzy_keywords=_expand(templates, strong),
                skip=skip,
            )
        )
    return searches


def _build_searches(game: GameSchema, keywords: KeywordTables) -> list[_FieldSearch]:
    """All field searches in priority order: scalars, difficulties, metadata."""
    searches = []
    for field in ("song_no", "name", "implementation_no"):
        words = keywords.field_keywords.get(field, [])
        searches.append(_FieldSearch(field, None, list(words), list(words)))

    for difficulty in game.ordered_difficulties():
        searches.extend(_difficulty_searches(difficulty, keywords))

    for info_field in INFO_FIELDS:
        words = keywords.field_keywords.get(info_field, [])
        searches.append(_FieldSearch("info", info_field, list(words), list(words)))
    return searches


def _get(mapping: ColumnMapping, field: str, sub_field: str | None) -> int:
    if sub_field is None:
        return getattr(mapping, field)
    if field == "info":
        return getattr(mapping.info, sub_field)
    return getattr(mapping, field).get(sub_field, UNSET)


def _set(mapping: ColumnMapping, field: str, sub_field: str | None, index: int) -> None:
    if sub_field is None:
        setattr(mapping, field, index)
    elif field == "info":
        setattr(mapping.info, sub_field, index)
    else:
        getattr(mapping, field)[sub_field] = index


def _empty_mapping(game: GameSchema) -> ColumnMapping:
    ids = game.difficulty_ids()
    return ColumnMapping(
        difficulties={d: UNSET for d in ids},
        combos={d: UNSET for d in ids},
        video_urls={d: UNSET for d in ids},
    )


def _match_tier_token(header: str, patterns: Sequence[re.Pattern[str]]) -> str | None:
    for pattern in patterns:
        match = pattern.match(header)
        if match:
            return match.group("tier")
    return None


def _resembles(token: str, difficulty: DifficultyDefinition) -> bool:
    lowered_id = difficulty.id.lower()
    lowered_name = difficulty.name.lower()
    return (
        token in lowered_id
        or lowered_id in token
        or token in lowered_name
        or lowered_name in token
    )


def resolve_difficulty_candidates(
    token: str,
    difficulties: Sequence[DifficultyDefinition],
    keywords: KeywordTables,
) -> list[str]:
    """Rank the difficulties a tier token could stand for.

    Tiers, in order: exact id/name match, substring match, first-letter
    match, then the abbreviation and synonym tables.
    """
    token = token.strip().lower()
    candidates: list[str] = []

    def add(matches: Sequence[DifficultyDefinition]) -> None:
        for difficulty in matches:
            if difficulty.id not in candidates:
                candidates.append(difficulty.id)

    add([d for d in difficulties if token in (d.id.lower(), d.name.lower())])
    if len(token) >= 2:
        add([d for d in difficulties if _resembles(token, d)])
    add([d for d in difficulties if d.id and d.id.lower()[0] == token[:1]])

    tiers = []
    if token in keywords.abbreviations:
        tiers.append(keywords.abbreviations[token])
    tiers.extend(tier for tier, words in keywords.tier_synonyms.items() if token in words)
    for tier in tiers:
        add([d for d in difficulties if tier in (d.id.lower(), d.name.lower())])
        add([d for d in difficulties if _resembles(tier, d)])

    return candidates


def _detect_generic_tiers(
    headers: Sequence[str],
    game: GameSchema,
    mapping: ColumnMapping,
    claimed: set[int],
    keywords: KeywordTables,
) -> None:
    """Assign level columns from headers that look like bare tier names."""
    patterns = keywords.fallback_patterns()
    difficulties = game.ordered_difficulties()

    for index, header in enumerate(headers):
        if not header or index in claimed:
            continue
        token = _match_tier_token(header, patterns)
        if token is None:
            continue

        for difficulty_id in resolve_difficulty_candidates(token, difficulties, keywords):
            if mapping.difficulties.get(difficulty_id, UNSET) >= 0:
                continue
            mapping.difficulties[difficulty_id] = index
            claimed.add(index)
            logger.debug("Fallback: column %d (%r) -> %s level", index, header, difficulty_id)

            for next_index in (index + 1, index + 2):
                if next_index >= len(headers) or next_index in claimed:
                    continue
                if keywords.has_combo_marker(headers[next_index]):
                    if mapping.combos.get(difficulty_id, UNSET) < 0:
                        mapping.combos[difficulty_id] = next_index
                        claimed.add(next_index)
                    break
            break


def is_song_number_like(value: Any) -> bool:
    """A song number cell is a number or a pure-digit string."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and bool(_DIGITS_ONLY.match(value.strip()))


def is_title_like(value: Any) -> bool:
    """A title cell is a string of at least two characters."""
    return isinstance(value, str) and len(value.strip()) >= 2


def _first_sample(sample_rows: Sequence[Sequence[Any]]) -> Sequence[Any] | None:
    for row in sample_rows:
        if any(cell not in (None, "") for cell in row):
            return row
    return None


def correct_offset(
    mapping: ColumnMapping,
    sample_rows: Sequence[Sequence[Any]],
    window: int = DEFAULT_OFFSET_WINDOW,
) -> tuple[ColumnMapping, int]:
    """Detect a uniform horizontal shift between headers and data.

    The song number and title columns are type-sniffed against the first
    non-blank sample row. When either fails, offsets within ``window`` are
    tried nearest first, positive before negative. The first offset under
    which every anchor passes wins; failing that, the first offset under
    which the first failing anchor passes.

    Returns:
        ``(mapping, offset)``; the mapping is unchanged when offset is 0.
    """
    row = _first_sample(sample_rows)
    if row is None:
        return mapping, 0

    anchors = []
    if mapping.song_no >= 0:
        anchors.append((mapping.song_no, is_song_number_like))
    if mapping.name >= 0:
        anchors.append((mapping.name, is_title_like))
    if not anchors:
        return mapping, 0

    def cell(index: int) -> Any:
        if 0 <= index < len(row):
            return row[index]
        return None

    def passes(delta: int, checks) -> bool:
        return all(check(cell(index + delta)) for index, check in checks)

    if passes(0, anchors):
        return mapping, 0

    deltas = [d for step in range(1, window + 1) for d in (step, -step)]
    failing = [next((index, check) for index, check in anchors if not check(cell(index)))]

    for checks in (anchors, failing):
        for delta in deltas:
            if passes(delta, checks):
                logger.info("Header and data columns misaligned, shifting mapping by %+d", delta)
                return mapping.shifted(delta), delta

    logger.debug("No better column found within +/-%d, keeping detected mapping", window)
    return mapping, 0


def infer_structure(
    header_row: Sequence[Any] | None,
    sample_rows: Sequence[Sequence[Any]] | None,
    game: GameSchema | None,
    keywords: KeywordTables | None = None,
    offset_window: int = DEFAULT_OFFSET_WINDOW,
) -> ColumnMapping:
    """Guess which column is which.

    Args:
        header_row: Raw header cells.
        sample_rows: A few data rows used to validate the guess.
        game: Game schema whose difficulties must be located.
        keywords: Keyword tables; the built-in seed tables by default.
        offset_window: Columns searched either side of a misaligned anchor.

    Returns:
        A ColumnMapping whose indices are either UNSET or within the
        observed sheet width.

    Raises:
        SpreadsheetStructureError: If the header row or game schema is absent.
    """
    if not header_row:
        raise SpreadsheetStructureError("Spreadsheet has no header row")
    if game is None:
        raise SpreadsheetStructureError("A game schema is required to infer the structure")

    keywords = keywords or KeywordTables()
    sample_rows = list(sample_rows or [])
    headers = normalize_headers(header_row)
    mapping = _empty_mapping(game)
    claimed: set[int] = set()

    searches = _build_searches(game, keywords)

    for search in searches:
        index = find_exact(headers, search.exact_keywords, claimed)
        if index >= 0:
            _set(mapping, search.field, search.sub_field, index)
            claimed.add(index)

    for search in searches:
        if _get(mapping, search.field, search.sub_field) >= 0:
            continue
        index = find_fuzzy(headers, search.fuzzy_keywords, claimed, search.skip)
        if index >= 0:
            _set(mapping, search.field, search.sub_field, index)
            claimed.add(index)
        else:
            logger.debug("No column found for %s%s", search.field, f".{search.sub_field}" if search.sub_field else "")

    if not any(index >= 0 for index in mapping.difficulties.values()):
        _detect_generic_tiers(headers, game, mapping, claimed, keywords)

    mapping, _ = correct_offset(mapping, sample_rows, offset_window)

    width = max([len(header_row)] + [len(row) for row in sample_rows])
    return mapping.clamped(width)
