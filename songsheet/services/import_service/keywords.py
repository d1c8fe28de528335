"""Injectable keyword tables for header matching."""

import re

from pydantic import BaseModel, Field

from songsheet.config.schema import MatchingConfig

from .constants import (
    ABBREVIATIONS,
    COMBO_MARKERS,
    FALLBACK_PATTERN_TEMPLATES,
    FIELD_KEYWORDS,
    TIER_SYNONYMS,
    VIDEO_MARKERS,
)


def _copy_lists(table: dict[str, list[str]]) -> dict[str, list[str]]:
    return {key: list(values) for key, values in table.items()}


class KeywordTables(BaseModel):
    """Keyword, synonym and abbreviation tables used by the inferencer.

    The defaults are the built-in seed tables. Use ``extended()`` (or
    ``from_matching_config()``) to append locale- or game-specific words
    without touching the matching algorithm.
    """

    field_keywords: dict[str, list[str]] = Field(
        default_factory=lambda: _copy_lists(FIELD_KEYWORDS)
    )
    tier_synonyms: dict[str, list[str]] = Field(
        default_factory=lambda: _copy_lists(TIER_SYNONYMS)
    )
    abbreviations: dict[str, str] = Field(default_factory=lambda: dict(ABBREVIATIONS))
    combo_markers: tuple[str, ...] = COMBO_MARKERS
    video_markers: tuple[str, ...] = VIDEO_MARKERS

    def extended(
        self,
        field_keywords: dict[str, list[str]] | None = None,
        tier_synonyms: dict[str, list[str]] | None = None,
        abbreviations: dict[str, str] | None = None,
    ) -> "KeywordTables":
        """Return a copy with extra entries appended after the existing ones."""
        merged_fields = _copy_lists(self.field_keywords)
        for field, words in (field_keywords or {}).items():
            merged_fields.setdefault(field, []).extend(w.lower() for w in words)

        merged_tiers = _copy_lists(self.tier_synonyms)
        for tier, words in (tier_synonyms or {}).items():
            merged_tiers.setdefault(tier.lower(), []).extend(w.lower() for w in words)

        merged_abbreviations = dict(self.abbreviations)
        for token, tier in (abbreviations or {}).items():
            merged_abbreviations[token.lower()] = tier.lower()

        return KeywordTables(
            field_keywords=merged_fields,
            tier_synonyms=merged_tiers,
            abbreviations=merged_abbreviations,
            combo_markers=self.combo_markers,
            video_markers=self.video_markers,
        )

    @classmethod
    def from_matching_config(cls, matching: MatchingConfig) -> "KeywordTables":
        return cls().extended(
            field_keywords=matching.field_keywords,
            tier_synonyms=matching.tier_synonyms,
            abbreviations=matching.abbreviations,
        )

    def synonyms_for(self, difficulty_id: str, display_name: str) -> list[str]:
        """Collect the localized synonyms of every tier the difficulty resembles."""
        words: list[str] = []
        lowered_id = difficulty_id.lower()
        lowered_name = display_name.lower()
        for tier, synonyms in self.tier_synonyms.items():
            if tier == lowered_id or tier in lowered_name:
                words.extend(synonyms)
        return words

    def tier_tokens(self) -> list[str]:
        """Every tier word, synonym and abbreviation, longest first."""
        tokens = set(self.tier_synonyms)
        for synonyms in self.tier_synonyms.values():
            tokens.update(synonyms)
        tokens.update(self.abbreviations)
        return sorted((t for t in tokens if t), key=lambda t: (-len(t), t))

    def fallback_patterns(self) -> list[re.Pattern[str]]:
        """Compile the generic tier-header patterns over ``tier_tokens()``."""
        alternation = "|".join(re.escape(token) for token in self.tier_tokens())
        return [
            re.compile(template.replace("{tokens}", alternation))
            for template in FALLBACK_PATTERN_TEMPLATES
        ]

    def has_combo_marker(self, header: str) -> bool:
        return any(marker in header for marker in self.combo_markers)

    def has_video_marker(self, header: str) -> bool:
        return any(marker in header for marker in self.video_markers)
