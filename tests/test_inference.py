"""Tests for column structure inference."""

import pytest

from songsheet.models.structure import UNSET, ColumnMapping, SpreadsheetStructure
from songsheet.services.games import build_game_schema, get_game
from songsheet.services.import_service import (
    KeywordTables,
    SpreadsheetStructureError,
    correct_offset,
    infer_structure,
    resolve_difficulty_candidates,
    update_column_mapping,
)


# =============================================================================
# Keyword matching
# =============================================================================


class TestInferStructure:
    """Tests for infer_structure."""

    def test_exact_headers(self, game):
        """Test the common layout of number, title and per-difficulty columns."""
        headers = ["No", "Title", "Easy Lv", "Easy Combo", "Normal Lv"]
        mapping = infer_structure(headers, [[1, "Song A", 5, 120, 9]], game)

        assert mapping.song_no == 0
        assert mapping.name == 1
        assert mapping.difficulties["EASY"] == 2
        assert mapping.combos["EASY"] == 3
        assert mapping.difficulties["NORMAL"] == 4
        assert mapping.difficulties["HARD"] == UNSET
        assert mapping.difficulties["EXPERT"] == UNSET
        assert mapping.implementation_no == UNSET
        assert mapping.info.artist == UNSET

    def test_every_difficulty_key_present(self, game):
        """Test that all difficulties appear in every per-difficulty map."""
        mapping = infer_structure(["No", "Title"], [], game)
        for field in (mapping.difficulties, mapping.combos, mapping.video_urls):
            assert set(field) == {"EASY", "NORMAL", "HARD", "EXPERT"}
            assert all(index == UNSET for index in field.values())

    def test_unmatched_headers_stay_unset(self, game):
        """Test headers matching no keyword leave every field unset."""
        mapping = infer_structure(["zzz", "qqq"], [], game)
        assert mapping.assigned_indices() == set()

    def test_japanese_headers(self, game):
        """Test Japanese field and tier names."""
        headers = ["曲名", "アーティスト", "かんたん", "ふつう", "むずかしい", "おに"]
        mapping = infer_structure(headers, [], game)

        assert mapping.name == 0
        assert mapping.info.artist == 1
        assert mapping.difficulties == {"EASY": 2, "NORMAL": 3, "HARD": 4, "EXPERT": 5}

    def test_metadata_columns(self, game):
        """Test metadata fields are located."""
        headers = ["No", "Title", "作詞", "作曲", "編曲", "BPM", "Time", "追加日", "Tags"]
        mapping = infer_structure(headers, [], game)

        assert mapping.info.lyricist == 2
        assert mapping.info.composer == 3
        assert mapping.info.arranger == 4
        assert mapping.info.bpm == 5
        assert mapping.info.duration == 6
        assert mapping.info.added_date == 7
        assert mapping.info.tags == 8

    def test_video_columns(self, game):
        """Test per-difficulty video link columns."""
        headers = ["Title", "Expert", "Expert URL"]
        mapping = infer_structure(headers, [], game)

        assert mapping.difficulties["EXPERT"] == 1
        assert mapping.video_urls["EXPERT"] == 2

    def test_fuzzy_level_skips_combo_columns(self, game):
        """Test a fuzzy level match never lands on a combo column."""
        headers = ["Title", "EXPERT notes count", "EXPERT譜面Lv"]
        mapping = infer_structure(headers, [], game)

        assert mapping.difficulties["EXPERT"] == 2
        assert mapping.combos["EXPERT"] == 1

    def test_short_keywords_match_exactly_only(self, game):
        """Test 'no' does not claim a longer header containing it."""
        headers = ["Title", "Notes memo", "Easy"]
        mapping = infer_structure(headers, [], game)

        assert mapping.song_no == UNSET
        assert mapping.difficulties["EASY"] == 2

    def test_claimed_columns_are_not_reused(self, game):
        """Test no column is assigned to two fields."""
        headers = ["No", "Song Name", "Artist Name", "Easy", "Easy Combo"]
        mapping = infer_structure(headers, [], game)

        indices = [index for _, _, index in mapping.iter_fields() if index >= 0]
        assert len(indices) == len(set(indices))
        assert mapping.name == 1
        assert mapping.info.artist == 2

    def test_deterministic(self, game):
        """Test repeated inference yields equal mappings."""
        headers = ["No", "Title", "Artist", "Easy", "Normal", "Hard", "Expert"]
        samples = [[1, "Song A", "X", 5, 10, 15, 20]]
        assert infer_structure(headers, samples, game) == infer_structure(headers, samples, game)

    def test_game_without_difficulties(self):
        """Test a game with no difficulties still maps scalar fields."""
        empty = build_game_schema("empty", "Empty", [])
        mapping = infer_structure(["No", "Title"], [], empty)

        assert mapping.song_no == 0
        assert mapping.name == 1
        assert mapping.difficulties == {}

    def test_missing_header_row_raises(self, game):
        """Test an absent or zero-width header row is a structural error."""
        with pytest.raises(SpreadsheetStructureError):
            infer_structure([], [], game)
        with pytest.raises(SpreadsheetStructureError):
            infer_structure(None, [], game)

    def test_missing_game_raises(self):
        """Test a missing game schema is a structural error."""
        with pytest.raises(SpreadsheetStructureError):
            infer_structure(["No", "Title"], [], None)

    def test_malformed_headers(self, game):
        """Test numeric, None and date header cells do not raise."""
        from datetime import date

        mapping = infer_structure([None, 3.0, date(2024, 1, 1), "Title"], [], game)
        assert mapping.name == 3

    def test_extended_keywords(self, game):
        """Test injected keyword tables add vocabulary."""
        keywords = KeywordTables().extended(
            field_keywords={"name": ["Track Label"]},
            tier_synonyms={"expert": ["Oni Level"]},
        )
        mapping = infer_structure(["Track Label", "Oni Level"], [], game, keywords=keywords)

        assert mapping.name == 0
        assert mapping.difficulties["EXPERT"] == 1

    def test_preset_game(self):
        """Test a built-in game layout with five difficulties."""
        bandori = get_game("bandori")
        headers = ["No", "Title", "Artist", "Easy", "Normal", "Hard", "Expert", "Special"]
        mapping = infer_structure(headers, [], bandori)

        assert mapping.difficulties == {
            "EASY": 3, "NORMAL": 4, "HARD": 5, "EXPERT": 6, "SPECIAL": 7,
        }


# =============================================================================
# Fallback detection
# =============================================================================


class TestFallback:
    """Tests for generic tier header detection."""

    @pytest.fixture
    def odd_game(self):
        """A game whose difficulty ids share nothing with common tier names."""
        return build_game_schema(
            "odd",
            "Odd",
            [{"id": "B", "name": "Blue"}, {"id": "A", "name": "Amber"}],
        )

    def test_generic_tier_headers(self, odd_game):
        """Test tier words resolve to difficulties with their combo columns."""
        headers = ["No", "Title", "Basic", "Basic Notes", "Advanced", "Advanced Notes"]
        mapping = infer_structure(headers, [], odd_game)

        assert mapping.difficulties == {"B": 2, "A": 4}
        assert mapping.combos == {"B": 3, "A": 5}

    def test_fallback_not_used_when_levels_found(self, game):
        """Test the fallback stays off once any level column was matched."""
        headers = ["Title", "Easy", "Basic"]
        mapping = infer_structure(headers, [], game)

        assert mapping.difficulties["EASY"] == 1
        assert 2 not in mapping.assigned_indices()

    def test_resolve_substring(self, game):
        """Test 'ex' resolves to EXPERT before EASY."""
        candidates = resolve_difficulty_candidates("ex", game.ordered_difficulties(), KeywordTables())
        assert candidates[0] == "EXPERT"

    def test_resolve_first_letter(self):
        """Test a single letter resolves by first letter."""
        pjsekai = get_game("pjsekai")
        candidates = resolve_difficulty_candidates("m", pjsekai.ordered_difficulties(), KeywordTables())
        assert candidates[0] == "MASTER"

    def test_resolve_abbreviation(self, game):
        """Test abbreviation table lookups."""
        candidates = resolve_difficulty_candidates("おに", game.ordered_difficulties(), KeywordTables())
        assert candidates == ["EXPERT"]

    def test_resolve_unknown(self, game):
        """Test a token naming nothing resolves to no difficulty."""
        assert resolve_difficulty_candidates("zz", game.ordered_difficulties(), KeywordTables()) == []


# =============================================================================
# Offset correction
# =============================================================================


class TestOffsetCorrection:
    """Tests for sample-based offset correction."""

    def test_shift_right_by_two(self, game):
        """Test a mapping shifted when data sits two columns right of the headers."""
        headers = ["No", "Title", "Artist"]
        samples = [[None, None, 1, "Song A", "Someone"]]
        mapping = infer_structure(headers, samples, game)

        assert mapping.song_no == 2
        assert mapping.name == 3
        assert mapping.info.artist == 4

    def test_shift_left_by_one(self, game):
        """Test a negative shift."""
        headers = [None, "No", "Title", "Easy"]
        samples = [[7, "Song A", 5, None]]
        mapping = infer_structure(headers, samples, game)

        assert mapping.song_no == 0
        assert mapping.name == 1
        assert mapping.difficulties["EASY"] == 2

    def test_no_shift_when_anchors_pass(self, game):
        """Test aligned data keeps the mapping."""
        headers = ["No", "Title"]
        mapping = infer_structure(headers, [["12", "Song A"]], game)
        assert (mapping.song_no, mapping.name) == (0, 1)

    def test_no_passing_offset_keeps_mapping(self):
        """Test the mapping is kept when no offset satisfies an anchor."""
        mapping = ColumnMapping(song_no=0, name=1)
        corrected, offset = correct_offset(mapping, [["x", None, None, None]])
        assert offset == 0
        assert corrected == mapping

    def test_blank_samples_are_skipped(self):
        """Test the first sample row with content is the one checked."""
        mapping = ColumnMapping(song_no=0, name=1)
        corrected, offset = correct_offset(mapping, [[None, None, None], [None, 3, "Song"]])
        assert offset == 1
        assert (corrected.song_no, corrected.name) == (1, 2)

    def test_indices_within_observed_width(self, game):
        """Test every assigned index lies inside the sheet."""
        headers = ["No", "Title", "Easy", "Normal", "Hard", "Expert"]
        samples = [[None, None, 1, "Song", 3, 6]]
        mapping = infer_structure(headers, samples, game)

        width = max(len(headers), len(samples[0]))
        assert mapping.out_of_bounds(width) == []
        assert mapping.song_no == 2
        assert mapping.difficulties["HARD"] == UNSET
        assert mapping.difficulties["EXPERT"] == UNSET


# =============================================================================
# Manual correction
# =============================================================================


class TestUpdateColumnMapping:
    """Tests for update_column_mapping."""

    @pytest.fixture
    def structure(self, game):
        mapping = infer_structure(["No", "Title", "Easy"], [], game)
        return SpreadsheetStructure(game_id=game.id, sheet_name="Songs", column_mapping=mapping)

    def test_update_scalar(self, structure):
        updated = update_column_mapping(structure, "name", None, 5)
        assert updated.column_mapping.name == 5
        assert structure.column_mapping.name == 1

    def test_update_difficulty(self, structure):
        updated = update_column_mapping(structure, "combos", "EASY", 3)
        assert updated.column_mapping.combos["EASY"] == 3

    def test_update_info(self, structure):
        updated = update_column_mapping(structure, "info", "artist", 4)
        assert updated.column_mapping.info.artist == 4

    def test_clear_field(self, structure):
        updated = update_column_mapping(structure, "song_no", None, UNSET)
        assert updated.column_mapping.song_no == UNSET

    @pytest.mark.parametrize(
        "field,sub_field",
        [("bogus", None), ("info", "bogus"), ("name", "EASY"), ("difficulties", None)],
    )
    def test_unknown_field_raises(self, structure, field, sub_field):
        with pytest.raises(ValueError, match="Unknown mapping field"):
            update_column_mapping(structure, field, sub_field, 1)

    def test_invalid_index_raises(self, structure):
        with pytest.raises(ValueError, match="Invalid column index"):
            update_column_mapping(structure, "name", None, -5)
