"""Tests for spreadsheet analysis and parsing."""

import pytest

from songsheet.config.schema import ImportConfig
from songsheet.models.structure import UNSET
from songsheet.services.import_service import (
    SpreadsheetStructureError,
    UnsupportedFileTypeError,
    analyze_spreadsheet,
    parse_spreadsheet,
)

ROWS = [
    ["No", "Title", "Artist", "Easy", "Easy Combo", "Normal", "Hard", "Expert"],
    [1, "Song A", "Unit A", 5, 120, 10, 15, 22],
    [2, "Song B", "Unit B", 6, 140, 11, 16, 24],
    [None, None, None, None, None, None, None, None],
    [3, None, "Unit C", 4, 100, 9, 14, 20],
]


class TestAnalyze:
    """Tests for analyze_spreadsheet."""

    def test_analyze_xlsx(self, game, make_xlsx) -> None:
        result = analyze_spreadsheet(make_xlsx(ROWS), "songs.xlsx", game)
        structure = result.structure
        mapping = structure.column_mapping

        assert structure.game_id == "testgame"
        assert structure.sheet_name == "Songs"
        assert structure.header_row == 0
        assert structure.data_start_row == 1
        assert mapping.song_no == 0
        assert mapping.name == 1
        assert mapping.info.artist == 2
        assert mapping.difficulties == {"EASY": 3, "NORMAL": 5, "HARD": 6, "EXPERT": 7}
        assert mapping.combos["EASY"] == 4
        assert mapping.combos["NORMAL"] == UNSET
        assert result.headers[:2] == ["No", "Title"]
        assert result.sheet_names == ["Songs"]
        assert result.preview_rows[0][:2] == [1, "Song A"]

    def test_analyze_csv(self, game, make_csv) -> None:
        result = analyze_spreadsheet(make_csv(ROWS), "songs.csv", game)
        assert result.structure.sheet_name == "csv"
        assert result.structure.column_mapping.name == 1

    def test_analyze_with_banner(self, game, make_xlsx) -> None:
        """Test header and data rows below a title banner."""
        rows = [["Song list"], [None]] + ROWS
        result = analyze_spreadsheet(make_xlsx(rows), "songs.xlsx", game)
        assert result.structure.header_row == 2
        assert result.structure.data_start_row == 3

    def test_analyze_preview_limit(self, game, make_xlsx) -> None:
        options = ImportConfig(preview_rows=2)
        result = analyze_spreadsheet(make_xlsx(ROWS), "songs.xlsx", game, options=options)
        assert len(result.preview_rows) == 2

    def test_unsupported_extension(self, game) -> None:
        with pytest.raises(UnsupportedFileTypeError):
            analyze_spreadsheet(b"data", "songs.pdf", game)

    def test_empty_file(self, game) -> None:
        with pytest.raises(SpreadsheetStructureError):
            analyze_spreadsheet(b"", "songs.csv", game)


class TestParse:
    """Tests for parse_spreadsheet."""

    def test_parse_skips_blank_rows(self, game, make_xlsx) -> None:
        """Test blank rows are dropped before numbering."""
        content = make_xlsx(ROWS)
        structure = analyze_spreadsheet(content, "songs.xlsx", game).structure
        songs = parse_spreadsheet(content, "songs.xlsx", structure, game)

        assert [s.song_no for s in songs] == [1, 2, 3]
        assert songs[2].name == "Untitled (row 3)"
        assert songs[0].info.artist == "Unit A"
        assert songs[1].difficulties["EXPERT"].level == 24
        assert songs[0].difficulties["EASY"].combo == 120

    def test_parse_csv_strings(self, game, make_csv) -> None:
        content = make_csv(ROWS)
        structure = analyze_spreadsheet(content, "songs.csv", game).structure
        songs = parse_spreadsheet(content, "songs.csv", structure, game)

        assert songs[0].song_no == 1
        assert songs[0].difficulties["NORMAL"].level == 10

    def test_parse_strict_titles(self, game, make_xlsx) -> None:
        content = make_xlsx(ROWS)
        structure = analyze_spreadsheet(content, "songs.xlsx", game).structure
        with pytest.raises(ValueError, match="Row 3"):
            parse_spreadsheet(content, "songs.xlsx", structure, game, strict_titles=True)

    def test_parse_header_beyond_sheet(self, game, make_xlsx) -> None:
        content = make_xlsx(ROWS)
        structure = analyze_spreadsheet(content, "songs.xlsx", game).structure
        structure.header_row = 50
        with pytest.raises(SpreadsheetStructureError, match="beyond"):
            parse_spreadsheet(content, "songs.xlsx", structure, game)

    def test_parse_xlsx_with_csv_structure(self, game, make_csv, make_xlsx) -> None:
        """Test a structure inferred from a CSV export reads the first worksheet."""
        structure = analyze_spreadsheet(make_csv(ROWS), "songs.csv", game).structure
        songs = parse_spreadsheet(make_xlsx(ROWS), "songs.xlsx", structure, game)
        assert len(songs) == 3
