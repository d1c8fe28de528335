"""Import service package for inferring spreadsheet structure and extracting songs."""

from .constants import (
    ALLOWED_EXTENSIONS,
    FIELD_KEYWORDS,
    PLACEHOLDER_TITLE,
    TIER_SYNONYMS,
)
from .converters import (
    coerce_bpm,
    coerce_combo,
    coerce_date,
    coerce_level,
    coerce_song_number,
    format_duration,
    is_placeholder_title,
    is_youtube_url,
    normalize_video_url,
    split_tags,
)
from .errors import MissingTitleError, SpreadsheetStructureError, UnsupportedFileTypeError
from .extractor import extract_rows, row_to_song
from .inference import correct_offset, infer_structure, resolve_difficulty_candidates
from .keywords import KeywordTables
from .mapping import update_column_mapping
from .matching import normalize_header
from .parsers import (
    detect_data_start_row,
    detect_header_row,
    list_sheet_names,
    parse_csv,
    parse_xlsx,
)
from .processor import AnalysisResult, analyze_spreadsheet, parse_spreadsheet

__all__ = [
    # Constants
    "ALLOWED_EXTENSIONS",
    "FIELD_KEYWORDS",
    "PLACEHOLDER_TITLE",
    "TIER_SYNONYMS",
    # Errors
    "MissingTitleError",
    "SpreadsheetStructureError",
    "UnsupportedFileTypeError",
    # Matching
    "KeywordTables",
    "normalize_header",
    # Inference
    "correct_offset",
    "infer_structure",
    "resolve_difficulty_candidates",
    "update_column_mapping",
    # Converters
    "coerce_bpm",
    "coerce_combo",
    "coerce_date",
    "coerce_level",
    "coerce_song_number",
    "format_duration",
    "is_placeholder_title",
    "is_youtube_url",
    "normalize_video_url",
    "split_tags",
    # Extraction
    "extract_rows",
    "row_to_song",
    # Parsers
    "detect_data_start_row",
    "detect_header_row",
    "list_sheet_names",
    "parse_csv",
    "parse_xlsx",
    # Processor
    "AnalysisResult",
    "analyze_spreadsheet",
    "parse_spreadsheet",
]
