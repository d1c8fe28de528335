"""Spreadsheet analysis and parsing for song imports."""

import logging
from dataclasses import dataclass, field
from typing import Any

from songsheet.config import settings
from songsheet.config.schema import ImportConfig
from songsheet.models.game import GameSchema
from songsheet.models.song import SongRecord
from songsheet.models.structure import SpreadsheetStructure

from .constants import ALLOWED_EXTENSIONS
from .converters import cell_text
from .errors import SpreadsheetStructureError, UnsupportedFileTypeError
from .extractor import extract_rows
from .inference import infer_structure
from .keywords import KeywordTables
from .parsers import (
    CSV_SHEET_NAME,
    Grid,
    detect_data_start_row,
    detect_header_row,
    is_blank_row,
    list_sheet_names,
    parse_csv,
    parse_xlsx,
)

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Outcome of analysing an uploaded spreadsheet."""

    structure: SpreadsheetStructure
    headers: list[str]
    preview_rows: list[list[Any]]
    sheet_names: list[str] = field(default_factory=list)


def get_file_extension(filename: str | None) -> str:
    """Return the lowercase extension of a supported upload.

    Raises:
        UnsupportedFileTypeError: If the extension is not csv or xlsx.
    """
    ext = filename.rsplit(".", 1)[-1].lower() if filename and "." in filename else ""
    if ext not in ALLOWED_EXTENSIONS:
        raise UnsupportedFileTypeError(
            f"Unsupported file type: .{ext or '?'}. Allowed: .csv, .xlsx"
        )
    return ext


def read_grid(
    file_content: bytes,
    filename: str,
    sheet_name: str | None = None,
    max_rows: int | None = None,
) -> tuple[str, Grid, list[str]]:
    """Read an upload into a grid.

    Returns:
        Tuple of (sheet name, grid, all sheet names).
    """
    if not file_content:
        raise SpreadsheetStructureError("File is empty")
    max_rows = max_rows or settings.import_options.max_rows
    ext = get_file_extension(filename)
    if ext == "csv":
        name, grid = parse_csv(file_content, max_rows=max_rows)
        return name, grid, [name]
    name, grid = parse_xlsx(file_content, sheet_name=sheet_name, max_rows=max_rows)
    return name, grid, list_sheet_names(file_content)


def analyze_spreadsheet(
    file_content: bytes,
    filename: str,
    game: GameSchema,
    sheet_name: str | None = None,
    options: ImportConfig | None = None,
    keywords: KeywordTables | None = None,
) -> AnalysisResult:
    """Infer the structure of an uploaded spreadsheet.

    Args:
        file_content: Raw file bytes.
        filename: Original filename, used to pick the reader.
        game: Game whose difficulties should be located.
        sheet_name: XLSX worksheet; the first sheet when omitted.
        options: Import tuning; the configured ``[import]`` section by default.
        keywords: Keyword tables; built from the ``[matching]`` section by default.

    Returns:
        The inferred structure with headers and a few preview rows.

    Raises:
        UnsupportedFileTypeError: If the file is not CSV or XLSX.
        SpreadsheetStructureError: If no usable table is found.
    """
    options = options or settings.import_options
    keywords = keywords or KeywordTables.from_matching_config(settings.matching)

    name, grid, sheet_names = read_grid(file_content, filename, sheet_name, options.max_rows)
    header_row = detect_header_row(grid, options.header_search_rows)
    data_start_row = detect_data_start_row(grid, header_row, options.header_search_rows)

    samples = [
        row for row in grid[data_start_row:data_start_row + options.sample_rows]
        if not is_blank_row(row)
    ]
    mapping = infer_structure(
        grid[header_row],
        samples,
        game,
        keywords=keywords,
        offset_window=options.offset_window,
    )

    structure = SpreadsheetStructure(
        game_id=game.id,
        sheet_name=name,
        header_row=header_row,
        data_start_row=data_start_row,
        column_mapping=mapping,
    )
    logger.info(
        "Analyzed %s (%s) for %s: header row %d, data from row %d",
        filename, name, game.id, header_row, data_start_row,
    )
    return AnalysisResult(
        structure=structure,
        headers=[cell_text(cell) for cell in grid[header_row]],
        preview_rows=grid[data_start_row:data_start_row + options.preview_rows],
        sheet_names=sheet_names,
    )


def parse_spreadsheet(
    file_content: bytes,
    filename: str,
    structure: SpreadsheetStructure,
    game: GameSchema,
    strict_titles: bool = False,
    options: ImportConfig | None = None,
) -> list[SongRecord]:
    """Extract song records from a spreadsheet using a known structure.

    Blank body rows are skipped before rows are numbered, so placeholder
    titles and song number fallbacks count only rows with content.

    Raises:
        UnsupportedFileTypeError: If the file is not CSV or XLSX.
        SpreadsheetStructureError: If the sheet is missing or too short.
        MissingTitleError: If ``strict_titles`` is set and a title is empty.
    """
    options = options or settings.import_options
    ext = get_file_extension(filename)
    # A structure inferred from a CSV export reads the first worksheet
    sheet_name = structure.sheet_name if ext == "xlsx" and structure.sheet_name != CSV_SHEET_NAME else None

    _, grid, _ = read_grid(file_content, filename, sheet_name, options.max_rows)
    if structure.header_row >= len(grid):
        raise SpreadsheetStructureError(
            f"Header row {structure.header_row} is beyond the end of the sheet"
        )

    width = len(grid[0])
    outside = structure.column_mapping.out_of_bounds(width)
    if outside:
        logger.warning("Mapped columns outside the sheet are ignored: %s", ", ".join(outside))

    body = grid[structure.data_start_row:]
    rows = [row for row in body if not is_blank_row(row)]
    skipped = len(body) - len(rows)
    if skipped:
        logger.info("Skipped %d blank rows", skipped)

    return extract_rows(
        rows,
        structure.column_mapping,
        game,
        strict_titles=strict_titles,
        min_serial_year=options.min_serial_year,
    )
