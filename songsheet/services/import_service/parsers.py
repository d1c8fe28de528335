"""File parsing functions for CSV and XLSX song sheets.

Both readers return a rectangular grid of raw cell values: XLSX cells keep
their native types (numbers, dates, times), CSV cells are strings.
"""

import csv
import io
import logging
import zipfile
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .errors import SpreadsheetStructureError

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROWS = 10000

CSV_SHEET_NAME = "csv"

Grid = list[list[Any]]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def is_blank_row(row: list[Any]) -> bool:
    return all(_is_blank(cell) for cell in row)


def _rectangular(rows: Grid) -> Grid:
    """Drop trailing blank rows and pad every row to the same width."""
    while rows and is_blank_row(rows[-1]):
        rows.pop()
    width = max((len(row) for row in rows), default=0)
    return [row + [None] * (width - len(row)) for row in rows]


def parse_csv(file_content: bytes, max_rows: int = DEFAULT_MAX_ROWS) -> tuple[str, Grid]:
    """Parse CSV file content into a grid.

    Tries UTF-8 (with or without BOM) first, then CP932 for spreadsheets
    exported by Japanese Excel, then Latin-1.

    Args:
        file_content: Raw CSV file bytes.
        max_rows: Maximum number of rows to read.

    Returns:
        Tuple of ("csv", grid).

    Raises:
        SpreadsheetStructureError: If the CSV has no rows.
    """
    text = None
    for encoding in ("utf-8-sig", "cp932", "latin-1"):
        try:
            text = file_content.decode(encoding)
            break
        except UnicodeDecodeError:
            continue

    if text is None:
        raise SpreadsheetStructureError("CSV file could not be decoded")

    rows: Grid = []
    try:
        for i, row in enumerate(csv.reader(io.StringIO(text))):
            if i >= max_rows:
                logger.warning("CSV truncated at %d rows", max_rows)
                break
            rows.append([cell.strip() for cell in row])
    except csv.Error as e:
        raise SpreadsheetStructureError(f"Malformed CSV: {e}") from e

    grid = _rectangular(rows)
    if not grid:
        raise SpreadsheetStructureError("CSV file is empty")
    return CSV_SHEET_NAME, grid


def _open_workbook(file_content: bytes):
    try:
        return load_workbook(filename=io.BytesIO(file_content), read_only=True, data_only=True)
    except (zipfile.BadZipFile, InvalidFileException, KeyError) as e:
        raise SpreadsheetStructureError(f"Not a valid XLSX workbook: {e}") from e


def list_sheet_names(file_content: bytes) -> list[str]:
    """Return the worksheet names of an XLSX workbook."""
    wb = _open_workbook(file_content)
    try:
        return list(wb.sheetnames)
    finally:
        wb.close()


def parse_xlsx(
    file_content: bytes,
    sheet_name: str | None = None,
    max_rows: int = DEFAULT_MAX_ROWS,
) -> tuple[str, Grid]:
    """Parse one worksheet of an XLSX workbook into a grid.

    Uses openpyxl read_only mode and iterates rows lazily. Cell values keep
    the types openpyxl reports (cached formula results, not formulas).

    Args:
        file_content: Raw XLSX file bytes.
        sheet_name: Worksheet to read; the first sheet when omitted.
        max_rows: Maximum number of rows to read.

    Returns:
        Tuple of (sheet name, grid).

    Raises:
        SpreadsheetStructureError: If the sheet is missing or empty.
    """
    wb = _open_workbook(file_content)
    try:
        if not wb.sheetnames:
            raise SpreadsheetStructureError("XLSX file has no worksheets")
        if sheet_name is None:
            sheet_name = wb.sheetnames[0]
        elif sheet_name not in wb.sheetnames:
            raise SpreadsheetStructureError(f"Worksheet not found: {sheet_name}")

        ws = wb[sheet_name]
        rows: Grid = []
        for i, row_values in enumerate(ws.iter_rows(values_only=True)):
            if i >= max_rows:
                logger.warning("Sheet %s truncated at %d rows", sheet_name, max_rows)
                break
            rows.append(list(row_values))
    finally:
        wb.close()

    grid = _rectangular(rows)
    if not grid:
        raise SpreadsheetStructureError(f"Worksheet {sheet_name} is empty")
    return sheet_name, grid


def _non_empty_count(row: list[Any]) -> int:
    return sum(1 for cell in row if not _is_blank(cell))


def detect_header_row(grid: Grid, search_rows: int = 10) -> int:
    """Return the header row index within the first ``search_rows`` rows.

    The first row with at least two non-empty cells wins, so a title banner
    above the table is skipped. Falls back to the first row with content.
    """
    window = grid[:search_rows]
    candidates = [i for i, row in enumerate(window) if not is_blank_row(row)]
    if not candidates:
        raise SpreadsheetStructureError("No header row found")
    for index in candidates:
        if _non_empty_count(window[index]) >= 2:
            return index
    return candidates[0]


def detect_data_start_row(grid: Grid, header_row: int, search_rows: int = 10) -> int:
    """Return the first row after the header with at least two non-empty cells.

    Falls back to the row right after the header.
    """
    end = min(len(grid), header_row + 1 + search_rows)
    for index in range(header_row + 1, end):
        if _non_empty_count(grid[index]) >= 2:
            return index
    return header_row + 1
