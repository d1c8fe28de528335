"""Exceptions raised by the spreadsheet import service."""


class SpreadsheetStructureError(ValueError):
    """Raised when a sheet has no usable structure (no sheet, no header row)."""

    pass


class MissingTitleError(ValueError):
    """Raised when a title is required but a row's title cell is empty."""

    def __init__(self, row_position: int) -> None:
        self.row_position = row_position
        super().__init__(f"Row {row_position}: song title is empty")


class UnsupportedFileTypeError(ValueError):
    """Raised for uploads that are neither CSV nor XLSX."""

    pass
