"""Error types shared across richcells.

``RichCellsError`` carries a machine-readable ``code`` and a ``recoverable``
flag so that operation entry points can report failures as structured results
instead of raising into the host.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    SOURCE_UNAVAILABLE = "SOURCE_UNAVAILABLE"
    STYLED_TEXT_INVALID = "STYLED_TEXT_INVALID"


class RichCellsError(Exception):
    def __init__(self, code: ErrorCode, message: str, *, recoverable: bool = False) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class StyledTextError(RichCellsError):
    """Raised when a StyledText adapter returns data that cannot be rendered."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorCode.STYLED_TEXT_INVALID, message, recoverable=True)


class DataSourceError(RichCellsError):
    """Raised by data sources that cannot supply rows."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorCode.SOURCE_UNAVAILABLE, message, recoverable=True)
