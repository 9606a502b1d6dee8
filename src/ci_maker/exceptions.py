"""Custom exception hierarchy for ci_maker."""

from __future__ import annotations


class CIMakerError(Exception):
    """Base exception for all ci_maker errors."""


class ValidationError(CIMakerError):
    """Required spreadsheet fields are missing or empty.

    Carries one message per row/field problem so the UI can list them all.
    """

    def __init__(self, messages: list[str]) -> None:
        self.messages = list(messages)
        super().__init__("\n".join(self.messages))


class SpreadsheetError(CIMakerError):
    """Errors reading or writing an Excel workbook."""


class RenderError(CIMakerError):
    """Headless browser failed to rasterize a letter."""


class InvalidMonthError(CIMakerError, ValueError):
    """A month outside 1..12 was passed to a calendar calculation."""
