"""Spreadsheet package: row models, Excel reading/validation and export."""

from ci_maker.sheets.models import DateRow, FieldRecord
from ci_maker.sheets.reader import (
    ensure_valid,
    read_date_rows,
    read_letter_records,
    validate_date_rows,
    validate_letter_records,
)
from ci_maker.sheets.writer import write_date_table

__all__ = [
    "DateRow",
    "FieldRecord",
    "ensure_valid",
    "read_date_rows",
    "read_letter_records",
    "validate_date_rows",
    "validate_letter_records",
    "write_date_table",
]
