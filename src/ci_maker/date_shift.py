"""Advance ``dd/mm`` dates by one calendar month.

The day is clamped to the length of the destination month, so 31/01
becomes 28/02 (or 29/02 in a leap year).  Dates carry no year: the caller
supplies a reference year, used only to decide February's length.
Strings that don't parse as ``dd/mm`` are returned untouched.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ci_maker.exceptions import InvalidMonthError
from ci_maker.sheets.models import DateRow

logger = logging.getLogger(__name__)


def is_leap_year(year: int) -> bool:
    return calendar.isleap(year)


def last_day_of_month(month: int, year: int) -> int:
    """Return the number of days in ``month`` of ``year`` (Gregorian)."""
    if not 1 <= month <= 12:
        raise InvalidMonthError(f"Month must be 1..12, got {month!r}")
    return calendar.monthrange(year, month)[1]


def clamp_day(day: int, month: int, year: int) -> int:
    """Limit ``day`` to the last valid day of ``month``."""
    return min(day, last_day_of_month(month, year))


@dataclass(frozen=True)
class DateRecord:
    """A parsed ``dd/mm`` pair."""
    day: int
    month: int
    label: str = ""

    @classmethod
    def parse(cls, text: str, label: str = "") -> Optional[DateRecord]:
        """Parse ``"dd/mm"``; None if it isn't two integers or the month is out of range."""
        parts = text.strip().split("/")
        if len(parts) != 2:
            return None
        try:
            day, month = (int(p.strip()) for p in parts)
        except ValueError:
            return None
        # Out-of-range values such as "10/13" or "00/05" pass through
        # unchanged rather than rolling over into another month.
        if day < 1 or not 1 <= month <= 12:
            return None
        return cls(day=day, month=month, label=label)

    def __str__(self) -> str:
        return f"{self.day:02d}/{self.month:02d}"


def shift_record(record: DateRecord, reference_year: int) -> DateRecord:
    """Return a new record one month after ``record``.

    On December -> January the year used for clamping rolls over too.
    """
    month = record.month + 1
    year = reference_year
    if month > 12:
        month = 1
        year += 1
    return DateRecord(
        day=clamp_day(record.day, month, year),
        month=month,
        label=record.label,
    )


def add_one_month(date_str: str, reference_year: int | None = None) -> str:
    """Advance a ``"dd/mm"`` string by one month.

    Malformed input comes back unchanged.  ``reference_year`` defaults to
    the current year.
    """
    if reference_year is None:
        reference_year = date.today().year
    record = DateRecord.parse(date_str)
    if record is None:
        logger.debug("Leaving unparseable date unchanged: %r", date_str)
        return date_str
    return str(shift_record(record, reference_year))


def process_date_table(
    rows: Iterable[DateRow], reference_year: int | None = None,
) -> list[DateRow]:
    """Advance DATA1 and DATA2 of every row by one month.

    Rows are independent; order, count and names are preserved.
    """
    if reference_year is None:
        reference_year = date.today().year
    return [
        DateRow(
            nome_completo=row.nome_completo,
            data1=add_one_month(row.data1, reference_year),
            data2=add_one_month(row.data2, reference_year),
        )
        for row in rows
    ]
