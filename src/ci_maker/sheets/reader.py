"""Read and validate the letter and date spreadsheets (first worksheet).

The first row holds the column names; lookup is case-insensitive.
Cells are read as text the way a user sees them: dates as ``dd/mm``,
whole numbers without a trailing ``.0``.
"""

from __future__ import annotations

import logging
import zipfile
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ci_maker.exceptions import SpreadsheetError, ValidationError
from ci_maker.sheets.models import DateRow, FieldRecord

logger = logging.getLogger(__name__)

COL_NUMERO = "NUMERO"
COL_NOME_COMPLETO = "NOME COMPLETO"
COL_NOME = "NOME"
COL_DATA1 = "DATA1"
COL_DATA2 = "DATA2"

EMPTY_TABLE_MESSAGE = "O arquivo Excel está vazio ou não contém dados válidos."


# ── Cell helpers ──────────────────────────────────────────────────────

def cell_text(value: object) -> str:
    """Convert a cell value to the text shown in the spreadsheet."""
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.strftime("%d/%m")
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _normalize_header(value: object) -> str:
    return " ".join(cell_text(value).split()).upper()


def _iter_sheet_rows(path: Path) -> Iterator[tuple]:
    """Yield raw value tuples from the first worksheet."""
    path = Path(path)
    try:
        wb = load_workbook(path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise SpreadsheetError(f"Erro ao ler arquivo Excel: {e}") from e

    try:
        if not wb.worksheets:
            return
        yield from wb.worksheets[0].iter_rows(values_only=True)
    finally:
        wb.close()


def _read_table(
    path: Path, columns: dict[str, Sequence[str]],
) -> list[dict[str, str]]:
    """Read rows as dicts keyed by field name.

    ``columns`` maps a field name to the header names accepted for it,
    in order of preference.
    """
    rows = _iter_sheet_rows(path)
    try:
        return _rows_to_table(rows, columns, Path(path).name)
    finally:
        rows.close()


def _rows_to_table(
    rows: Iterator[tuple], columns: dict[str, Sequence[str]], source: str,
) -> list[dict[str, str]]:
    header = next(rows, None)
    if header is None:
        return []

    positions: dict[str, int] = {}
    for i, h in enumerate(header):
        if h is not None:
            positions.setdefault(_normalize_header(h), i)
    index: dict[str, int] = {}
    missing = []
    for field_name, names in columns.items():
        for name in names:
            if name in positions:
                index[field_name] = positions[name]
                break
        else:
            missing.append(names[0])
    if missing:
        raise SpreadsheetError(
            "Colunas ausentes na planilha: " + ", ".join(missing)
        )

    table: list[dict[str, str]] = []
    for raw in rows:
        values = {
            field_name: cell_text(raw[i]) if i < len(raw) else ""
            for field_name, i in index.items()
        }
        if not any(values.values()):
            continue
        table.append(values)

    logger.info("Read %d rows from %s", len(table), source)
    return table


# ── Readers ───────────────────────────────────────────────────────────

def read_letter_records(path: Path) -> list[FieldRecord]:
    """Read NUMERO / NOME COMPLETO / DATA1 / DATA2 rows."""
    table = _read_table(path, {
        "numero": (COL_NUMERO,),
        "nome_completo": (COL_NOME_COMPLETO,),
        "data1": (COL_DATA1,),
        "data2": (COL_DATA2,),
    })
    return [FieldRecord(**row) for row in table]


def read_date_rows(path: Path) -> list[DateRow]:
    """Read NOME COMPLETO (or NOME) / DATA1 / DATA2 rows."""
    table = _read_table(path, {
        "nome_completo": (COL_NOME_COMPLETO, COL_NOME),
        "data1": (COL_DATA1,),
        "data2": (COL_DATA2,),
    })
    return [DateRow(**row) for row in table]


# ── Validation ────────────────────────────────────────────────────────

def _validate(rows: Sequence, fields: Iterable[tuple[str, str]]) -> list[str]:
    if not rows:
        return [EMPTY_TABLE_MESSAGE]
    fields = list(fields)
    errors = []
    for i, row in enumerate(rows):
        for attr, column in fields:
            if not getattr(row, attr):
                errors.append(f"Linha {i + 2}: Campo {column} está vazio.")
    return errors


def validate_letter_records(records: Sequence[FieldRecord]) -> list[str]:
    """Return one message per empty required field; empty list if valid."""
    return _validate(records, (
        ("numero", COL_NUMERO),
        ("nome_completo", COL_NOME_COMPLETO),
        ("data1", COL_DATA1),
        ("data2", COL_DATA2),
    ))


def validate_date_rows(rows: Sequence[DateRow]) -> list[str]:
    """Return one message per empty required field; empty list if valid."""
    return _validate(rows, (
        ("nome_completo", COL_NOME_COMPLETO),
        ("data1", COL_DATA1),
        ("data2", COL_DATA2),
    ))


def ensure_valid(messages: list[str]) -> None:
    """Raise ValidationError if ``messages`` is non-empty."""
    if messages:
        raise ValidationError(messages)
