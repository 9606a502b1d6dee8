"""Export the advanced date table as a new workbook."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from openpyxl import Workbook
from openpyxl.styles import Font

from ci_maker.exceptions import SpreadsheetError
from ci_maker.renderer.packaging import format_ci_number
from ci_maker.sheets.models import DateRow
from ci_maker.sheets.reader import COL_DATA1, COL_DATA2, COL_NOME_COMPLETO, COL_NUMERO

logger = logging.getLogger(__name__)

SHEET_TITLE = "Datas Atualizadas"

_COLUMN_WIDTHS = {"A": 8, "B": 35, "C": 10, "D": 10}


def write_date_table(rows: Sequence[DateRow], output_path: Path) -> Path:
    """Write rows with a sequential NUMERO column ("01", "02", ...)."""
    output_path = Path(output_path).with_suffix(".xlsx")

    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE
    ws.append([COL_NUMERO, COL_NOME_COMPLETO, COL_DATA1, COL_DATA2])
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for i, row in enumerate(rows, start=1):
        ws.append([format_ci_number(i), row.nome_completo, row.data1, row.data2])

    for letter, width in _COLUMN_WIDTHS.items():
        ws.column_dimensions[letter].width = width

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)
    except OSError as e:
        raise SpreadsheetError(f"Erro ao salvar planilha: {e}") from e

    logger.info("Date table saved: %s (%d rows)", output_path, len(rows))
    return output_path
