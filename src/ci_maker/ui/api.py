"""Python-JS bridge for the CI maker UI.

All public methods are exposed to JavaScript via pywebview's js_api.
Every method returns a dict with at least {"success": bool}.
"""

from __future__ import annotations

import json
import logging
import platform
import subprocess
from datetime import date
from pathlib import Path
from typing import Optional

import webview

from ci_maker.config import TemplateStore, logo_path
from ci_maker.date_shift import process_date_table
from ci_maker.exceptions import RenderError, SpreadsheetError, ValidationError
from ci_maker.renderer.letter_text import PLACEHOLDERS, find_placeholders
from ci_maker.renderer.packaging import LetterImage, build_zip, png_data_uri
from ci_maker.renderer.static_text import (
    DATES_FILE_NAME,
    DEFAULT_TEMPLATE,
    ZIP_FILE_NAME,
)
from ci_maker.sheets import (
    DateRow,
    FieldRecord,
    ensure_valid,
    read_date_rows,
    read_letter_records,
    validate_date_rows,
    validate_letter_records,
    write_date_table,
)

logger = logging.getLogger(__name__)

_DATE_FIELDS = ("data1", "data2")


class LetterAPI:
    """Bridge between the pywebview JS frontend and the Python backend."""

    def __init__(self, store: Optional[TemplateStore] = None) -> None:
        self._store = store if store is not None else TemplateStore()
        self._window: Optional[webview.Window] = None
        self._records: list[FieldRecord] = []
        self._images: list[LetterImage] = []
        self._date_rows: list[DateRow] = []
        self._processed_rows: list[DateRow] = []

    def set_window(self, window: webview.Window) -> None:
        self._window = window

    @staticmethod
    def _classify_error(error: Exception) -> str:
        """Classify an exception for the UI error_type field."""
        if isinstance(error, ValidationError):
            return "validation"
        if isinstance(error, SpreadsheetError):
            return "spreadsheet"
        if isinstance(error, RenderError):
            return "render"
        if isinstance(error, (ValueError, TypeError)):
            return "validation"
        return "internal"

    def _failure(self, error: Exception) -> dict:
        result = {"success": False, "error": str(error),
                  "error_type": self._classify_error(error)}
        if isinstance(error, ValidationError):
            result["errors"] = error.messages
        return result

    def _push_progress(self, current: int, total: int) -> None:
        """Push progress update to the JS frontend."""
        if self._window:
            payload = json.dumps({"current": current, "total": total})
            self._window.evaluate_js(f"updateProgress({payload})")

    # ── Template ──────────────────────────────────────────────────────

    def get_template(self) -> dict:
        """Return the saved template, or the built-in default."""
        saved = self._store.load()
        return {
            "success": True,
            "template": saved if saved is not None else DEFAULT_TEMPLATE,
            "is_default": saved is None,
            "placeholders": list(PLACEHOLDERS),
        }

    def save_template(self, template: str) -> dict:
        """Persist the template so it is restored on next launch."""
        try:
            self._store.save(template)
            return {"success": True}
        except OSError as e:
            logger.exception("Could not save template")
            return {"success": False, "error": str(e), "error_type": "internal"}

    def reset_template(self) -> dict:
        """Forget the saved template and return the default."""
        try:
            self._store.clear()
        except OSError as e:
            logger.exception("Could not clear saved template")
            return {"success": False, "error": str(e), "error_type": "internal"}
        return {"success": True, "template": DEFAULT_TEMPLATE}

    # ── Letters ───────────────────────────────────────────────────────

    def load_letter_spreadsheet(self, path: str) -> dict:
        """Read and validate the letter spreadsheet."""
        try:
            records = read_letter_records(Path(path))
            ensure_valid(validate_letter_records(records))
        except (SpreadsheetError, ValidationError) as e:
            self._records = []
            return self._failure(e)

        self._records = records
        self._images = []
        return {"success": True, "count": len(records),
                "file_name": Path(path).name}

    def generate_letters(self, template: str, output_dir: str = "") -> dict:
        """Render one image per loaded row.

        Args:
            template: Template text from the editor.
            output_dir: If set, PNGs are also written to this folder.
        """
        from ci_maker.renderer import generate_letter_images

        if not template or not template.strip() or not self._records:
            return {"success": False,
                    "error": "Por favor, preencha o modelo e carregue o arquivo Excel.",
                    "error_type": "validation"}

        warnings = []
        if not find_placeholders(template):
            warnings.append("O modelo não contém nenhum placeholder.")

        try:
            result = generate_letter_images(
                template,
                self._records,
                logo_path=logo_path(),
                output_dir=Path(output_dir) if output_dir else None,
                on_progress=self._push_progress,
            )
        except Exception as e:
            logger.exception("Letter generation error")
            return self._failure(e)

        self._images = result.images
        return {
            "success": result.success,
            "count": len(result.images),
            "names": [img.name for img in result.images],
            "images": [
                {"name": img.name, "data_uri": png_data_uri(img.png)}
                for img in result.images
            ],
            "errors": result.errors,
            "warnings": warnings,
        }

    def export_zip(self, output_dir: str) -> dict:
        """Package the generated images into cis-geradas.zip."""
        if not self._images:
            return {"success": False, "error": "Nenhuma CI gerada.",
                    "error_type": "validation"}
        try:
            path = build_zip(self._images, Path(output_dir or ".") / ZIP_FILE_NAME)
            return {"success": True, "path": str(path)}
        except OSError as e:
            logger.exception("Could not write ZIP")
            return {"success": False, "error": str(e), "error_type": "internal"}

    # ── Dates ─────────────────────────────────────────────────────────

    @staticmethod
    def _rows_to_dicts(rows: list[DateRow]) -> list[dict]:
        return [{"nome_completo": r.nome_completo, "data1": r.data1, "data2": r.data2}
                for r in rows]

    def load_date_spreadsheet(self, path: str) -> dict:
        """Read and validate the NOME COMPLETO / DATA1 / DATA2 spreadsheet."""
        self._processed_rows = []
        try:
            rows = read_date_rows(Path(path))
            ensure_valid(validate_date_rows(rows))
        except (SpreadsheetError, ValidationError) as e:
            self._date_rows = []
            return self._failure(e)

        self._date_rows = rows
        return {"success": True, "count": len(rows),
                "file_name": Path(path).name,
                "rows": self._rows_to_dicts(rows)}

    def process_dates(self, reference_year: int | str | None = None) -> dict:
        """Advance DATA1/DATA2 of every loaded row by one month."""
        if not self._date_rows:
            return {"success": False,
                    "error": "Por favor, carregue um arquivo Excel primeiro.",
                    "error_type": "validation"}
        try:
            year = int(reference_year) if reference_year else date.today().year
        except (TypeError, ValueError):
            return {"success": False,
                    "error": f"Ano de referência inválido: {reference_year}",
                    "error_type": "validation"}

        self._processed_rows = process_date_table(self._date_rows, year)
        return {"success": True, "reference_year": year,
                "original": self._rows_to_dicts(self._date_rows),
                "rows": self._rows_to_dicts(self._processed_rows)}

    def update_processed_date(self, index: int, field: str, value: str) -> dict:
        """Manually correct one processed date before export."""
        if field not in _DATE_FIELDS:
            return {"success": False, "error": f"Campo inválido: {field}",
                    "error_type": "validation"}
        if not 0 <= index < len(self._processed_rows):
            return {"success": False, "error": f"Linha inválida: {index}",
                    "error_type": "validation"}

        row = self._processed_rows[index]
        values = {"nome_completo": row.nome_completo, "data1": row.data1,
                  "data2": row.data2}
        values[field] = (value or "").strip()
        self._processed_rows[index] = DateRow(**values)
        return {"success": True, "row": values}

    def export_dates(self, path: str = "") -> dict:
        """Write the processed table to an .xlsx file."""
        if not self._processed_rows:
            return {"success": False, "error": "Nenhuma data processada.",
                    "error_type": "validation"}
        try:
            target = Path(path) if path else Path(DATES_FILE_NAME)
            if target.is_dir():
                target = target / DATES_FILE_NAME
            saved = write_date_table(self._processed_rows, target)
            return {"success": True, "path": str(saved)}
        except SpreadsheetError as e:
            logger.exception("Could not export dates")
            return self._failure(e)

    def clear_dates(self) -> dict:
        self._date_rows = []
        self._processed_rows = []
        return {"success": True}

    # ── File Pickers ──────────────────────────────────────────────────

    def choose_spreadsheet(self) -> dict:
        """Open native file picker for an Excel file."""
        try:
            if not self._window:
                return {"success": False, "error": "Window not available",
                        "error_type": "internal"}

            result = self._window.create_file_dialog(
                webview.OPEN_DIALOG,
                directory="",
                file_types=("Excel Files (*.xlsx;*.xlsm)",),
            )
            if result and len(result) > 0:
                return {"success": True, "path": result[0]}
            return {"success": False, "error": "No file selected",
                    "error_type": "validation"}
        except Exception as e:
            logger.exception("Error choosing spreadsheet")
            return self._failure(e)

    def choose_output_directory(self) -> dict:
        """Open native folder picker dialog."""
        try:
            if not self._window:
                return {"success": False, "error": "Window not available",
                        "error_type": "internal"}

            result = self._window.create_file_dialog(
                webview.FOLDER_DIALOG,
                directory="",
            )
            if result and len(result) > 0:
                return {"success": True, "path": result[0]}
            return {"success": False, "error": "No folder selected",
                    "error_type": "validation"}
        except Exception as e:
            logger.exception("Error choosing output directory")
            return self._failure(e)

    # ── Utilities ─────────────────────────────────────────────────────

    def open_output_folder(self, path: str) -> dict:
        """Open a folder in the system file manager."""
        try:
            folder = Path(path)
            if not folder.exists():
                return {"success": False, "error": f"Folder not found: {path}",
                        "error_type": "validation"}

            system = platform.system()
            if system == "Darwin":
                subprocess.Popen(["open", str(folder)])
            elif system == "Windows":
                subprocess.Popen(["explorer", str(folder)])
            else:
                subprocess.Popen(["xdg-open", str(folder)])

            return {"success": True}
        except Exception as e:
            logger.exception("Error opening folder")
            return self._failure(e)
