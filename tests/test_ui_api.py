"""Tests for the UI API bridge (ci_maker.ui.api).

Tests cover template persistence, spreadsheet loading, error wrapping,
progress callbacks, date processing and export without requiring a
pywebview window or a real browser.
"""

from __future__ import annotations

import json
import zipfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from openpyxl import Workbook, load_workbook

from ci_maker.config import TemplateStore
from ci_maker.renderer.html_renderer import GenerationResult
from ci_maker.renderer.packaging import LetterImage
from ci_maker.renderer.static_text import DEFAULT_TEMPLATE
from ci_maker.sheets.models import DateRow, FieldRecord
from ci_maker.ui.api import LetterAPI


def _make_workbook(path: Path, rows: list[list]) -> str:
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    wb.save(path)
    return str(path)


@pytest.fixture
def api(tmp_path):
    return LetterAPI(store=TemplateStore(tmp_path / "config.json"))


# ── Template ──────────────────────────────────────────────────────────


class TestTemplate:
    def test_default_when_nothing_saved(self, api):
        result = api.get_template()
        assert result["success"] is True
        assert result["template"] == DEFAULT_TEMPLATE
        assert result["is_default"] is True
        assert "<<NOME COMPLETO>>" in result["placeholders"]

    def test_save_then_get(self, api):
        assert api.save_template("Olá <<NOME COMPLETO>>")["success"] is True
        result = api.get_template()
        assert result["template"] == "Olá <<NOME COMPLETO>>"
        assert result["is_default"] is False

    def test_save_error_reported(self):
        store = MagicMock()
        store.save.side_effect = OSError("disk full")
        api = LetterAPI(store=store)
        result = api.save_template("x")
        assert result["success"] is False
        assert "disk full" in result["error"]

    def test_reset(self, api):
        api.save_template("custom")
        result = api.reset_template()
        assert result["template"] == DEFAULT_TEMPLATE
        assert api.get_template()["is_default"] is True


# ── Letters ───────────────────────────────────────────────────────────


class TestLoadLetterSpreadsheet:
    def test_success(self, api, tmp_path):
        path = _make_workbook(tmp_path / "cis.xlsx", [
            ["NUMERO", "NOME COMPLETO", "DATA1", "DATA2"],
            ["01", "Ana", "10/01", "10/02"],
        ])
        result = api.load_letter_spreadsheet(path)
        assert result == {"success": True, "count": 1, "file_name": "cis.xlsx"}

    def test_validation_errors_listed(self, api, tmp_path):
        path = _make_workbook(tmp_path / "cis.xlsx", [
            ["NUMERO", "NOME COMPLETO", "DATA1", "DATA2"],
            ["01", "", "10/01", "10/02"],
        ])
        result = api.load_letter_spreadsheet(path)
        assert result["success"] is False
        assert result["error_type"] == "validation"
        assert result["errors"] == ["Linha 2: Campo NOME COMPLETO está vazio."]

    def test_bad_file(self, api, tmp_path):
        path = tmp_path / "bad.xlsx"
        path.write_text("nope")
        result = api.load_letter_spreadsheet(str(path))
        assert result["success"] is False
        assert result["error_type"] == "spreadsheet"


class TestGenerateLetters:
    def test_requires_records(self, api):
        result = api.generate_letters(DEFAULT_TEMPLATE)
        assert result["success"] is False
        assert result["error_type"] == "validation"

    def test_requires_template(self, api):
        api._records = [FieldRecord("01", "Ana", "10/01", "10/02")]
        result = api.generate_letters("   ")
        assert result["success"] is False

    def test_success_and_progress(self, api):
        api._records = [FieldRecord("01", "Ana", "10/01", "10/02")]
        window = MagicMock()
        api.set_window(window)

        def fake_generate(template, records, **kwargs):
            kwargs["on_progress"](1, 1)
            return GenerationResult(images=[LetterImage("Ana", b"png")])

        with patch("ci_maker.renderer.generate_letter_images", side_effect=fake_generate):
            result = api.generate_letters(DEFAULT_TEMPLATE)

        assert result["success"] is True
        assert result["names"] == ["Ana"]
        assert result["warnings"] == []
        js = window.evaluate_js.call_args.args[0]
        assert js.startswith("updateProgress(")
        assert json.loads(js[len("updateProgress("):-1]) == {"current": 1, "total": 1}

    def test_payload_carries_image_previews(self, api):
        api._records = [FieldRecord("01", "Ana", "10/01", "10/02")]
        generated = GenerationResult(images=[LetterImage("Ana", b"\x89PNG")])
        with patch("ci_maker.renderer.generate_letter_images", return_value=generated):
            result = api.generate_letters(DEFAULT_TEMPLATE)

        assert result["images"] == [
            {"name": "Ana", "data_uri": "data:image/png;base64,iVBORw=="},
        ]

    def test_warns_when_template_has_no_placeholders(self, api):
        api._records = [FieldRecord("01", "Ana", "10/01", "10/02")]
        with patch("ci_maker.renderer.generate_letter_images",
                   return_value=GenerationResult()):
            result = api.generate_letters("Texto fixo")
        assert result["warnings"]

    def test_per_row_errors_reported(self, api):
        api._records = [FieldRecord("01", "Ana", "10/01", "10/02")]
        failed = GenerationResult(errors={"Linha 2 (Ana)": "boom"})
        with patch("ci_maker.renderer.generate_letter_images", return_value=failed):
            result = api.generate_letters(DEFAULT_TEMPLATE)
        assert result["success"] is False
        assert result["errors"] == {"Linha 2 (Ana)": "boom"}

    def test_render_failure_wrapped(self, api):
        from ci_maker.exceptions import RenderError

        api._records = [FieldRecord("01", "Ana", "10/01", "10/02")]
        with patch("ci_maker.renderer.generate_letter_images",
                   side_effect=RenderError("no browser")):
            result = api.generate_letters(DEFAULT_TEMPLATE)
        assert result["success"] is False
        assert result["error_type"] == "render"


class TestExportZip:
    def test_nothing_generated(self, api, tmp_path):
        result = api.export_zip(str(tmp_path))
        assert result["success"] is False

    def test_writes_zip(self, api, tmp_path):
        api._images = [LetterImage("Ana", b"png")]
        result = api.export_zip(str(tmp_path))
        assert result["success"] is True
        assert Path(result["path"]).name == "cis-geradas.zip"
        with zipfile.ZipFile(result["path"]) as zf:
            assert zf.namelist() == ["Ana.png"]


# ── Dates ─────────────────────────────────────────────────────────────


class TestDates:
    def _load(self, api, tmp_path):
        path = _make_workbook(tmp_path / "datas.xlsx", [
            ["NOME", "DATA1", "DATA2"],
            ["Ana", "31/01", "15/12"],
            ["Bia", "xx", "30/04"],
        ])
        return api.load_date_spreadsheet(path)

    def test_load(self, api, tmp_path):
        result = self._load(api, tmp_path)
        assert result["success"] is True
        assert result["count"] == 2

    def test_process_requires_load(self, api):
        result = api.process_dates(2025)
        assert result["success"] is False

    def test_process(self, api, tmp_path):
        self._load(api, tmp_path)
        result = api.process_dates("2024")
        assert result["success"] is True
        assert result["reference_year"] == 2024
        assert result["rows"][0] == {"nome_completo": "Ana", "data1": "29/02", "data2": "15/01"}
        assert result["rows"][1]["data1"] == "xx"
        assert result["original"][0]["data1"] == "31/01"

    def test_invalid_year(self, api, tmp_path):
        self._load(api, tmp_path)
        result = api.process_dates("abc")
        assert result["success"] is False
        assert result["error_type"] == "validation"

    def test_update_processed_date(self, api, tmp_path):
        self._load(api, tmp_path)
        api.process_dates(2025)
        result = api.update_processed_date(1, "data1", " 05/05 ")
        assert result["success"] is True
        assert api._processed_rows[1] == DateRow("Bia", "05/05", "30/05")

    def test_update_with_null_value_clears_date(self, api, tmp_path):
        self._load(api, tmp_path)
        api.process_dates(2025)
        result = api.update_processed_date(0, "data2", None)
        assert result["success"] is True
        assert api._processed_rows[0].data2 == ""

    def test_update_rejects_bad_field_and_index(self, api, tmp_path):
        self._load(api, tmp_path)
        api.process_dates(2025)
        assert api.update_processed_date(0, "nome_completo", "x")["success"] is False
        assert api.update_processed_date(9, "data1", "x")["success"] is False

    def test_export(self, api, tmp_path):
        self._load(api, tmp_path)
        api.process_dates(2025)
        out_dir = tmp_path / "out"
        out_dir.mkdir()
        result = api.export_dates(str(out_dir))
        assert result["success"] is True
        assert Path(result["path"]).name == "datas_atualizadas.xlsx"
        ws = load_workbook(result["path"]).active
        assert ws["A2"].value == "01"
        assert ws["C2"].value == "28/02"

    def test_export_requires_processing(self, api):
        assert api.export_dates("x.xlsx")["success"] is False

    def test_clear(self, api, tmp_path):
        self._load(api, tmp_path)
        api.process_dates(2025)
        api.clear_dates()
        assert api.process_dates(2025)["success"] is False


# ── Window-dependent ──────────────────────────────────────────────────


class TestFilePickers:
    def test_no_window(self, api):
        assert api.choose_spreadsheet()["success"] is False
        assert api.choose_output_directory()["success"] is False

    def test_spreadsheet_selected(self, api):
        window = MagicMock()
        window.create_file_dialog.return_value = ["/tmp/cis.xlsx"]
        api.set_window(window)
        assert api.choose_spreadsheet() == {"success": True, "path": "/tmp/cis.xlsx"}

    def test_cancelled(self, api):
        window = MagicMock()
        window.create_file_dialog.return_value = None
        api.set_window(window)
        assert api.choose_output_directory()["success"] is False


class TestOpenOutputFolder:
    def test_missing_folder(self, api, tmp_path):
        result = api.open_output_folder(str(tmp_path / "nope"))
        assert result["success"] is False

    def test_opens_with_platform_command(self, api, tmp_path):
        with patch("ci_maker.ui.api.platform") as mock_plat, \
                patch("ci_maker.ui.api.subprocess") as mock_sub:
            mock_plat.system.return_value = "Linux"
            result = api.open_output_folder(str(tmp_path))
        assert result["success"] is True
        mock_sub.Popen.assert_called_once_with(["xdg-open", str(tmp_path)])
