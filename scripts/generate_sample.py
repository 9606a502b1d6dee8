"""
Generate sample letters from the built-in template.

Usage:
    source venv/bin/activate
    python scripts/generate_sample.py [planilha.xlsx]

Renders one PNG per row (via HTML/CSS + Playwright) into output/ and
packs them into output/cis-geradas.zip.  Without a spreadsheet, a few
sample rows are used.
"""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from ci_maker.config import logo_path
from ci_maker.renderer import build_zip, generate_letter_images
from ci_maker.renderer.static_text import DEFAULT_TEMPLATE, ZIP_FILE_NAME
from ci_maker.sheets import FieldRecord, ensure_valid, read_letter_records, validate_letter_records

OUTPUT_DIR = Path(__file__).resolve().parents[1] / "output"

SAMPLE_RECORDS = [
    FieldRecord("01", "Maria Aparecida dos Santos", "05/03", "05/04"),
    FieldRecord("02", "João Conceição Pereira", "12/03", "12/04"),
    FieldRecord("03", "Ana Beatriz Lima", "31/03", "30/04"),
]


def _progress(current: int, total: int) -> None:
    print(f"   [{current}/{total}]")


def main():
    OUTPUT_DIR.mkdir(exist_ok=True)

    print("=" * 60)
    print("Generating sample letters")
    print("=" * 60)

    if len(sys.argv) > 1:
        print(f"\n1. Reading {sys.argv[1]}...")
        records = read_letter_records(Path(sys.argv[1]))
        ensure_valid(validate_letter_records(records))
    else:
        print("\n1. Using built-in sample rows...")
        records = SAMPLE_RECORDS
    print(f"   Rows: {len(records)}")

    print("\n2. Rendering PNGs...")
    result = generate_letter_images(
        DEFAULT_TEMPLATE, records,
        logo_path=logo_path(),
        output_dir=OUTPUT_DIR,
        on_progress=_progress,
    )
    for label, error in result.errors.items():
        print(f"   FAILED {label}: {error}")

    print("\n3. Packing ZIP...")
    zip_path = build_zip(result.images, OUTPUT_DIR / ZIP_FILE_NAME)
    print(f"   Saved: {zip_path}")

    print("\n" + "=" * 60)
    print(f"Done! {len(result.images)} files in: {OUTPUT_DIR}")
    print("=" * 60)


if __name__ == "__main__":
    main()
