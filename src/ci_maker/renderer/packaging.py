"""File naming and ZIP packaging for generated letter images."""

from __future__ import annotations

import base64
import logging
import re
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

_INVALID_FILENAME_CHARS = re.compile(r'[/\\:*?"<>|]')


@dataclass
class LetterImage:
    """A rendered letter: file stem (no extension) plus PNG bytes."""
    name: str
    png: bytes


def format_ci_number(num: int) -> str:
    """Format a sequential memo number with at least two digits (7 -> "07")."""
    return f"{num:02d}"


def sanitize_file_name(name: str) -> str:
    """Replace characters that are invalid in file names with spaces."""
    return _INVALID_FILENAME_CHARS.sub(" ", name).strip()


def unique_names(names: Iterable[str], fallback: str = "CI") -> list[str]:
    """Make file stems unique by appending " (2)", " (3)", ...

    Empty stems become ``fallback``.
    """
    seen: dict[str, int] = {}
    result = []
    for name in names:
        stem = name or fallback
        key = stem.lower()
        count = seen.get(key, 0) + 1
        seen[key] = count
        result.append(stem if count == 1 else f"{stem} ({count})")
    return result


def png_data_uri(png: bytes) -> str:
    """Encode PNG bytes as a ``data:image/png`` URI for in-page previews."""
    data = base64.b64encode(png).decode()
    return f"data:image/png;base64,{data}"


def build_zip(images: list[LetterImage], output_path: Path) -> Path:
    """Write every image as ``<name>.png`` into a ZIP archive."""
    output_path = Path(output_path).with_suffix(".zip")
    output_path.parent.mkdir(parents=True, exist_ok=True)

    names = unique_names(img.name for img in images)
    with zipfile.ZipFile(output_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, img in zip(names, images):
            zf.writestr(f"{name}.png", img.png)

    logger.info("ZIP saved: %s (%d images)", output_path, len(images))
    return output_path


def save_image(image: LetterImage, output_dir: Path) -> Path:
    """Write a single image as ``<output_dir>/<name>.png``."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{image.name or 'CI'}.png"
    path.write_bytes(image.png)
    return path
