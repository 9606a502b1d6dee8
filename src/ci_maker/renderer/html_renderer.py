"""HTML-based letter renderer using Jinja2 + Playwright.

Fills the memo template for each spreadsheet row, lays the classified
lines out on an A4 page with letterhead, and rasterizes it to PNG.

Context builders assemble template data from the filled lines and the
letterhead.  Rasterization is delegated to image_engine; filters/env to
the filters module.
"""

from __future__ import annotations

import base64
import io
import logging
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from ci_maker.exceptions import CIMakerError
from ci_maker.renderer.filters import setup_jinja_env
from ci_maker.renderer.image_engine import LetterRasterizer
from ci_maker.renderer.letter_text import RenderedLine, render_lines
from ci_maker.renderer.packaging import (
    LetterImage,
    sanitize_file_name,
    save_image,
    unique_names,
)
from ci_maker.renderer.static_text import (
    DEFAULT_LETTERHEAD,
    PAGE_HEIGHT_PX,
    PAGE_WIDTH_PX,
    SIDE_MARGIN_PX,
    Letterhead,
)

if TYPE_CHECKING:
    from ci_maker.sheets.models import FieldRecord

logger = logging.getLogger(__name__)


# ── Image helpers ─────────────────────────────────────────────────────

def _image_to_data_uri(path: Path) -> str:
    """Convert an image file to a base64 data URI.

    Formats the browser can't display (TIFF) or whose type can't be
    guessed from the suffix are converted to PNG through Pillow.
    """
    path = Path(path)
    mime, _ = mimetypes.guess_type(path.name)

    if mime is None or mime == "image/tiff":
        from PIL import Image
        with Image.open(path) as img:
            buf = io.BytesIO()
            img.save(buf, format="PNG")
        data = base64.b64encode(buf.getvalue()).decode()
        return f"data:image/png;base64,{data}"

    data = base64.b64encode(path.read_bytes()).decode()
    return f"data:{mime};base64,{data}"


def _logo_uri(logo_path: Path | None) -> str:
    if logo_path is None:
        return ""
    try:
        return _image_to_data_uri(logo_path)
    except (OSError, ValueError):
        logger.warning("Could not load letterhead logo %s", logo_path)
        return ""


# ── Context + HTML ────────────────────────────────────────────────────

def build_letter_context(
    lines: Sequence[RenderedLine],
    *,
    letterhead: Letterhead = DEFAULT_LETTERHEAD,
    logo_uri: str = "",
    title: str = "CI",
) -> dict:
    """Build template context for one letter page."""
    return {
        "title": title,
        "lines": list(lines),
        "letterhead": letterhead,
        "logo_uri": logo_uri,
        "page_width": PAGE_WIDTH_PX,
        "page_height": PAGE_HEIGHT_PX,
        "side_margin": SIDE_MARGIN_PX,
    }


def render_letter_html(
    template: str,
    record: FieldRecord,
    *,
    letterhead: Letterhead = DEFAULT_LETTERHEAD,
    logo_uri: str = "",
) -> str:
    """Fill ``template`` with ``record`` and return the full page HTML."""
    env = setup_jinja_env()
    page = env.get_template("letter.html")
    lines = render_lines(template, record)
    ctx = build_letter_context(
        lines, letterhead=letterhead, logo_uri=logo_uri,
        title=f"CI {record.numero} - {record.nome_completo}",
    )
    return page.render(**ctx)


# ── Batch generation ──────────────────────────────────────────────────

@dataclass
class GenerationResult:
    """Images produced by a batch, plus per-row errors keyed by row label."""
    images: list[LetterImage] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.errors


def _row_label(index: int, record: FieldRecord) -> str:
    return f"Linha {index + 2} ({record.nome_completo or record.numero})"


def generate_letter_images(
    template: str,
    records: Sequence[FieldRecord],
    *,
    letterhead: Letterhead = DEFAULT_LETTERHEAD,
    logo_path: Optional[Path] = None,
    output_dir: Optional[Path] = None,
    on_progress: Optional[Callable[[int, int], None]] = None,
    rasterizer: Optional[LetterRasterizer] = None,
) -> GenerationResult:
    """Render one PNG per record, in spreadsheet order.

    A failing record is logged and reported in ``errors``; the rest of
    the batch still runs.

    Args:
        template: Letter template containing the placeholders.
        records: Validated spreadsheet rows.
        letterhead: Header/footer text.
        logo_path: Optional letterhead logo image.
        output_dir: If given, each PNG is also written there.
        on_progress: Optional callable(current, total), called after
            every record.
        rasterizer: An already-open rasterizer (tests, reuse); otherwise
            one is opened for the batch.

    Returns:
        GenerationResult with the images and the per-row errors.
    """
    result = GenerationResult()
    total = len(records)
    if total == 0:
        return result

    logo_uri = _logo_uri(logo_path)
    names = unique_names(sanitize_file_name(r.nome_completo) for r in records)

    def _run(raster: LetterRasterizer) -> None:
        for i, record in enumerate(records):
            try:
                html_string = render_letter_html(
                    template, record, letterhead=letterhead, logo_uri=logo_uri,
                )
                image = LetterImage(name=names[i], png=raster.rasterize(html_string))
                result.images.append(image)
                if output_dir is not None:
                    path = save_image(image, output_dir)
                    logger.info("Letter saved: %s", path)
            except (CIMakerError, OSError) as e:
                logger.exception("Letter generation failed for row %d", i + 2)
                result.errors[_row_label(i, record)] = str(e)
            if on_progress is not None:
                on_progress(i + 1, total)

    if rasterizer is not None:
        _run(rasterizer)
    else:
        with LetterRasterizer() as raster:
            _run(raster)

    logger.info("Generated %d of %d letters", len(result.images), total)
    return result
