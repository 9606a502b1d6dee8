"""Letter rendering package: generates letter page images.

Uses HTML/CSS + Playwright (headless Chromium) for PNG generation.
"""

from __future__ import annotations

from ci_maker.renderer.html_renderer import (
    GenerationResult,
    generate_letter_images,
    render_letter_html,
)
from ci_maker.renderer.packaging import build_zip

__all__ = [
    "GenerationResult",
    "generate_letter_images",
    "render_letter_html",
    "build_zip",
]
