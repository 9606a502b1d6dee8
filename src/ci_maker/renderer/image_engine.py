"""Playwright-based PNG rasterizer for letter pages."""

from __future__ import annotations

import logging
import os
import sys

from ci_maker.exceptions import RenderError
from ci_maker.renderer.static_text import (
    DEVICE_SCALE_FACTOR,
    PAGE_HEIGHT_PX,
    PAGE_WIDTH_PX,
)

logger = logging.getLogger(__name__)

# When running as a PyInstaller bundle, tell Playwright where to find
# the bundled Chromium browser (installed with PLAYWRIGHT_BROWSERS_PATH=0).
if getattr(sys, "frozen", False):
    os.environ.setdefault("PLAYWRIGHT_BROWSERS_PATH", "0")


class LetterRasterizer:
    """Renders HTML pages to PNG with one headless Chromium page.

    Use as a context manager so the browser is launched once per batch::

        with LetterRasterizer() as raster:
            png = raster.rasterize(html_string)
    """

    def __init__(
        self,
        *,
        width: int = PAGE_WIDTH_PX,
        height: int = PAGE_HEIGHT_PX,
        scale: float = DEVICE_SCALE_FACTOR,
    ) -> None:
        self.width = width
        self.height = height
        self.scale = scale
        self._playwright_cm = None
        self._browser = None
        self._page = None

    def __enter__(self) -> LetterRasterizer:
        from playwright.sync_api import sync_playwright

        self._playwright_cm = sync_playwright()
        try:
            p = self._playwright_cm.__enter__()
            self._browser = p.chromium.launch()
            self._page = self._browser.new_page(
                viewport={"width": self.width, "height": self.height},
                device_scale_factor=self.scale,
            )
        except Exception as e:
            self.close()
            raise RenderError(f"Could not start headless browser: {e}") from e
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._browser is not None:
            try:
                self._browser.close()
            except Exception:
                logger.debug("Browser close failed", exc_info=True)
            self._browser = None
            self._page = None
        if self._playwright_cm is not None:
            self._playwright_cm.__exit__(None, None, None)
            self._playwright_cm = None

    def rasterize(self, html_string: str) -> bytes:
        """Render a complete HTML document and return PNG bytes.

        ``set_content`` returns once the page's load event has fired
        (images included), so the screenshot never races the layout.
        """
        if self._page is None:
            raise RenderError("Rasterizer is not open; use it as a context manager.")
        try:
            self._page.set_content(html_string, wait_until="load")
            return self._page.screenshot(
                type="png",
                clip={"x": 0, "y": 0, "width": self.width, "height": self.height},
            )
        except Exception as e:
            raise RenderError(f"Rasterization failed: {e}") from e


def rasterize_html(html_string: str) -> bytes:
    """One-shot helper: launch a browser, render one page, close it."""
    with LetterRasterizer() as raster:
        return raster.rasterize(html_string)
