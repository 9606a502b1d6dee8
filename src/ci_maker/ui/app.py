"""Desktop application entry point: pywebview window + LetterAPI."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import webview

from ci_maker.config import is_debug
from ci_maker.ui.api import LetterAPI
from ci_maker.version import __version__

logger = logging.getLogger(__name__)

if getattr(sys, "frozen", False):
    TEMPLATES_DIR = Path(sys._MEIPASS) / "ci_maker" / "ui" / "templates"
else:
    TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def main() -> None:
    """Launch the Gerador de CI desktop application."""
    from dotenv import load_dotenv

    load_dotenv()

    debug = is_debug()

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    logger.info("Gerador de CI %s", __version__)
    api = LetterAPI()

    window = webview.create_window(
        title="Gerador de CI",
        url=str(TEMPLATES_DIR / "index.html"),
        js_api=api,
        width=1100,
        height=800,
        min_size=(900, 600),
    )

    api.set_window(window)
    logger.debug("Window created, starting event loop")

    webview.start(debug=debug)


if __name__ == "__main__":
    main()
