"""Desktop UI package: pywebview-based memo generator."""

from __future__ import annotations


def launch() -> None:
    """Launch the CI maker desktop application."""
    from ci_maker.ui.app import main

    main()
