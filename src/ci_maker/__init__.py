"""Gerador de CI: fills memo templates from spreadsheets and advances date tables."""

from ci_maker.version import __version__

__all__ = ["__version__"]
