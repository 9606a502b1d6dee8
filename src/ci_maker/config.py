"""Application directory, environment flags and the saved-template store."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

TEMPLATE_KEY = "letterTemplate"


def is_debug() -> bool:
    """Check if DEBUG is enabled via environment / .env."""
    return os.environ.get("DEBUG", "").lower() in ("1", "true")


def app_dir() -> Path:
    """Directory holding config.json (``CI_MAKER_HOME`` overrides ~/.ci-maker)."""
    override = os.environ.get("CI_MAKER_HOME", "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".ci-maker"


def logo_path() -> Optional[Path]:
    """Return the letterhead logo from ``CI_MAKER_LOGO`` if it exists."""
    value = os.environ.get("CI_MAKER_LOGO", "").strip()
    if not value:
        return None
    path = Path(value).expanduser()
    if not path.is_file():
        logger.warning("CI_MAKER_LOGO points to a missing file: %s", path)
        return None
    return path


class TemplateStore:
    """Persists the single saved letter template in config.json.

    ``load()`` returns None when nothing was saved or the file can't be
    read.  ``save()`` lets OSError propagate so the caller can report it.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = Path(path) if path is not None else app_dir() / "config.json"

    @property
    def path(self) -> Path:
        return self._path

    def _read_config(self) -> dict:
        """Read config.json, returning empty dict on error."""
        try:
            if self._path.exists():
                data = json.loads(self._path.read_text(encoding="utf-8"))
                if isinstance(data, dict):
                    return data
        except (OSError, ValueError):
            logger.debug("Could not read config %s", self._path, exc_info=True)
        return {}

    def _write_config(self, data: dict) -> None:
        """Write config.json with 0600 permissions."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8",
        )
        self._path.chmod(0o600)

    def load(self) -> Optional[str]:
        value = self._read_config().get(TEMPLATE_KEY)
        if isinstance(value, str) and value:
            return value
        return None

    def save(self, template: str) -> None:
        data = self._read_config()
        data[TEMPLATE_KEY] = template
        self._write_config(data)
        logger.info("Template saved to %s", self._path)

    def clear(self) -> None:
        data = self._read_config()
        if data.pop(TEMPLATE_KEY, None) is not None:
            self._write_config(data)
