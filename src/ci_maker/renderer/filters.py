"""Jinja2 template filters and environment setup."""

from __future__ import annotations

import re
import sys
from pathlib import Path

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup, escape

from ci_maker.renderer.letter_text import EMPHASIS_MARKER, LineRole

if getattr(sys, "frozen", False):
    TEMPLATE_DIR = Path(sys._MEIPASS) / "ci_maker" / "renderer" / "templates" / "html"
else:
    TEMPLATE_DIR = Path(__file__).resolve().parent / "templates" / "html"

_EMPHASIS_RE = re.compile(
    re.escape(EMPHASIS_MARKER) + r"(.+?)" + re.escape(EMPHASIS_MARKER)
)


def emphasis(text: str) -> Markup:
    """HTML-escape a line, then turn ``**text**`` into <strong> runs."""
    if not text:
        return Markup("")
    escaped = str(escape(text))
    return Markup(_EMPHASIS_RE.sub(r"<strong>\1</strong>", escaped))


def role_class(role: LineRole | str) -> str:
    """CSS class for a line role (``role-<value>``)."""
    if not role:
        return ""
    value = role.value if isinstance(role, LineRole) else str(role)
    return f"role-{value}"


def setup_jinja_env() -> Environment:
    """Create and configure the Jinja2 template environment."""
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=True,  # Letter text comes straight from user input
    )
    env.filters["emphasis"] = emphasis
    env.filters["role_class"] = role_class
    return env
