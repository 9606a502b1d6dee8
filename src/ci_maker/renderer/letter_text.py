"""Pure text utilities for filling and laying out letter templates.

Provides placeholder substitution and per-line role classification.
No rendering library dependencies; used by the HTML renderer, the UI
bridge and tests.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from ci_maker.sheets.models import FieldRecord


PH_NUMERO = "<<NUMERO>>"
PH_NOME_COMPLETO = "<<NOME COMPLETO>>"
PH_DATA1 = "<<DATA1>>"
PH_DATA2 = "<<DATA2>>"

PLACEHOLDERS = (PH_NUMERO, PH_NOME_COMPLETO, PH_DATA1, PH_DATA2)

EMPHASIS_MARKER = "**"

# Marker phrases of the standard memo layout
DIRECTIVE_MARKER = "FAVOR EMPENHAR"
HEADER_MARKER = "C.I. N°"
TITLE_MARKERS = ("Secretária", "Secretário")
CLOSING_MARKER = "Atenciosamente"


class LineRole(Enum):
    """Display role of one line of a filled letter."""
    DIRECTIVE = "directive-centered-bold"
    HEADER = "header-justified-bold"
    SIGNATURE_NAME = "signature-name-centered-bold"
    SIGNATURE_TITLE = "signature-title-centered"
    CLOSING = "closing-spaced"
    BLANK = "blank-spacer"
    BODY = "body-justified"


_ROLE_ALIASES: dict[str, LineRole] = {
    "directive": LineRole.DIRECTIVE,
    "header": LineRole.HEADER,
    "signature-name": LineRole.SIGNATURE_NAME,
    "signature-title": LineRole.SIGNATURE_TITLE,
    "closing": LineRole.CLOSING,
    "blank": LineRole.BLANK,
    "body": LineRole.BODY,
}
_ROLE_ALIASES.update({role.value: role for role in LineRole})

_ROLE_TAG_RE = re.compile(r"^\s*\[\[([a-z-]+)\]\]\s?")


@dataclass(frozen=True)
class RenderedLine:
    """A line of filled text and the role that decides its styling."""
    text: str
    role: LineRole


# ── Substitution ─────────────────────────────────────────────────────

def substitute_placeholders(template: str, values: Mapping[str, str]) -> str:
    """Replace every occurrence of each recognized placeholder.

    Only the four known tokens are replaced; other ``<<...>>`` text and
    known tokens missing from ``values`` stay as they are.
    """
    result = template
    for placeholder in PLACEHOLDERS:
        if placeholder not in values:
            continue
        value = values[placeholder] or ""
        result = re.sub(re.escape(placeholder), lambda _m: value, result)
    return result


def find_placeholders(template: str) -> list[str]:
    """Return the recognized placeholders used in ``template``."""
    return [p for p in PLACEHOLDERS if p in template]


# ── Classification ───────────────────────────────────────────────────

def _is_all_caps(line: str) -> bool:
    text = line.replace(EMPHASIS_MARKER, "").strip()
    return bool(text) and text.isupper()


def classify_line(line: str) -> LineRole:
    """Pick the display role of one line. First matching rule wins.

    Rule order: directive, document header, all-caps signatory name,
    job title, closing salutation, blank, body text.
    """
    if DIRECTIVE_MARKER in line:
        return LineRole.DIRECTIVE
    if HEADER_MARKER in line:
        return LineRole.HEADER
    # Heuristic: the signatory's name is typed in capitals
    if _is_all_caps(line):
        return LineRole.SIGNATURE_NAME
    if any(marker in line for marker in TITLE_MARKERS):
        return LineRole.SIGNATURE_TITLE
    if CLOSING_MARKER in line:
        return LineRole.CLOSING
    if not line.strip():
        return LineRole.BLANK
    return LineRole.BODY


def detect_role_tag(line: str) -> tuple[LineRole | None, str]:
    """Check for an explicit ``[[role]]`` prefix.

    Returns (role, remaining_text) if found, else (None, original_text).
    Unknown tag names are left in the text.
    """
    m = _ROLE_TAG_RE.match(line)
    if not m:
        return None, line
    role = _ROLE_ALIASES.get(m.group(1))
    if role is None:
        return None, line
    return role, line[m.end():]


def classify_text(text: str) -> list[RenderedLine]:
    """Split filled text into lines and assign each a role."""
    lines: list[RenderedLine] = []
    for raw in re.split(r"\r\n|\r|\n", text):
        role, line = detect_role_tag(raw)
        if role is None:
            role = classify_line(line)
        lines.append(RenderedLine(text=line, role=role))
    return lines


def render_lines(template: str, record: FieldRecord) -> list[RenderedLine]:
    """Fill ``template`` with ``record`` and classify the result."""
    return classify_text(substitute_placeholders(template, record.replacements()))
