"""Row models for the letter and date spreadsheets."""

from __future__ import annotations

from dataclasses import dataclass

from ci_maker.renderer.letter_text import (
    EMPHASIS_MARKER,
    PH_DATA1,
    PH_DATA2,
    PH_NOME_COMPLETO,
    PH_NUMERO,
)


@dataclass(frozen=True)
class FieldRecord:
    """One row of the letter spreadsheet (NUMERO, NOME COMPLETO, DATA1, DATA2)."""
    numero: str
    nome_completo: str
    data1: str
    data2: str

    def replacements(self, emphasize_name: bool = True) -> dict[str, str]:
        """Placeholder -> value mapping for this row.

        The name is wrapped in the emphasis marker so it renders bold.
        """
        name = self.nome_completo
        if emphasize_name and name:
            name = f"{EMPHASIS_MARKER}{name}{EMPHASIS_MARKER}"
        return {
            PH_NUMERO: self.numero,
            PH_NOME_COMPLETO: name,
            PH_DATA1: self.data1,
            PH_DATA2: self.data2,
        }


@dataclass(frozen=True)
class DateRow:
    """One row of the date spreadsheet (NOME COMPLETO, DATA1, DATA2)."""
    nome_completo: str
    data1: str
    data2: str
