"""Static letter content: default memo template and letterhead text.

The default template is what a fresh install shows before the user saves
their own.  Letterhead text appears above and below every generated
letter.
"""

from __future__ import annotations

from dataclasses import dataclass, field


DEFAULT_TEMPLATE = """\
C.I. N° <<NUMERO>>/AS/2026

Para: Secretaria Municipal da Fazenda
De: Secretaria de Assistência Social
Assunto: Emissão do empenho (Auxilio – Aluguel)

Prezado (a) Senhor (a),

Conforme documentação em anexo, solicitamos a V.S.ª emissão de empenho \
para pagamento de auxílio – aluguel em favor de <<NOME COMPLETO>>, no valor \
de R$ 400,00 (quatrocentos reais), referente ao período de <<DATA1>> a <<DATA2>>.

FAVOR EMPENHAR NA FICHA 212

Atenciosamente,

LARISSA ALVES DA SILVA VILELA
Secretária Municipal de Assistência Social"""


@dataclass(frozen=True)
class Letterhead:
    """Header and footer text printed on every letter."""
    organization: str = "Prefeitura do Município de Alfenas"
    department: str = "Secretaria Municipal de Assistência Social"
    footer_lines: tuple[str, ...] = field(
        default_factory=lambda: ("Prefeitura Municipal de Alfenas",)
    )
    website: str = "www.alfenas.mg.gov.br"
    phone: str = "Tel.: 3698 1300"


DEFAULT_LETTERHEAD = Letterhead()

# ── Page geometry ────────────────────────────────────────────────────
# A4 at 96 dpi; rendered at 2x for print-quality PNGs.

PAGE_WIDTH_PX = 794
PAGE_HEIGHT_PX = 1123
SIDE_MARGIN_PX = 113        # 3cm
DEVICE_SCALE_FACTOR = 2

ZIP_FILE_NAME = "cis-geradas.zip"
DATES_FILE_NAME = "datas_atualizadas.xlsx"
