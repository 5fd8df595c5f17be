"""VITRINE — Sales Sheet Schema Descriptor.

Defines the closed set of columns a sales sheet may carry and how each one
is parsed. Every historical sheet layout is described here, so a single
row normalizer handles all of them. When an operator renames a column,
add the new spelling to ``header_names`` rather than writing a new pipeline.
"""

from enum import Enum
from typing import List, Tuple


class ParserKind(str, Enum):
    """Which locale parser turns a raw cell into a canonical value."""

    DATE = "date"  # DD/MM/YYYY or any generic date
    MONEY = "money"  # R$ 1.234,56
    PERCENT = "percent"  # 12,5%
    INTEGER = "integer"  # 1.234
    TEXT = "text"  # Free text, trimmed


class SchemaField:
    """Describes a single sheet column."""

    def __init__(
        self,
        attr: str,
        header_names: Tuple[str, ...],
        parser_kind: ParserKind,
        required: bool = False,
        optional_column: bool = False,
        informational: bool = False,
    ):
        self.attr = attr
        self.header_names = header_names
        self.parser_kind = parser_kind
        self.required = required
        # Column may be missing entirely; the record field is then None
        self.optional_column = optional_column
        # Carried through when present; absence is not reported
        self.informational = informational

    @property
    def expected(self) -> bool:
        """Whether a sheet lacking this column should be reported."""
        return not (self.optional_column or self.informational)

    @property
    def canonical_name(self) -> str:
        return self.header_names[0]

    def __repr__(self) -> str:
        return f"<SchemaField {self.attr} ({self.parser_kind.value})>"


# ─────────────────────────────────────────────
# SALES SHEET — Canonical Columns
# ─────────────────────────────────────────────

SALES_SCHEMA: List[SchemaField] = [
    SchemaField("date", ("Data",), ParserKind.DATE, required=True),
    SchemaField("revenue", ("Faturamento Dia (R$)",), ParserKind.MONEY),
    SchemaField(
        "revenue_delta", ("VARIAÇÃO FAT",), ParserKind.PERCENT, optional_column=True
    ),
    SchemaField("sales_count", ("Quantidade de Vendas",), ParserKind.INTEGER),
    SchemaField(
        "sales_delta", ("VARIAÇÃO VENDAS",), ParserKind.PERCENT, optional_column=True
    ),
    SchemaField("avg_ticket", ("Ticket Médio (R$)",), ParserKind.MONEY),
    SchemaField(
        "ticket_delta", ("VARIAÇÃO TICKET",), ParserKind.PERCENT, optional_column=True
    ),
    SchemaField("visits", ("Nº de Visitas", "N de Visitas"), ParserKind.INTEGER),
    SchemaField(
        "visits_delta", ("VARIAÇÃO VISITAS",), ParserKind.PERCENT, optional_column=True
    ),
    SchemaField("conversion_rate", ("Taxa de Conversão (%)",), ParserKind.PERCENT),
    SchemaField(
        "conversion_delta",
        ("VARIAÇÃO TX DE CONVERSÃO",),
        ParserKind.PERCENT,
        optional_column=True,
    ),
    SchemaField(
        "marketplace", ("Marketplace",), ParserKind.TEXT, informational=True
    ),
]


# ─────────────────────────────────────────────
# TREND METRICS — Averaged per half by the trend engine
# ─────────────────────────────────────────────

TREND_METRICS: Tuple[str, ...] = (
    "revenue",
    "sales_count",
    "avg_ticket",
    "visits",
    "conversion_rate",
)

