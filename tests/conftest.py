"""Shared fixtures. Environment is set before any vitrine module is imported."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("SHEET_EXPORT_URL", "https://sheets.test/export.xlsx")

import datetime as dt
from io import BytesIO

import pytest
from openpyxl import Workbook

from vitrine.models.sales_models import SalesRecord, SheetTab

HEADER = [
    "Data",
    "Faturamento Dia (R$)",
    "VARIAÇÃO FAT",
    "Quantidade de Vendas",
    "VARIAÇÃO VENDAS",
    "Ticket Médio (R$)",
    "VARIAÇÃO TICKET",
    "Nº de Visitas",
    "VARIAÇÃO VISITAS",
    "Taxa de Conversão (%)",
    "VARIAÇÃO TX DE CONVERSÃO",
]


def make_record(
    day: str,
    channel: str = "Loja",
    revenue: float = 0.0,
    sales: int = 0,
    ticket: float = 0.0,
    visits: int = 0,
    conversion: float = 0.0,
) -> SalesRecord:
    value = dt.date.fromisoformat(day)
    return SalesRecord(
        channel=channel,
        date=value,
        display_date=value.strftime("%d/%m/%Y"),
        date_key=day,
        revenue=revenue,
        sales_count=sales,
        avg_ticket=ticket,
        visits=visits,
        conversion_rate=conversion,
    )


@pytest.fixture
def mercado_livre_tab() -> SheetTab:
    return SheetTab(
        name="Mercado Livre",
        rows=[
            HEADER,
            ["01/03/2024", "R$ 1.000,00", "5%", "10", "", "R$ 100,00", "", "200", "", "5,0%", ""],
            ["02/03/2024", "R$ 1.500,50", "", "15", "", "R$ 100,03", "", "250", "", "6,0%", ""],
            ["Total", "R$ 2.500,50", "", "25", "", "", "", "450", "", "", ""],
        ],
    )


@pytest.fixture
def shopee_tab() -> SheetTab:
    # Older layout: no variation columns, unaccented and upper-case headers
    return SheetTab(
        name="Shopee",
        rows=[
            ["DATA", "Faturamento Dia (R$)", "Quantidade de Vendas", "Ticket Medio (R$)", "N de Visitas", "TAXA DE CONVERSAO (%)"],
            ["01/03/2024", 800.0, 8, 100.0, 160, 5.0],
            ["02/03/2024", "abc", 4, "R$ 50,00", "", "2,5%"],
        ],
    )


def build_workbook(tabs: dict) -> bytes:
    """In-memory .xlsx with one worksheet per entry."""
    wb = Workbook()
    wb.remove(wb.active)
    for name, rows in tabs.items():
        ws = wb.create_sheet(title=name)
        for row in rows:
            ws.append(row)
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
