"""VITRINE — Canonical Sales Models (Universal Schema).

Every sheet layout normalizes into ``SalesRecord``. Records are frozen:
an ingestion cycle builds them once and a refresh replaces the whole set.
"""

import datetime as dt
from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class SheetTab(BaseModel):
    """One spreadsheet tab as handed over by the transport layer.

    ``rows[0]`` is the header row; the rest are data rows. Cells stay raw:
    numbers, strings, dates or None.
    """

    name: str
    rows: List[List[Any]] = []


@dataclass(frozen=True)
class ColumnMapping:
    """Resolved column index per schema field; None means the column is missing."""

    date: Optional[int] = None
    revenue: Optional[int] = None
    revenue_delta: Optional[int] = None
    sales_count: Optional[int] = None
    sales_delta: Optional[int] = None
    avg_ticket: Optional[int] = None
    ticket_delta: Optional[int] = None
    visits: Optional[int] = None
    visits_delta: Optional[int] = None
    conversion_rate: Optional[int] = None
    conversion_delta: Optional[int] = None
    marketplace: Optional[int] = None

class SalesRecord(BaseModel):
    """One normalized day of sales for one channel.

    (channel, date_key) identifies a record; duplicates are kept as-is.
    """

    model_config = ConfigDict(frozen=True)

    channel: str
    date: dt.date
    display_date: str
    date_key: str
    revenue: float = 0.0
    sales_count: int = 0
    avg_ticket: float = 0.0
    visits: int = 0
    conversion_rate: float = 0.0
    marketplace: str = ""
    revenue_delta: Optional[float] = None
    sales_delta: Optional[float] = None
    ticket_delta: Optional[float] = None
    visits_delta: Optional[float] = None
    conversion_delta: Optional[float] = None
