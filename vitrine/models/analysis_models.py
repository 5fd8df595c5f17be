"""VITRINE — Analysis Output Models."""

import datetime as dt
import math
from typing import List, Optional
from pydantic import BaseModel, field_serializer


class SalesFilter(BaseModel):
    """Active filter selection driving every downstream view."""

    channel: Optional[str] = None
    single_date: Optional[str] = None  # YYYY-MM-DD
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None


class KPISummary(BaseModel):
    """Totals and totals-based averages for a record set."""

    total_revenue: float = 0.0
    total_sales: int = 0
    total_visits: int = 0
    avg_ticket: float = 0.0
    avg_conversion_rate: float = 0.0


class TrendSignal(BaseModel):
    """Half-over-half comparison for one metric."""

    metric_name: str
    previous_value: float
    current_value: float
    change_pct: float
    direction: str  # "up" | "down" | "flat"
    baseline_available: bool = True

    @field_serializer("change_pct", when_used="json")
    def _finite_or_null(self, value: float) -> Optional[float]:
        """JSON has no inf/nan; a zero baseline serializes as null."""
        return value if math.isfinite(value) else None


class SalesSummary(BaseModel):
    """Presentation-ready view of a filtered record set."""

    generated_at: str = ""
    total_records: int = 0
    filtered_records: int = 0
    date_range_start: str = ""
    date_range_end: str = ""
    kpis: KPISummary = KPISummary()
    trends: List[TrendSignal] = []


class SyncReport(BaseModel):
    """Outcome of one ingestion cycle."""

    status: str  # "refreshed" | "fresh" | "fallback" | "failed"
    source: str = ""
    tabs: int = 0
    rows: int = 0
    records: int = 0
    fetched_at: str = ""
    error: Optional[str] = None
