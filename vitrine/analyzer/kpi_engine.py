"""VITRINE — KPI Engine.

Reduces a record set to totals and totals-based averages:
revenue, sales, visits, average ticket, conversion rate.
"""

from typing import Iterable

from vitrine.models.analysis_models import KPISummary
from vitrine.models.sales_models import SalesRecord
from vitrine.core.logging import get_logger

logger = get_logger("analyzer.kpi")


def compute_kpis(records: Iterable[SalesRecord]) -> KPISummary:
    """Compute summary KPIs for a record set.

    Ticket and conversion come from the totals, not from averaging the
    per-day columns, so low-volume days do not skew them.
    """
    revenue = 0.0
    sales = 0
    visits = 0
    count = 0
    for r in records:
        revenue += r.revenue
        sales += r.sales_count
        visits += r.visits
        count += 1

    if count == 0:
        return KPISummary()

    # Average ticket
    avg_ticket = (revenue / sales) if sales > 0 else 0.0

    # Conversion rate
    conversion = (sales / visits * 100) if visits > 0 else 0.0

    logger.debug(f"Computed KPIs over {count} records")
    return KPISummary(
        total_revenue=revenue,
        total_sales=sales,
        total_visits=visits,
        avg_ticket=avg_ticket,
        avg_conversion_rate=conversion,
    )
