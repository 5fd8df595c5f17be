"""VITRINE — Trend Engine.

Splits an ordered record set into an earlier and a later half and compares
the per-day mean of each metric. Produces trend signals: direction, % change.
"""

import math
from typing import List, Sequence

from vitrine.core.sales_schema import TREND_METRICS
from vitrine.models.analysis_models import TrendSignal
from vitrine.models.sales_models import SalesRecord
from vitrine.core.logging import get_logger

logger = get_logger("analyzer.trend")


def _mean(records: Sequence[SalesRecord], metric_name: str) -> float:
    return sum(getattr(r, metric_name) for r in records) / len(records)


def _change_pct(previous: float, current: float) -> float:
    """Percentage change; a zero baseline yields inf, -inf or nan."""
    if previous == 0:
        if current > 0:
            return math.inf
        if current < 0:
            return -math.inf
        return math.nan
    return (current - previous) / previous * 100


def _direction(change_pct: float) -> str:
    if change_pct > 0:
        return "up"
    elif change_pct < 0:
        return "down"
    return "flat"


def compute_trends(records: Sequence[SalesRecord]) -> List[TrendSignal]:
    """Compare the later half of ``records`` against the earlier half.

    Records are taken in the order given. With an odd count the later half
    gets the extra record. Fewer than two records yield no signals.
    """
    if len(records) < 2:
        return []

    midpoint = len(records) // 2
    first_half = records[:midpoint]
    second_half = records[midpoint:]

    signals: List[TrendSignal] = []
    for metric_name in TREND_METRICS:
        previous = _mean(first_half, metric_name)
        current = _mean(second_half, metric_name)
        change = _change_pct(previous, current)
        signals.append(
            TrendSignal(
                metric_name=metric_name,
                previous_value=previous,
                current_value=current,
                change_pct=change,
                direction=_direction(change),
                baseline_available=previous != 0,
            )
        )

    logger.debug(
        f"Computed {len(signals)} trend signals ({len(first_half)}/{len(second_half)} split)"
    )
    return signals
