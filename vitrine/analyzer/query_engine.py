"""VITRINE — Query / Filter Engine.

Narrows the canonical record set to the active selection. Filters only
remove records; order is preserved and the source set is never touched.
"""

from typing import Iterable, List, Sequence

from vitrine.cache import SalesDataCache
from vitrine.models.analysis_models import SalesFilter
from vitrine.models.sales_models import SalesRecord


def filter_records(
    records: Sequence[SalesRecord],
    flt: SalesFilter,
) -> List[SalesRecord]:
    """Apply channel, then single-date or date-range selection.

    A single-date selection wins over any start/end bounds.
    """
    filtered = list(records)

    if flt.channel:
        filtered = [r for r in filtered if r.channel == flt.channel]

    if flt.single_date:
        return [r for r in filtered if r.date_key == flt.single_date]

    if flt.start_date is None and flt.end_date is None:
        return filtered

    if flt.start_date is not None:
        filtered = [r for r in filtered if r.date >= flt.start_date]
    if flt.end_date is not None:
        filtered = [r for r in filtered if r.date <= flt.end_date]
    return filtered


def query_records(cache: SalesDataCache, flt: SalesFilter) -> List[SalesRecord]:
    """Filter the cache's current snapshot."""
    return filter_records(cache.records, flt)


def list_channels(records: Iterable[SalesRecord]) -> List[str]:
    """Distinct non-empty channel names, sorted."""
    return sorted({r.channel for r in records if r.channel})


def sort_chronologically(records: Iterable[SalesRecord]) -> List[SalesRecord]:
    """Stable sort by day; same-day records keep their relative order."""
    return sorted(records, key=lambda r: r.date_key)
