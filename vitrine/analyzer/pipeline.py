"""VITRINE — Ingestion & Summary Pipeline.

Runs the full data flow:
  fetch workbook → split tabs → store raw → normalize → replace cache

and builds presentation-ready summaries over a filtered record set.
Falls back to the last stored snapshot when the spreadsheet is unreachable.
"""

import json
import time
from datetime import date, datetime, time as clock_time, timedelta, timezone
from decimal import Decimal
from typing import Any, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from vitrine.cache import SalesDataCache
from vitrine.config import settings
from vitrine.connectors.sheets.client import SheetsAPIError, SheetsClient
from vitrine.connectors.sheets.transformer import aggregate_tabs
from vitrine.connectors.sheets.workbook import WorkbookError, read_workbook
from vitrine.models.analysis_models import SalesFilter, SalesSummary, SyncReport
from vitrine.models.raw_models import RawSheetSnapshot
from vitrine.models.sales_models import SalesRecord, SheetTab
from vitrine.analyzer.kpi_engine import compute_kpis
from vitrine.analyzer.trend_engine import compute_trends
from vitrine.analyzer.query_engine import sort_chronologically
from vitrine.core.logging import get_logger

logger = get_logger("analyzer.pipeline")


def _parse_iso_date(d: Optional[str], name: str) -> Optional[date]:
    """Return the date for a YYYY-MM-DD string; raise ValueError if malformed."""
    if not d:
        return None
    try:
        return datetime.strptime(d, "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"{name} must be YYYY-MM-DD, got {d!r}") from None


def resolve_filter(
    channel: Optional[str] = None,
    single_date: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> SalesFilter:
    """Build a SalesFilter from raw query parameters."""
    day = _parse_iso_date(single_date, "date")
    return SalesFilter(
        channel=channel or None,
        single_date=day.isoformat() if day else None,
        start_date=_parse_iso_date(start_date, "start_date"),
        end_date=_parse_iso_date(end_date, "end_date"),
    )


# ── Ingestion ──


def ingest_tabs(tabs: Sequence[SheetTab]) -> List[SalesRecord]:
    """Normalize fetched tabs into the canonical record set. Never raises on bad cells."""
    return aggregate_tabs(tabs)


def _json_cell(value: Any) -> Any:
    if isinstance(value, (datetime, date, clock_time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, Decimal):
        return float(value)
    return value


def store_snapshot(
    session: Session, source: str, tabs: Sequence[SheetTab]
) -> RawSheetSnapshot:
    """Persist fetched tabs to the immutable raw store."""
    payload = [
        {"name": t.name, "rows": [[_json_cell(c) for c in row] for row in t.rows]}
        for t in tabs
    ]
    raw = RawSheetSnapshot(
        source=source,
        tab_count=len(tabs),
        row_count=_data_rows(tabs),
        payload_json=json.dumps(payload, ensure_ascii=False, default=str),
    )
    session.add(raw)
    session.commit()
    return raw


def load_latest_snapshot(session: Session) -> Optional[RawSheetSnapshot]:
    return session.exec(
        select(RawSheetSnapshot)
        .order_by(RawSheetSnapshot.fetched_at.desc(), RawSheetSnapshot.id.desc())  # type: ignore
        .limit(1)
    ).first()


def snapshot_tabs(raw: RawSheetSnapshot) -> List[SheetTab]:
    return [SheetTab(**tab) for tab in json.loads(raw.payload_json)]


def _data_rows(tabs: Sequence[SheetTab]) -> int:
    return sum(max(len(t.rows) - 1, 0) for t in tabs)


async def run_sync(
    session: Optional[Session],
    cache: SalesDataCache,
    client: Optional[SheetsClient] = None,
    force: bool = False,
    tabs: Optional[Sequence[str]] = None,
) -> SyncReport:
    """Execute one ingestion cycle and install the result in ``cache``."""
    snapshot = cache.snapshot
    if not force and cache.is_fresh(settings.cache_max_age_seconds):
        logger.info("Cache is fresh, skipping spreadsheet download")
        return SyncReport(
            status="fresh",
            source=snapshot.source,
            records=len(snapshot.records),
            fetched_at=snapshot.loaded_at.isoformat() if snapshot.loaded_at else "",
        )

    owns_client = client is None
    client = client or SheetsClient()
    wanted_tabs = tabs if tabs is not None else settings.tab_allow_list
    started = time.perf_counter()

    # ── Step 1: Fetch + split ──
    try:
        content = await client.fetch_workbook()
        fetched = read_workbook(content, wanted_tabs)
    except (SheetsAPIError, WorkbookError) as e:
        logger.error(f"Spreadsheet fetch failed: {e}")
        return _fallback(session, cache, str(e))
    finally:
        if owns_client:
            await client.close()

    # ── Step 2: Store raw ──
    if session is not None and settings.persist_snapshots:
        try:
            store_snapshot(session, client.export_url, fetched)
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Snapshot not stored, continuing with fetched data: {e}")

    # ── Step 3: Normalize + replace ──
    records = ingest_tabs(fetched)
    installed = cache.replace(records, source=client.export_url)

    duration_ms = round((time.perf_counter() - started) * 1000, 1)
    logger.info(
        f"Sync complete: {len(records)} records from {len(fetched)} tabs",
        extra={"records": len(records), "duration_ms": duration_ms},
    )
    return SyncReport(
        status="refreshed",
        source=client.export_url,
        tabs=len(fetched),
        rows=_data_rows(fetched),
        records=len(records),
        fetched_at=installed.loaded_at.isoformat() if installed.loaded_at else "",
    )


def _fallback(
    session: Optional[Session], cache: SalesDataCache, error: str
) -> SyncReport:
    """Rebuild the cache from the last stored snapshot, if there is one."""
    raw = None
    if session is not None:
        try:
            raw = load_latest_snapshot(session)
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Snapshot lookup failed: {e}")
    if raw is None:
        logger.warning("No stored snapshot to fall back on; keeping current cache")
        return SyncReport(status="failed", records=len(cache.records), error=error)

    fetched = snapshot_tabs(raw)
    records = ingest_tabs(fetched)
    cache.replace(records, source=raw.source)
    logger.info(
        f"Rebuilt cache from stored snapshot {raw.id}",
        extra={"records": len(records)},
    )
    return SyncReport(
        status="fallback",
        source=raw.source,
        tabs=len(fetched),
        rows=_data_rows(fetched),
        records=len(records),
        fetched_at=raw.fetched_at.isoformat(),
        error=error,
    )


# ── Summary ──


def build_summary(
    records: Sequence[SalesRecord],
    total_records: int,
    chronological: bool = False,
) -> SalesSummary:
    """KPIs and trends for an already-filtered record set."""
    ordered = sort_chronologically(records) if chronological else list(records)
    keys = [r.date_key for r in ordered]

    return SalesSummary(
        generated_at=datetime.now(timezone.utc).isoformat(),
        total_records=total_records,
        filtered_records=len(ordered),
        date_range_start=min(keys) if keys else "",
        date_range_end=max(keys) if keys else "",
        kpis=compute_kpis(ordered),
        trends=compute_trends(ordered),
    )
