"""VITRINE — Sync API Routes."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from vitrine.cache import SalesDataCache
from vitrine.database import get_session
from vitrine.models.analysis_models import SyncReport
from vitrine.analyzer.pipeline import run_sync
from vitrine.api.sales_routes import get_cache
from vitrine.core.logging import get_logger

logger = get_logger("api.sync")

router = APIRouter(tags=["Sync"])


@router.post("/sync", response_model=SyncReport)
async def trigger_sync(
    force: bool = Query(False, description="Refetch even if the cache is fresh"),
    session: Session = Depends(get_session),
    cache: SalesDataCache = Depends(get_cache),
):
    """Download the spreadsheet and rebuild the record set.

    Falls back to the last stored snapshot when the download fails.
    """
    report = await run_sync(session=session, cache=cache, force=force)
    if report.status == "failed":
        raise HTTPException(status_code=502, detail=f"Sync failed: {report.error}")
    return report


@router.post("/sync/invalidate")
async def invalidate_cache(cache: SalesDataCache = Depends(get_cache)):
    """Mark the cached records stale; the next sync refetches."""
    cache.invalidate()
    return {"status": "success", "records": len(cache.records)}
