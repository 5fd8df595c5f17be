"""VITRINE — Sales API Routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel

from vitrine.cache import SalesDataCache
from vitrine.models.analysis_models import SalesFilter, SalesSummary
from vitrine.models.sales_models import SalesRecord
from vitrine.analyzer.pipeline import build_summary, resolve_filter
from vitrine.analyzer.query_engine import list_channels, query_records
from vitrine.core.logging import get_logger

logger = get_logger("api.sales")

router = APIRouter(prefix="/sales", tags=["Sales"])


def get_cache(request: Request) -> SalesDataCache:
    """Dependency — the application's record cache."""
    return request.app.state.cache


def get_filter(
    channel: Optional[str] = Query(None, description="Channel (tab name)"),
    date: Optional[str] = Query(None, description="Single day (YYYY-MM-DD); overrides the range"),
    start_date: Optional[str] = Query(None, description="Range start (YYYY-MM-DD)"),
    end_date: Optional[str] = Query(None, description="Range end (YYYY-MM-DD)"),
) -> SalesFilter:
    """Dependency — validated filter from query parameters."""
    try:
        return resolve_filter(channel, date, start_date, end_date)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


# ── Response Models ──


class SalesListResponse(BaseModel):
    """Response for GET /sales."""

    status: str = "success"
    total_records: int
    count: int
    records: List[SalesRecord]


class ChannelsResponse(BaseModel):
    status: str = "success"
    channels: List[str]


# ── Endpoints ──


@router.get("", response_model=SalesListResponse)
async def get_sales(
    last: Optional[int] = Query(None, ge=1, description="Only the last N filtered records"),
    flt: SalesFilter = Depends(get_filter),
    cache: SalesDataCache = Depends(get_cache),
):
    """Canonical records matching the filter, in source order."""
    records = query_records(cache, flt)
    if last is not None:
        records = records[-last:]
    return SalesListResponse(
        total_records=len(cache.records),
        count=len(records),
        records=records,
    )


@router.get("/summary", response_model=SalesSummary)
async def get_summary(
    chronological: bool = Query(
        True, description="Order by day before splitting halves for trends"
    ),
    flt: SalesFilter = Depends(get_filter),
    cache: SalesDataCache = Depends(get_cache),
):
    """KPIs and half-over-half trends for the filtered records."""
    records = query_records(cache, flt)
    return build_summary(records, len(cache.records), chronological=chronological)


@router.get("/channels", response_model=ChannelsResponse)
async def get_channels(cache: SalesDataCache = Depends(get_cache)):
    """Channels present in the current snapshot."""
    return ChannelsResponse(channels=list_channels(cache.records))
