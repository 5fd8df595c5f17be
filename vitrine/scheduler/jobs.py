"""VITRINE — Scheduler Jobs.

APScheduler interval job that re-ingests the spreadsheet every few minutes.
The first run fires at startup so a fresh process does not serve an empty cache.
"""

from datetime import datetime, timezone

from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from vitrine.cache import SalesDataCache
from vitrine.config import settings
from vitrine.database import get_session
from vitrine.analyzer.pipeline import run_sync
from vitrine.core.logging import get_logger

logger = get_logger("scheduler")

scheduler = AsyncIOScheduler()


async def refresh_job(cache: SalesDataCache):
    """Run one ingestion cycle into ``cache``."""
    logger.info("Scheduled refresh starting...")
    sessions = get_session()
    try:
        session = next(sessions)
        report = await run_sync(session=session, cache=cache, force=True)
        logger.info(
            f"Scheduled refresh finished: {report.status}",
            extra={"records": report.records},
        )
    except Exception as e:
        logger.error(f"Scheduled refresh failed: {e}")
    finally:
        sessions.close()


def add_refresh_job(sched: BaseScheduler, cache: SalesDataCache):
    """Register the refresh job on ``sched``, due immediately and then every interval."""
    return sched.add_job(
        refresh_job,
        "interval",
        minutes=settings.refresh_interval_minutes,
        args=[cache],
        id="sheet_refresh",
        replace_existing=True,
        next_run_time=datetime.now(timezone.utc),
        misfire_grace_time=60,
        coalesce=True,
    )


def start_scheduler(cache: SalesDataCache):
    """Configure and start the scheduler."""
    if not settings.scheduler_enabled:
        logger.info("Scheduler disabled via config")
        return

    add_refresh_job(scheduler, cache)
    scheduler.start()
    logger.info(
        f"Scheduler started. Refresh now and every {settings.refresh_interval_minutes} min"
    )


def stop_scheduler():
    """Shutdown the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
