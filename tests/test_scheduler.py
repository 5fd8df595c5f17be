from datetime import datetime, timedelta, timezone

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from vitrine.cache import SalesDataCache
from vitrine.config import settings
from vitrine.scheduler.jobs import add_refresh_job, refresh_job


def test_refresh_job_runs_at_startup_then_every_interval():
    sched = AsyncIOScheduler()
    cache = SalesDataCache()
    before = datetime.now(timezone.utc)

    add_refresh_job(sched, cache)

    job = sched.get_job("sheet_refresh")
    assert job.func is refresh_job
    assert job.args == (cache,)
    assert before <= job.next_run_time <= datetime.now(timezone.utc) + timedelta(seconds=1)
    assert job.trigger.interval == timedelta(minutes=settings.refresh_interval_minutes)

