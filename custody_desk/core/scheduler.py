# custody_desk/core/scheduler.py

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from custody_desk.core.config import settings

logger = logging.getLogger(__name__)

OVERDUE_SWEEP_JOB_ID = "overdue_sweep"


def build_scheduler() -> BackgroundScheduler:
    # Same day boundaries as the clock: desk zone, else host local time
    if settings.DESK_TIMEZONE:
        return BackgroundScheduler(timezone=settings.DESK_TIMEZONE)
    return BackgroundScheduler()


scheduler = build_scheduler()


def start_scheduler(target: BackgroundScheduler = scheduler, interval_seconds: int | None = None):
    """Register the overdue sweep and start the scheduler."""
    from custody_desk.jobs import overdue_sweep

    interval = interval_seconds or settings.OVERDUE_SWEEP_INTERVAL_SECONDS

    # One sweep at a time; missed ticks collapse into a single run
    target.add_job(
        overdue_sweep.run,
        trigger=IntervalTrigger(seconds=interval),
        id=OVERDUE_SWEEP_JOB_ID,
        name="Flag overdue checkouts",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    target.start()
    logger.info("Scheduler started, overdue sweep every %ss", interval)


def stop_scheduler(target: BackgroundScheduler = scheduler):
    if not target.running:
        return

    target.shutdown(wait=True)
    logger.info("Scheduler stopped")
