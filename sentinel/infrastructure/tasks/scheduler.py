"""Background refresh scheduling using APScheduler.

Registers the periodic store refresh (every poll interval, 30 seconds by
default). Uses APScheduler's AsyncIOScheduler for in-process scheduling; one
scheduler per dashboard, never a process-wide instance.
"""

import asyncio

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from sentinel.infrastructure.stores.status_store import StatusStore

logger = structlog.get_logger(__name__)

REFRESH_JOB_ID = "refresh_status"


def create_refresh_scheduler(
    store: StatusStore, poll_interval_ms: int
) -> AsyncIOScheduler:
    """Create a scheduler that refreshes the store on a fixed cadence.

    Args:
        store: Store whose refresh() is invoked
        poll_interval_ms: Interval between refreshes in milliseconds

    Returns:
        Configured (not started) AsyncIOScheduler

    Raises:
        ValueError: If the interval is not positive
    """
    if poll_interval_ms <= 0:
        raise ValueError(f"poll_interval_ms must be positive, got {poll_interval_ms}")

    scheduler = AsyncIOScheduler(
        timezone="UTC",
        job_defaults={
            "coalesce": True,  # Combine missed runs into one
            "max_instances": 1,  # Prevent overlapping refreshes
            "misfire_grace_time": max(1, poll_interval_ms // 1000),
        },
    )

    scheduler.add_job(
        store.refresh,
        trigger=IntervalTrigger(seconds=poll_interval_ms / 1000),
        id=REFRESH_JOB_ID,
        name="Refresh dashboard snapshot",
        replace_existing=True,
    )
    logger.info("Registered refresh job", interval_ms=poll_interval_ms)

    return scheduler


async def shutdown_scheduler(scheduler: AsyncIOScheduler) -> None:
    """Stop the scheduler without waiting for a running refresh.

    The refresh job is removed before shutdown so no further run can fire,
    and the loop is yielded once so the scheduler has stopped on return.
    A refresh still in flight is discarded by the closed store.

    Args:
        scheduler: Scheduler created by create_refresh_scheduler()
    """
    if not scheduler.running:
        logger.warning("Scheduler not running, skipping shutdown")
        return

    if scheduler.get_job(REFRESH_JOB_ID) is not None:
        scheduler.remove_job(REFRESH_JOB_ID)

    # AsyncIOScheduler.shutdown is posted to the event loop
    scheduler.shutdown(wait=False)
    await asyncio.sleep(0)
    logger.info("Refresh scheduler shut down")
