"""Background task scheduler for alert refreshes."""

import logging
from datetime import UTC, datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from citizen_alerts.context import AppContext
from citizen_alerts.errors import NetworkError

logger = logging.getLogger(__name__)


async def refresh_alerts_job(context: AppContext) -> None:
    """Background job to reload incidents from the backend."""
    logger.info("Starting scheduled alert refresh")
    try:
        alerts = await context.alert_service.fetch(
            is_ongoing=context.settings.default_is_ongoing
        )
        logger.info(f"Alert refresh complete: {len(alerts)} alerts")
    except NetworkError as e:
        # Already published on the store for observers
        logger.error(f"Alert refresh failed: {e}")


def setup_scheduler(context: AppContext) -> AsyncIOScheduler:
    """Set up and start the background task scheduler."""
    scheduler = AsyncIOScheduler()

    # First refresh right away, then on the configured interval
    scheduler.add_job(
        refresh_alerts_job,
        trigger=IntervalTrigger(minutes=context.settings.refresh_interval_minutes),
        args=[context],
        next_run_time=datetime.now(UTC),
        id="refresh_alerts",
        name="Refresh alerts from incident backend",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    scheduler.start()
    logger.info("Scheduler started")

    return scheduler


def shutdown_scheduler(scheduler: AsyncIOScheduler | None) -> None:
    """Shut down the scheduler gracefully."""
    if scheduler:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler shut down")
