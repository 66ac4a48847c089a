"""
Console entry point.

Runs the status dashboard against the configured feed and logs every store
update until interrupted.

Usage:
    sentinel-watch
    FEED_URL=http://status.internal:8080/status sentinel-watch
"""

import asyncio
import contextlib

from sentinel.application.dtos.snapshot_dto import SnapshotDTO
from sentinel.domain.services.sample_classifier import SampleClassifier
from sentinel.infrastructure.config import get_settings
from sentinel.infrastructure.observability import configure_logging, get_logger
from sentinel.infrastructure.runtime import StatusDashboard
from sentinel.infrastructure.stores.status_store import DashboardStatus, StoreState

logger = get_logger(__name__)


def log_update(state: StoreState, classifier: SampleClassifier) -> None:
    """Log one store update the way the dashboard would render it."""
    if state.snapshot is None:
        logger.warning("No status data available", error=str(state.error))
        return

    view = SnapshotDTO.from_snapshot(state.snapshot, classifier)
    logger.info(
        view.headline,
        status=state.status.value,
        source=view.source,
        error=str(state.error) if state.status is DashboardStatus.STALE else None,
    )
    for site_id, site_status in view.site_statuses.items():
        logger.info(
            "Site status",
            site_id=site_id,
            name=site_status.site.name,
            url=site_status.site.url,
            uptime=site_status.uptime_label,
            state=site_status.last_state,
            samples=len(site_status.statuses),
        )


async def watch() -> None:
    """Run the dashboard until cancelled."""
    settings = get_settings()
    async with StatusDashboard(settings) as dashboard:
        dashboard.store.subscribe(lambda state: log_update(state, dashboard.classifier))
        logger.info("Loading status data", feed_url=settings.feed.url)
        await asyncio.Event().wait()


def run() -> None:
    """Console script entry point."""
    configure_logging()
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(watch())


if __name__ == "__main__":
    run()
