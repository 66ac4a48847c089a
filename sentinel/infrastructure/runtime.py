"""Dashboard runtime wiring.

Builds the ingestion pipeline, stream client, store and refresh scheduler
from settings and ties their lifecycles together.
"""

from typing import Any

import httpx
import structlog

from sentinel.application.use_cases.ingest_feed_payload import (
    IngestFeedPayloadUseCase,
)
from sentinel.domain.services.sample_classifier import SampleClassifier
from sentinel.domain.services.series_normalizer import SeriesNormalizer
from sentinel.domain.services.uptime_aggregator import UptimeAggregator
from sentinel.infrastructure.config.settings import Settings, get_settings
from sentinel.infrastructure.feed.stream_client import StatusStreamClient
from sentinel.infrastructure.stores.status_store import StatusStore
from sentinel.infrastructure.tasks.scheduler import (
    create_refresh_scheduler,
    shutdown_scheduler,
)

logger = structlog.get_logger(__name__)


def build_ingest_use_case(settings: Settings) -> IngestFeedPayloadUseCase:
    """Assemble the normalize/aggregate pipeline from settings."""
    classifier = SampleClassifier(
        degraded_latency_threshold_ms=settings.classifier.degraded_latency_threshold_ms
    )
    return IngestFeedPayloadUseCase(
        normalizer=SeriesNormalizer(),
        aggregator=UptimeAggregator(classifier),
        history_limit=settings.feed.history_limit,
    )


class StatusDashboard:
    """Owns one stream client, one store and one refresh scheduler.

    Usage:
        async with StatusDashboard() as dashboard:
            dashboard.store.subscribe(render)
            ...
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Wire the dashboard components.

        Args:
            settings: Application settings (defaults to global settings)
            http_client: Optional pre-configured HTTP client for the feed
        """
        self.settings = settings or get_settings()
        self.classifier = SampleClassifier(
            self.settings.classifier.degraded_latency_threshold_ms
        )
        self.client = StatusStreamClient.from_settings(
            self.settings.feed, client=http_client
        )
        self.store = StatusStore(self.client, build_ingest_use_case(self.settings))
        self.scheduler = create_refresh_scheduler(
            self.store, self.settings.feed.poll_interval_ms
        )
        self._started = False

    async def __aenter__(self) -> "StatusDashboard":
        await self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.stop()

    async def start(self) -> None:
        """Open the stream and start the refresh timer."""
        if self._started:
            return

        self.client.start(self.store)
        self.scheduler.start()
        self._started = True
        logger.info("Status dashboard started", feed_url=self.client.feed_url)

    async def stop(self) -> None:
        """Cancel the timer, discard in-flight refreshes, release the connection."""
        if self._started:
            await shutdown_scheduler(self.scheduler)
        await self.store.close()
        await self.client.stop()
        self._started = False
        logger.info("Status dashboard stopped")
