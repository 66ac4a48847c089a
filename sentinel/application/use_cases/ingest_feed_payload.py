"""Ingest Feed Payload Use Case.

Turns one freshly decoded feed document into an immutable Snapshot:
normalize each site's history, trim it to the rolling window, aggregate.
"""

import logging

from sentinel.domain.entities.snapshot import (
    FeedPayload,
    FeedSource,
    SiteSeries,
    Snapshot,
)
from sentinel.domain.services.series_normalizer import SeriesNormalizer
from sentinel.domain.services.uptime_aggregator import UptimeAggregator

logger = logging.getLogger(__name__)


class IngestFeedPayloadUseCase:
    """Build a Snapshot from a raw feed payload.

    Runs synchronously so that callers never observe a partially built
    Snapshot.
    """

    DEFAULT_HISTORY_LIMIT = 60

    def __init__(
        self,
        normalizer: SeriesNormalizer,
        aggregator: UptimeAggregator,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        """Initialize use case with dependencies.

        Args:
            normalizer: Puts raw histories into chronological order
            aggregator: Computes uptime and latest state per site
            history_limit: Maximum number of most recent samples kept per site

        Raises:
            ValueError: If history_limit is less than 1
        """
        if history_limit < 1:
            raise ValueError(f"history_limit must be at least 1, got {history_limit}")

        self._normalizer = normalizer
        self._aggregator = aggregator
        self._history_limit = history_limit

    def execute(self, payload: FeedPayload, source: FeedSource) -> Snapshot:
        """Normalize and aggregate every site in the payload.

        Args:
            payload: Decoded feed document (wire order, newest-first)
            source: Whether the payload came from the stream or a poll

        Returns:
            New Snapshot reflecting only this payload
        """
        if payload.is_empty:
            logger.info("Feed reported no sites (source=%s)", source.value)

        site_statuses: dict[str, SiteSeries] = {}
        for site_id, raw in payload.site_statuses.items():
            chronological = self._normalizer.normalize(raw.samples)
            window = chronological[-self._history_limit :]
            aggregate = self._aggregator.aggregate(window)

            site_statuses[site_id] = SiteSeries(
                site=raw.site,
                samples=tuple(window),
                uptime_percent=aggregate.uptime_percent,
                last_state=aggregate.last_state,
                reported_uptime=raw.reported_uptime,
            )

        all_operational = self._aggregator.all_operational(
            series.last_state for series in site_statuses.values()
        )

        logger.debug(
            "Built snapshot: sites=%d all_operational=%s source=%s",
            len(site_statuses),
            all_operational,
            source.value,
        )

        return Snapshot(
            site_statuses=site_statuses,
            all_operational=all_operational,
            source=source,
        )
