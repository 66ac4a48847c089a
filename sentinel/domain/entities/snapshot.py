"""Domain entities for aggregated dashboard state.

This module defines the raw feed batch (as decoded from the wire) and the
aggregated, immutable Snapshot published to consumers. The two are kept as
distinct types so that a published Snapshot can never be fed back into the
normalization pipeline.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType

from sentinel.domain.entities.sample import HealthState, Sample
from sentinel.domain.entities.site import Site


class FeedSource(str, Enum):
    """Where an ingested payload came from."""

    STREAM = "stream"
    POLL = "poll"


@dataclass(frozen=True)
class RawSiteStatus:
    """One site's entry in a feed document, exactly as received.

    Attributes:
        site: The monitored site
        samples: Samples in wire order (newest-first)
        reported_uptime: Uptime percentage computed by the server
    """

    site: Site
    samples: tuple[Sample, ...]
    reported_uptime: float | None = None


@dataclass(frozen=True)
class FeedPayload:
    """A freshly decoded feed document (one frame or one poll response).

    Only the wire decoder builds these. Each instance is normalized exactly
    once by the ingestion pipeline.
    """

    site_statuses: Mapping[str, RawSiteStatus]

    def __post_init__(self):
        object.__setattr__(
            self, "site_statuses", MappingProxyType(dict(self.site_statuses))
        )

    @property
    def is_empty(self) -> bool:
        return not self.site_statuses


@dataclass(frozen=True)
class SiteSeries:
    """A site with its chronological sample history and derived metrics.

    Attributes:
        site: The monitored site
        samples: Samples in chronological ascending order (oldest first)
        uptime_percent: Share of non-failure samples, 0-100
        last_state: Classification of the most recent sample
        reported_uptime: Server-side uptime figure, informational only
    """

    site: Site
    samples: tuple[Sample, ...]
    uptime_percent: float
    last_state: HealthState
    reported_uptime: float | None = None

    def __post_init__(self):
        """Validate series constraints."""
        if not (0.0 <= self.uptime_percent <= 100.0):
            raise ValueError(
                f"uptime_percent must be between 0.0 and 100.0, got {self.uptime_percent}"
            )

    @property
    def latest(self) -> Sample | None:
        return self.samples[-1] if self.samples else None


@dataclass(frozen=True)
class Snapshot:
    """Immutable aggregated view of every monitored site.

    A new Snapshot is created for each ingestion; consumers may hold on to
    one safely while newer ones are published.

    Attributes:
        site_statuses: Read-only mapping of site id to SiteSeries
        all_operational: True when every site's latest sample is operational
        source: Whether the data arrived via the stream or a poll
        ingested_at: When the Snapshot was built
    """

    site_statuses: Mapping[str, SiteSeries]
    all_operational: bool
    source: FeedSource = FeedSource.STREAM
    ingested_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        object.__setattr__(
            self, "site_statuses", MappingProxyType(dict(self.site_statuses))
        )

    def __len__(self) -> int:
        return len(self.site_statuses)

    def get(self, site_id: str) -> SiteSeries | None:
        return self.site_statuses.get(site_id)
