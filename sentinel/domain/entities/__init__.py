"""Domain entities - Core business objects."""

from sentinel.domain.entities.sample import (
    Classification,
    HealthState,
    Sample,
)
from sentinel.domain.entities.site import Site
from sentinel.domain.entities.snapshot import (
    FeedPayload,
    FeedSource,
    RawSiteStatus,
    SiteSeries,
    Snapshot,
)

__all__ = [
    # Sample value objects
    "Sample",
    "HealthState",
    "Classification",
    # Site entity
    "Site",
    # Feed and aggregated state
    "FeedPayload",
    "FeedSource",
    "RawSiteStatus",
    "SiteSeries",
    "Snapshot",
]
