"""Domain services - Business logic that doesn't fit in entities."""

from sentinel.domain.services.sample_classifier import (
    SampleClassifier,
    format_clock_time,
    format_observed_at,
)
from sentinel.domain.services.series_normalizer import SeriesNormalizer
from sentinel.domain.services.uptime_aggregator import (
    SeriesAggregate,
    UptimeAggregator,
)

__all__ = [
    "SampleClassifier",
    "format_clock_time",
    "format_observed_at",
    "SeriesNormalizer",
    "SeriesAggregate",
    "UptimeAggregator",
]
