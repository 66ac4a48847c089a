"""Uptime aggregator.

Computes the uptime percentage and latest health state of a chronological
sample series, and the dashboard-wide operational flag.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sentinel.domain.entities.sample import HealthState, Sample
from sentinel.domain.services.sample_classifier import SampleClassifier


@dataclass(frozen=True)
class SeriesAggregate:
    """Derived metrics for one site's series.

    Attributes:
        uptime_percent: 100 * successful samples / total samples (0.0 when empty)
        last_state: State of the most recent sample (UNKNOWN when empty)
    """

    uptime_percent: float
    last_state: HealthState


class UptimeAggregator:
    """Aggregates chronological sample series into uptime metrics."""

    def __init__(self, classifier: SampleClassifier | None = None):
        self._classifier = classifier or SampleClassifier()

    def aggregate(self, samples: Sequence[Sample]) -> SeriesAggregate:
        """Compute uptime and latest state for a series.

        Args:
            samples: Samples in chronological ascending order

        Returns:
            SeriesAggregate for the series
        """
        if not samples:
            return SeriesAggregate(uptime_percent=0.0, last_state=HealthState.UNKNOWN)

        successes = sum(1 for sample in samples if not sample.is_failure)
        uptime_percent = 100.0 * successes / len(samples)
        last_state = self._classifier.classify(samples[-1]).state

        return SeriesAggregate(uptime_percent=uptime_percent, last_state=last_state)

    @staticmethod
    def all_operational(states: Iterable[HealthState]) -> bool:
        """Check whether every site is operational.

        A dashboard with no sites is considered operational (vacuous truth).

        Args:
            states: Latest state of each site

        Returns:
            True if every state is OPERATIONAL
        """
        return all(state == HealthState.OPERATIONAL for state in states)
