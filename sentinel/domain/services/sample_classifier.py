"""Sample health classifier.

Maps a raw health sample to a qualitative state and a tooltip label for the
rendering layer.
"""

from datetime import datetime

from sentinel.domain.entities.sample import Classification, HealthState, Sample


class SampleClassifier:
    """Classifies samples as operational, degraded or down.

    Rules (evaluated in order):
    1. status_code == 0 -> DOWN ("Downtime: <time>")
    2. latency_ms > threshold -> DEGRADED ("Degraded: <time>")
    3. otherwise -> OPERATIONAL ("<time>")
    """

    DEFAULT_DEGRADED_LATENCY_THRESHOLD_MS = 1000.0

    def __init__(
        self,
        degraded_latency_threshold_ms: float = DEFAULT_DEGRADED_LATENCY_THRESHOLD_MS,
    ):
        """Initialize classifier.

        Args:
            degraded_latency_threshold_ms: Latency above which a successful
                sample is considered degraded

        Raises:
            ValueError: If the threshold is negative
        """
        if degraded_latency_threshold_ms < 0:
            raise ValueError(
                "degraded_latency_threshold_ms must be non-negative, "
                f"got {degraded_latency_threshold_ms}"
            )
        self.degraded_latency_threshold_ms = degraded_latency_threshold_ms

    def classify(self, sample: Sample) -> Classification:
        """Classify a single sample.

        Args:
            sample: Health sample to classify

        Returns:
            Classification with state and tooltip label
        """
        observed = format_observed_at(sample.observed_at)

        if sample.is_failure:
            return Classification(HealthState.DOWN, f"Downtime: {observed}")

        if sample.latency_ms > self.degraded_latency_threshold_ms:
            return Classification(HealthState.DEGRADED, f"Degraded: {observed}")

        return Classification(HealthState.OPERATIONAL, observed)


def format_observed_at(observed_at: datetime) -> str:
    """Format a timestamp for tooltips, e.g. "May 1st 2024, 3:04:05 pm".

    The timestamp is rendered in its own UTC offset.
    """
    return (
        f"{observed_at.strftime('%B')} {_ordinal(observed_at.day)} {observed_at.year}, "
        f"{format_clock_time(observed_at)}"
    )


def format_clock_time(observed_at: datetime) -> str:
    """Format the time of day on a 12-hour clock, e.g. "3:04:05 pm"."""
    hour = observed_at.hour % 12 or 12
    meridiem = "am" if observed_at.hour < 12 else "pm"
    return f"{hour}:{observed_at.minute:02d}:{observed_at.second:02d} {meridiem}"


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"
