"""Health sample value objects.

A Sample is one health-check observation for a monitored site, exactly as
reported by the upstream feed.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class HealthState(str, Enum):
    """Qualitative health of a single sample (or of a site's latest sample)."""

    OPERATIONAL = "operational"
    DEGRADED = "degraded"
    DOWN = "down"
    UNKNOWN = "unknown"


# Status code reported by the health checker for a failed probe
STATUS_CODE_FAILURE = 0


@dataclass(frozen=True)
class Sample:
    """One health-check observation.

    Attributes:
        observed_at: When the check ran (timezone-aware)
        status_code: 0 = failure, 1 = success, other values reserved
        latency_ms: Round-trip time of the probe in milliseconds
        message: Free text returned by the checker (HTTP status line or error)
    """

    observed_at: datetime
    status_code: int
    latency_ms: float
    message: str = ""

    def __post_init__(self):
        """Validate sample constraints."""
        if self.latency_ms < 0:
            raise ValueError(f"latency_ms must be non-negative, got {self.latency_ms}")

    @property
    def is_failure(self) -> bool:
        return self.status_code == STATUS_CODE_FAILURE


@dataclass(frozen=True)
class Classification:
    """Result of classifying a sample.

    Attributes:
        state: Qualitative health state
        tooltip_label: Human-readable label for the rendering layer
    """

    state: HealthState
    tooltip_label: str
