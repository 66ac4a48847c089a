"""Published snapshot DTOs.

This module defines the data transfer objects handed to the rendering layer.
Uses dataclasses for application layer.
"""

from dataclasses import dataclass, field
from typing import Any

from sentinel.domain.entities.sample import Sample
from sentinel.domain.entities.snapshot import SiteSeries, Snapshot
from sentinel.domain.services.sample_classifier import (
    SampleClassifier,
    format_clock_time,
)

HEADLINE_ALL_OPERATIONAL = "All Systems Operational"
HEADLINE_DEGRADED = "Some Systems Are Down"


@dataclass
class SampleDTO:
    """Sample in wire vocabulary.

    Attributes:
        status: 0 = failure, 1 = success
        time: ISO-8601 timestamp
        msg: Checker message
        ping: Latency in milliseconds
    """

    status: int
    time: str
    msg: str
    ping: float

    @classmethod
    def from_sample(cls, sample: Sample) -> "SampleDTO":
        return cls(
            status=sample.status_code,
            time=sample.observed_at.isoformat(),
            msg=sample.message,
            ping=sample.latency_ms,
        )


@dataclass
class SiteDTO:
    """Monitored site.

    Attributes:
        id: Site identifier
        url: Probed URL
        name: Display name
    """

    id: str
    url: str
    name: str


@dataclass
class TrackerEntryDTO:
    """One bar of a site's status tracker.

    Attributes:
        state: Health state value (operational, degraded, down)
        tooltip: Tooltip label
    """

    state: str
    tooltip: str


@dataclass
class ChartPointDTO:
    """One point of a site's latency chart.

    Attributes:
        date: Time of day of the sample, e.g. "3:04:05 pm"
        status: 0 = failure, 1 = success
        ping: Latency in milliseconds
    """

    date: str
    status: int
    ping: float

    @property
    def ping_label(self) -> str:
        return format_latency(self.ping)

    @classmethod
    def from_sample(cls, sample: Sample) -> "ChartPointDTO":
        return cls(
            date=format_clock_time(sample.observed_at),
            status=sample.status_code,
            ping=sample.latency_ms,
        )


@dataclass
class SiteStatusDTO:
    """A site with its chronological history.

    Attributes:
        site: The monitored site
        statuses: Samples oldest-first (left-to-right on the dashboard)
        uptime: Client-computed uptime percentage
        last_state: State of the latest sample
        tracker: Per-sample tracker entries, same order as statuses
        chart: Latency chart points, same order as statuses
    """

    site: SiteDTO
    statuses: list[SampleDTO]
    uptime: float
    last_state: str
    tracker: list[TrackerEntryDTO] = field(default_factory=list)
    chart: list[ChartPointDTO] = field(default_factory=list)

    @property
    def uptime_label(self) -> str:
        return format_uptime(self.uptime)

    @classmethod
    def from_series(
        cls, series: SiteSeries, classifier: SampleClassifier
    ) -> "SiteStatusDTO":
        tracker = []
        for sample in series.samples:
            classification = classifier.classify(sample)
            tracker.append(
                TrackerEntryDTO(
                    state=classification.state.value,
                    tooltip=classification.tooltip_label,
                )
            )

        return cls(
            site=SiteDTO(
                id=series.site.id,
                url=series.site.url,
                name=series.site.display_name,
            ),
            statuses=[SampleDTO.from_sample(sample) for sample in series.samples],
            uptime=series.uptime_percent,
            last_state=series.last_state.value,
            tracker=tracker,
            chart=[ChartPointDTO.from_sample(sample) for sample in series.samples],
        )


@dataclass
class SnapshotDTO:
    """Snapshot as published to the rendering layer.

    Attributes:
        site_statuses: Site id to site status
        all_operational: True when every site's latest sample is operational
        source: "stream" or "poll"
    """

    site_statuses: dict[str, SiteStatusDTO]
    all_operational: bool
    source: str

    @property
    def headline(self) -> str:
        return HEADLINE_ALL_OPERATIONAL if self.all_operational else HEADLINE_DEGRADED

    @classmethod
    def from_snapshot(
        cls, snapshot: Snapshot, classifier: SampleClassifier
    ) -> "SnapshotDTO":
        """Build the published view of a Snapshot.

        Args:
            snapshot: Aggregated snapshot
            classifier: Classifier the snapshot was aggregated with, so tracker
                entries agree with last_state and all_operational

        Returns:
            SnapshotDTO
        """
        return cls(
            site_statuses={
                site_id: SiteStatusDTO.from_series(series, classifier)
                for site_id, series in snapshot.site_statuses.items()
            },
            all_operational=snapshot.all_operational,
            source=snapshot.source.value,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the published JSON document shape."""
        return {
            "siteStatuses": {
                site_id: {
                    "site": {
                        "id": status.site.id,
                        "url": status.site.url,
                        "name": status.site.name,
                    },
                    "statuses": [
                        {
                            "status": sample.status,
                            "time": sample.time,
                            "msg": sample.msg,
                            "ping": sample.ping,
                        }
                        for sample in status.statuses
                    ],
                    "uptime": status.uptime,
                }
                for site_id, status in self.site_statuses.items()
            },
            "allOperational": self.all_operational,
        }


def format_uptime(uptime_percent: float) -> str:
    """Format an uptime percentage for display, e.g. "99.95%"."""
    return f"{uptime_percent:.2f}%"


def format_latency(latency_ms: float) -> str:
    """Format a latency for chart labels, e.g. "120ms" or "87.5ms"."""
    if float(latency_ms).is_integer():
        return f"{int(latency_ms)}ms"
    return f"{latency_ms}ms"
