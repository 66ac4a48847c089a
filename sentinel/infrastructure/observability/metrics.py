"""Prometheus metrics instrumentation.

Defines and exports Prometheus metrics for the status feed client.
Avoids high cardinality by omitting site ids from labels.
"""

from prometheus_client import Counter, Enum, Gauge, Histogram
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

STREAM_STATES = ["connecting", "streaming", "error", "reconnecting", "polling", "closed"]

# Feed Metrics
feed_frames_total = Counter(
    name="sentinel_feed_frames_total",
    documentation="Total number of feed payloads ingested",
    labelnames=["source"],
)

feed_parse_errors_total = Counter(
    name="sentinel_feed_parse_errors_total",
    documentation="Total number of malformed stream frames discarded",
)

feed_fetch_failures_total = Counter(
    name="sentinel_feed_fetch_failures_total",
    documentation="Total number of failed poll requests",
)

feed_fetch_duration_seconds = Histogram(
    name="sentinel_feed_fetch_duration_seconds",
    documentation="Poll request duration in seconds (including retries)",
    buckets=(
        0.01,  # 10ms
        0.05,  # 50ms
        0.1,  # 100ms
        0.25,  # 250ms
        0.5,  # 500ms
        1.0,  # 1s
        2.5,  # 2.5s
        5.0,  # 5s
        10.0,  # 10s
        30.0,  # 30s
    ),
)

stream_state = Enum(
    name="sentinel_stream_state",
    documentation="Current state of the status stream client",
    states=STREAM_STATES,
)

# Snapshot Metrics
snapshot_sites = Gauge(
    name="sentinel_snapshot_sites",
    documentation="Number of sites in the current snapshot",
)

snapshot_all_operational = Gauge(
    name="sentinel_snapshot_all_operational",
    documentation="1 when every site in the current snapshot is operational",
)


def record_frame(source: str) -> None:
    """Record an ingested feed payload.

    Args:
        source: "stream" or "poll"
    """
    feed_frames_total.labels(source=source).inc()


def record_parse_error() -> None:
    """Record a discarded malformed frame."""
    feed_parse_errors_total.inc()


def record_fetch(duration_seconds: float, success: bool) -> None:
    """Record a poll request.

    Args:
        duration_seconds: Request duration in seconds
        success: Whether the poll produced a payload
    """
    feed_fetch_duration_seconds.observe(duration_seconds)
    if not success:
        feed_fetch_failures_total.inc()


def record_stream_state(state: str) -> None:
    """Record the stream client's current state.

    Args:
        state: One of STREAM_STATES
    """
    stream_state.state(state)


def record_snapshot(site_count: int, all_operational: bool) -> None:
    """Record the shape of a newly published snapshot.

    Args:
        site_count: Number of sites in the snapshot
        all_operational: Dashboard-wide operational flag
    """
    snapshot_sites.set(site_count)
    snapshot_all_operational.set(1 if all_operational else 0)


def get_metrics_content() -> tuple[bytes, str]:
    """Get Prometheus metrics in exposition format.

    Returns:
        Tuple of (metrics_content, content_type)
    """
    return generate_latest(), CONTENT_TYPE_LATEST
