"""Integration tests for Prometheus metrics.

Tests that metrics are recorded in the default registry and exposed in the
exposition format.
"""

from prometheus_client import REGISTRY

from sentinel.infrastructure.observability import metrics


def _value(name: str, labels: dict[str, str] | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestMetricsRecording:
    """Tests for metric recording functions."""

    def test_record_frame(self):
        before = _value("sentinel_feed_frames_total", {"source": "stream"})

        metrics.record_frame("stream")

        assert _value("sentinel_feed_frames_total", {"source": "stream"}) == before + 1

    def test_record_parse_error(self):
        before = _value("sentinel_feed_parse_errors_total")

        metrics.record_parse_error()

        assert _value("sentinel_feed_parse_errors_total") == before + 1

    def test_record_fetch_failure_counts_and_observes(self):
        failures = _value("sentinel_feed_fetch_failures_total")
        observed = _value("sentinel_feed_fetch_duration_seconds_count")

        metrics.record_fetch(0.2, success=False)
        metrics.record_fetch(0.1, success=True)

        assert _value("sentinel_feed_fetch_failures_total") == failures + 1
        assert _value("sentinel_feed_fetch_duration_seconds_count") == observed + 2

    def test_record_stream_state(self):
        metrics.record_stream_state("polling")

        assert _value("sentinel_stream_state", {"sentinel_stream_state": "polling"}) == 1.0
        assert _value("sentinel_stream_state", {"sentinel_stream_state": "streaming"}) == 0.0

    def test_record_snapshot(self):
        metrics.record_snapshot(4, all_operational=False)

        assert _value("sentinel_snapshot_sites") == 4
        assert _value("sentinel_snapshot_all_operational") == 0

        metrics.record_snapshot(4, all_operational=True)
        assert _value("sentinel_snapshot_all_operational") == 1


def test_get_metrics_content():
    content, content_type = metrics.get_metrics_content()

    assert "text/plain" in content_type
    text = content.decode()
    assert "sentinel_feed_frames_total" in text
    assert "sentinel_stream_state" in text
    assert "sentinel_snapshot_all_operational" in text
