"""Unit tests for published snapshot DTOs."""

import pytest

from sentinel.application.dtos.snapshot_dto import (
    HEADLINE_ALL_OPERATIONAL,
    HEADLINE_DEGRADED,
    ChartPointDTO,
    SnapshotDTO,
    format_latency,
    format_uptime,
)
from sentinel.application.use_cases.ingest_feed_payload import (
    IngestFeedPayloadUseCase,
)
from sentinel.domain.entities.snapshot import FeedSource
from sentinel.domain.services.sample_classifier import SampleClassifier
from sentinel.domain.services.series_normalizer import SeriesNormalizer
from sentinel.domain.services.uptime_aggregator import UptimeAggregator


@pytest.fixture
def classifier() -> SampleClassifier:
    return SampleClassifier()


@pytest.fixture
def build_snapshot(make_payload):
    """Build a Snapshot aggregated with the given classifier."""

    def _build(sites, latency_ms=100.0, classifier=None):
        use_case = IngestFeedPayloadUseCase(
            normalizer=SeriesNormalizer(),
            aggregator=UptimeAggregator(classifier),
        )
        return use_case.execute(make_payload(sites, latency_ms), FeedSource.STREAM)

    return _build


class TestSnapshotDTO:
    """Tests for SnapshotDTO."""

    def test_to_dict_shape(self, build_snapshot, classifier):
        dto = SnapshotDTO.from_snapshot(build_snapshot({"api": [1, 0]}), classifier)

        document = dto.to_dict()

        assert document["allOperational"] is False
        site_status = document["siteStatuses"]["api"]
        assert site_status["site"] == {
            "id": "api",
            "url": "https://api.example.com",
            "name": "Api",
        }
        assert site_status["uptime"] == 50.0
        assert [s["status"] for s in site_status["statuses"]] == [1, 0]
        assert set(site_status["statuses"][0]) == {"status", "time", "msg", "ping"}

    def test_statuses_oldest_first(self, build_snapshot, classifier):
        dto = SnapshotDTO.from_snapshot(build_snapshot({"api": [1, 1, 0]}), classifier)

        times = [s.time for s in dto.site_statuses["api"].statuses]
        assert times == sorted(times)

    def test_headline(self, build_snapshot, classifier):
        healthy = SnapshotDTO.from_snapshot(build_snapshot({"api": [1]}), classifier)
        down = SnapshotDTO.from_snapshot(build_snapshot({"api": [0]}), classifier)

        assert healthy.headline == HEADLINE_ALL_OPERATIONAL
        assert down.headline == HEADLINE_DEGRADED

    def test_empty_snapshot_headline(self, build_snapshot, classifier):
        dto = SnapshotDTO.from_snapshot(build_snapshot({}), classifier)

        assert dto.to_dict() == {"siteStatuses": {}, "allOperational": True}
        assert dto.headline == HEADLINE_ALL_OPERATIONAL

    def test_tracker_entries_follow_statuses(self, build_snapshot, classifier):
        dto = SnapshotDTO.from_snapshot(build_snapshot({"api": [1, 0]}), classifier)

        tracker = dto.site_statuses["api"].tracker
        assert [entry.state for entry in tracker] == ["operational", "down"]
        assert tracker[1].tooltip.startswith("Downtime: ")

    def test_tracker_agrees_with_configured_threshold(self, build_snapshot):
        classifier = SampleClassifier(degraded_latency_threshold_ms=500)
        snapshot = build_snapshot({"api": [1]}, latency_ms=700.0, classifier=classifier)

        site_status = SnapshotDTO.from_snapshot(snapshot, classifier).site_statuses["api"]

        assert site_status.last_state == "degraded"
        assert site_status.tracker[-1].state == site_status.last_state
        assert snapshot.all_operational is False

    def test_uptime_label(self, build_snapshot, classifier):
        dto = SnapshotDTO.from_snapshot(build_snapshot({"api": [1, 1, 0]}), classifier)
        assert dto.site_statuses["api"].uptime_label == "66.67%"


class TestChartPoints:
    """Tests for the per-site latency chart."""

    def test_chart_follows_statuses(self, build_snapshot, classifier):
        snapshot = build_snapshot({"api": [1, 0, 1]}, latency_ms=87.5)

        chart = SnapshotDTO.from_snapshot(snapshot, classifier).site_statuses["api"].chart

        # conftest samples are one minute apart from 15:00 UTC
        assert chart == [
            ChartPointDTO(date="3:00:00 pm", status=1, ping=87.5),
            ChartPointDTO(date="3:01:00 pm", status=0, ping=87.5),
            ChartPointDTO(date="3:02:00 pm", status=1, ping=87.5),
        ]
        assert chart[0].ping_label == "87.5ms"

    def test_chart_from_sample(self, make_sample):
        point = ChartPointDTO.from_sample(make_sample(latency_ms=120, minute=-60 * 15))

        assert point.date == "12:00:00 am"
        assert point.ping_label == "120ms"

    def test_chart_not_in_published_document(self, build_snapshot, classifier):
        document = SnapshotDTO.from_snapshot(build_snapshot({"api": [1]}), classifier).to_dict()
        assert "chart" not in document["siteStatuses"]["api"]


def test_format_uptime():
    assert format_uptime(100.0) == "100.00%"
    assert format_uptime(0.0) == "0.00%"
    assert format_uptime(99.954) == "99.95%"


@pytest.mark.parametrize(
    ("latency_ms", "expected"),
    [(120, "120ms"), (120.0, "120ms"), (0, "0ms"), (87.5, "87.5ms")],
)
def test_format_latency(latency_ms, expected):
    assert format_latency(latency_ms) == expected
