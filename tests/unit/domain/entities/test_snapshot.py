"""Unit tests for FeedPayload, SiteSeries and Snapshot."""

import pytest

from sentinel.domain.entities.sample import HealthState
from sentinel.domain.entities.site import Site
from sentinel.domain.entities.snapshot import (
    FeedPayload,
    FeedSource,
    SiteSeries,
    Snapshot,
)


@pytest.fixture
def site() -> Site:
    return Site(id="api", url="https://api.example.com", display_name="API")


class TestSiteSeries:
    """Tests for SiteSeries."""

    def test_latest_is_last_sample(self, site, make_sample):
        samples = (make_sample(minute=0), make_sample(minute=1, status_code=0))
        series = SiteSeries(
            site=site,
            samples=samples,
            uptime_percent=50.0,
            last_state=HealthState.DOWN,
        )
        assert series.latest is samples[-1]

    def test_latest_is_none_when_empty(self, site):
        series = SiteSeries(
            site=site, samples=(), uptime_percent=0.0, last_state=HealthState.UNKNOWN
        )
        assert series.latest is None

    @pytest.mark.parametrize("uptime", [-0.1, 100.1])
    def test_uptime_out_of_range_raises_error(self, site, uptime):
        with pytest.raises(ValueError, match="uptime_percent must be between"):
            SiteSeries(
                site=site,
                samples=(),
                uptime_percent=uptime,
                last_state=HealthState.UNKNOWN,
            )


class TestSnapshot:
    """Tests for Snapshot immutability."""

    def test_site_statuses_are_read_only(self, site):
        series = SiteSeries(
            site=site, samples=(), uptime_percent=0.0, last_state=HealthState.UNKNOWN
        )
        snapshot = Snapshot(site_statuses={"api": series}, all_operational=False)

        with pytest.raises(TypeError):
            snapshot.site_statuses["other"] = series

    def test_snapshot_copies_source_mapping(self, site):
        series = SiteSeries(
            site=site, samples=(), uptime_percent=0.0, last_state=HealthState.UNKNOWN
        )
        source = {"api": series}
        snapshot = Snapshot(site_statuses=source, all_operational=False)

        source.clear()

        assert len(snapshot) == 1
        assert snapshot.get("api") is series

    def test_defaults(self):
        snapshot = Snapshot(site_statuses={}, all_operational=True)

        assert snapshot.source == FeedSource.STREAM
        assert snapshot.ingested_at.tzinfo is not None
        assert snapshot.get("missing") is None


class TestFeedPayload:
    """Tests for FeedPayload."""

    def test_is_empty(self, make_payload):
        assert FeedPayload(site_statuses={}).is_empty
        assert not make_payload({"api": [1]}).is_empty

    def test_site_statuses_are_read_only(self, make_payload):
        payload = make_payload({"api": [1]})
        with pytest.raises(TypeError):
            payload.site_statuses["api"] = None
