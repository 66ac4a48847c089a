"""Shared test fixtures.

Factories for samples, feed documents and decoded payloads.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from sentinel.domain.entities.sample import Sample
from sentinel.domain.entities.site import Site
from sentinel.domain.entities.snapshot import FeedPayload, RawSiteStatus

BASE_TIME = datetime(2024, 5, 1, 15, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_sample():
    """Build a Sample observed `minute` minutes after BASE_TIME."""

    def _make(
        status_code: int = 1,
        latency_ms: float = 100.0,
        minute: int = 0,
        message: str = "200 OK",
    ) -> Sample:
        return Sample(
            observed_at=BASE_TIME + timedelta(minutes=minute),
            status_code=status_code,
            latency_ms=latency_ms,
            message=message,
        )

    return _make


@pytest.fixture
def make_payload(make_sample):
    """Build a FeedPayload from {site_id: [status codes, oldest first]}.

    Samples are stored newest-first, as the feed delivers them.
    """

    def _make(sites: dict[str, list[int]], latency_ms: float = 100.0) -> FeedPayload:
        site_statuses = {}
        for site_id, codes in sites.items():
            chronological = [
                make_sample(status_code=code, latency_ms=latency_ms, minute=index)
                for index, code in enumerate(codes)
            ]
            site_statuses[site_id] = RawSiteStatus(
                site=Site(
                    id=site_id,
                    url=f"https://{site_id}.example.com",
                    display_name=site_id.title(),
                ),
                samples=tuple(reversed(chronological)),
                reported_uptime=99.0,
            )
        return FeedPayload(site_statuses=site_statuses)

    return _make


@pytest.fixture
def make_feed_document():
    """Build a wire-format feed document from {site_id: [status codes, oldest first]}."""

    def _make(sites: dict[str, list[int]], ping: int = 120) -> dict[str, Any]:
        site_statuses = {}
        for site_id, codes in sites.items():
            statuses = [
                {
                    "status": code,
                    "time": (BASE_TIME + timedelta(seconds=30 * index)).isoformat(),
                    "msg": "200 OK" if code else "503 Service Unavailable",
                    "ping": ping,
                }
                for index, code in enumerate(codes)
            ]
            statuses.reverse()
            site_statuses[site_id] = {
                "site": {
                    "id": site_id,
                    "url": f"https://{site_id}.example.com",
                    "name": site_id,
                },
                "statuses": statuses,
                "uptime": 100.0,
            }
        return {"siteStatuses": site_statuses}

    return _make
