"""Wire schemas for the status feed.

Pydantic models describing the JSON document emitted by the status server,
and the decoder that turns a raw frame into a domain FeedPayload.

Example document:
    {
        "siteStatuses": {
            "api": {
                "site": {"id": "api", "url": "https://api.example.com", "name": "API"},
                "statuses": [
                    {"status": 1, "time": "2024-05-01T15:04:05.123456789+02:00",
                     "msg": "200 OK", "ping": 87}
                ],
                "uptime": 99.5
            }
        }
    }
"""

import re
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sentinel.domain.entities.sample import Sample
from sentinel.domain.entities.site import Site
from sentinel.domain.entities.snapshot import FeedPayload, RawSiteStatus
from sentinel.infrastructure.feed.errors import FeedParseError

# Go encodes time.Time with up to nine fractional digits
_FRACTION_BEYOND_MICROS = re.compile(r"(\.\d{6})\d+")


class SampleSchema(BaseModel):
    """One health check in wire format."""

    status: int = Field(..., description="0 = failure, 1 = success")
    time: datetime = Field(..., description="ISO-8601 timestamp of the check")
    msg: str = Field(default="", description="Checker message")
    ping: float = Field(default=0.0, ge=0, description="Latency in milliseconds")

    @field_validator("time", mode="before")
    @classmethod
    def truncate_fraction(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _FRACTION_BEYOND_MICROS.sub(r"\1", value)
        return value

    @field_validator("time")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("msg", mode="before")
    @classmethod
    def null_message(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_domain(self) -> Sample:
        return Sample(
            observed_at=self.time,
            status_code=self.status,
            latency_ms=self.ping,
            message=self.msg,
        )


class SiteSchema(BaseModel):
    """Monitored site in wire format."""

    id: str = Field(..., min_length=1)
    url: str = Field(default="")
    name: str = Field(default="")

    def to_domain(self) -> Site:
        return Site(id=self.id, url=self.url, display_name=self.name or self.id)


class SiteStatusSchema(BaseModel):
    """One site's entry: site, newest-first history and server uptime."""

    site: SiteSchema
    statuses: list[SampleSchema] = Field(default_factory=list)
    uptime: float | None = None

    @field_validator("statuses", mode="before")
    @classmethod
    def null_statuses(cls, value: Any) -> Any:
        # A site with no stored checks is encoded as null
        return [] if value is None else value

    def to_domain(self) -> RawSiteStatus:
        return RawSiteStatus(
            site=self.site.to_domain(),
            samples=tuple(sample.to_domain() for sample in self.statuses),
            reported_uptime=self.uptime,
        )


class FeedDocumentSchema(BaseModel):
    """Top-level feed document."""

    model_config = ConfigDict(populate_by_name=True)

    site_statuses: dict[str, SiteStatusSchema] = Field(..., alias="siteStatuses")

    def to_domain(self) -> FeedPayload:
        return FeedPayload(
            site_statuses={
                site_id: status.to_domain()
                for site_id, status in self.site_statuses.items()
            }
        )


def parse_feed_payload(raw: str | bytes) -> FeedPayload:
    """Decode one feed document into a FeedPayload.

    Args:
        raw: JSON text of a stream frame or poll response body

    Returns:
        FeedPayload with samples in wire order (newest-first)

    Raises:
        FeedParseError: If the text is not JSON or does not match the schema
    """
    try:
        document = FeedDocumentSchema.model_validate_json(raw)
        return document.to_domain()
    except ValidationError as e:
        raise FeedParseError(
            f"Invalid feed document: {e.error_count()} validation error(s)"
        ) from e
    except ValueError as e:
        # Domain invariants (e.g. negative latency) surfacing from to_domain()
        raise FeedParseError(f"Invalid feed document: {e}") from e
