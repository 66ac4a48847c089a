"""Application layer DTOs.

This package contains data transfer objects (DTOs) for the application layer.
Uses dataclasses (not Pydantic) per Clean Architecture principles.
"""

from sentinel.application.dtos.snapshot_dto import (
    HEADLINE_ALL_OPERATIONAL,
    HEADLINE_DEGRADED,
    ChartPointDTO,
    SampleDTO,
    SiteDTO,
    SiteStatusDTO,
    SnapshotDTO,
    TrackerEntryDTO,
    format_latency,
    format_uptime,
)

__all__ = [
    "HEADLINE_ALL_OPERATIONAL",
    "HEADLINE_DEGRADED",
    "ChartPointDTO",
    "SampleDTO",
    "SiteDTO",
    "SiteStatusDTO",
    "SnapshotDTO",
    "TrackerEntryDTO",
    "format_uptime",
    "format_latency",
]
