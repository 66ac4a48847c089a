"""Use cases - Application-specific business rules.

This package contains use cases that orchestrate domain logic
and implement application-specific workflows.
"""

from sentinel.application.use_cases.ingest_feed_payload import (
    IngestFeedPayloadUseCase,
)

__all__ = [
    "IngestFeedPayloadUseCase",
]
