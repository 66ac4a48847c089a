"""Observability infrastructure module.

Provides structured logging and Prometheus metrics.
"""

from sentinel.infrastructure.observability.logging import configure_logging, get_logger
from sentinel.infrastructure.observability.metrics import (
    get_metrics_content,
    record_fetch,
    record_frame,
    record_parse_error,
    record_snapshot,
    record_stream_state,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    # Metrics
    "get_metrics_content",
    "record_frame",
    "record_parse_error",
    "record_fetch",
    "record_stream_state",
    "record_snapshot",
]
