"""Status feed integration.

Wire decoding, event-stream framing and the stream/polling client.
"""

from sentinel.infrastructure.feed.errors import (
    FeedConnectionError,
    FeedError,
    FeedParseError,
    FetchError,
    InvalidStateTransitionError,
)
from sentinel.infrastructure.feed.schemas import parse_feed_payload
from sentinel.infrastructure.feed.stream_client import (
    FeedSink,
    StatusStreamClient,
    StreamState,
)

__all__ = [
    "FeedError",
    "FeedConnectionError",
    "FeedParseError",
    "FetchError",
    "InvalidStateTransitionError",
    "parse_feed_payload",
    "FeedSink",
    "StatusStreamClient",
    "StreamState",
]
