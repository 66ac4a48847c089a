"""Status feed error hierarchy.

None of these are fatal: connection errors degrade to polling, parse errors
drop a single frame, fetch errors leave the last good snapshot on display.
"""


class FeedError(Exception):
    """Base exception for status feed errors."""

    pass


class FeedConnectionError(FeedError):
    """Live stream is unreachable, rejected the request, or was dropped."""

    pass


class FeedParseError(FeedError):
    """A frame or response body is not a valid feed document."""

    pass


class FetchError(FeedError):
    """A polling request failed after retries."""

    pass


class InvalidStateTransitionError(FeedError):
    """Stream client asked to move between states that are not connected."""

    pass
