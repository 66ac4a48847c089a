"""Status feed stream client.

This module owns the connection to the status feed. It keeps a server-sent
event stream open and hands every decoded frame to a sink; when the stream
fails it falls back to request/response polling for the rest of the session.

State machine:

    CONNECTING   -> STREAMING | ERROR | CLOSED
    STREAMING    -> ERROR | CLOSED
    ERROR        -> RECONNECTING | POLLING | CLOSED
    RECONNECTING -> STREAMING | ERROR | CLOSED
    POLLING      -> CLOSED
"""

import asyncio
import contextlib
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from sentinel.domain.entities.snapshot import FeedPayload, FeedSource
from sentinel.infrastructure.config.settings import FeedSettings, get_settings
from sentinel.infrastructure.feed.errors import (
    FeedConnectionError,
    FeedParseError,
    FetchError,
    InvalidStateTransitionError,
)
from sentinel.infrastructure.feed.event_stream import EventFrame, iter_event_frames
from sentinel.infrastructure.feed.schemas import parse_feed_payload
from sentinel.infrastructure.observability.metrics import (
    record_fetch,
    record_frame,
    record_parse_error,
    record_stream_state,
)

logger = structlog.get_logger(__name__)


class StreamState(str, Enum):
    """Lifecycle states of the stream client."""

    CONNECTING = "connecting"
    STREAMING = "streaming"
    ERROR = "error"
    RECONNECTING = "reconnecting"
    POLLING = "polling"
    CLOSED = "closed"


_TRANSITIONS: dict[StreamState, frozenset[StreamState]] = {
    StreamState.CONNECTING: frozenset(
        {StreamState.STREAMING, StreamState.ERROR, StreamState.CLOSED}
    ),
    StreamState.STREAMING: frozenset({StreamState.ERROR, StreamState.CLOSED}),
    StreamState.ERROR: frozenset(
        {StreamState.RECONNECTING, StreamState.POLLING, StreamState.CLOSED}
    ),
    StreamState.RECONNECTING: frozenset(
        {StreamState.STREAMING, StreamState.ERROR, StreamState.CLOSED}
    ),
    StreamState.POLLING: frozenset({StreamState.CLOSED}),
    StreamState.CLOSED: frozenset(),
}


class FeedSink(ABC):
    """Receiver of decoded payloads and state changes.

    Called from the stream task in delivery order, one call at a time.
    """

    @abstractmethod
    def ingest(self, payload: FeedPayload, source: FeedSource) -> None:
        """Consume one decoded feed payload."""
        pass

    @abstractmethod
    def stream_state_changed(self, state: StreamState) -> None:
        """React to a stream client state transition."""
        pass


class StatusStreamClient:
    """Client for the status feed (event stream first, polling fallback).

    The client exclusively owns its HTTP connection. stop() is the only way
    to release it and is safe to call in any state.

    Attributes:
        feed_url: Event-stream endpoint
        poll_url: Request/response endpoint used after fallback
    """

    def __init__(
        self,
        feed_url: str,
        poll_url: str,
        timeout: float = 10.0,
        fetch_retry_attempts: int = 3,
        reconnect_attempts: int = 0,
        reconnect_delay_ms: int = 1000,
        stream_idle_timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the stream client.

        Args:
            feed_url: Event-stream endpoint of the feed
            poll_url: Polling endpoint returning the same document
            timeout: Connect/request timeout in seconds
            fetch_retry_attempts: Attempts per poll on transport errors
            reconnect_attempts: Stream reconnections before falling back to polling
            reconnect_delay_ms: Delay before each reconnection attempt
            stream_idle_timeout: Seconds without any stream data after which the
                connection is considered dropped
            client: Pre-configured HTTP client (not closed by stop())
        """
        if fetch_retry_attempts < 1:
            raise ValueError(
                f"fetch_retry_attempts must be at least 1, got {fetch_retry_attempts}"
            )
        if reconnect_attempts < 0:
            raise ValueError(
                f"reconnect_attempts must be non-negative, got {reconnect_attempts}"
            )
        if stream_idle_timeout <= 0:
            raise ValueError(
                f"stream_idle_timeout must be positive, got {stream_idle_timeout}"
            )

        self.feed_url = feed_url
        self.poll_url = poll_url
        self._timeout = timeout
        self._fetch_retry_attempts = fetch_retry_attempts
        self._reconnect_attempts = reconnect_attempts
        self._reconnect_delay_ms = reconnect_delay_ms
        self._stream_idle_timeout = stream_idle_timeout

        self._owns_client = client is None
        self.client = client or httpx.AsyncClient()

        self._state = StreamState.CONNECTING
        self._sink: FeedSink | None = None
        self._task: asyncio.Task | None = None
        record_stream_state(self._state.value)

    @classmethod
    def from_settings(
        cls, settings: FeedSettings | None = None, **kwargs: Any
    ) -> "StatusStreamClient":
        """Build a client from feed settings.

        Args:
            settings: Feed settings (defaults to global settings)
            **kwargs: Overrides forwarded to the constructor

        Returns:
            StatusStreamClient
        """
        feed = settings or get_settings().feed
        options: dict[str, Any] = {
            "feed_url": feed.url,
            "poll_url": feed.poll_url,
            "timeout": feed.request_timeout_seconds,
            "fetch_retry_attempts": feed.fetch_retry_attempts,
            "reconnect_attempts": feed.reconnect_attempts,
            "reconnect_delay_ms": feed.reconnect_delay_ms,
            "stream_idle_timeout": feed.stream_idle_timeout_seconds,
        }
        options.update(kwargs)
        return cls(**options)

    @property
    def state(self) -> StreamState:
        return self._state

    async def __aenter__(self) -> "StatusStreamClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.stop()

    def start(self, sink: FeedSink) -> None:
        """Open the stream in a background task.

        Args:
            sink: Receiver for payloads and state changes

        Raises:
            RuntimeError: If the client was already started or is closed
        """
        if self._task is not None or self._state is StreamState.CLOSED:
            raise RuntimeError("Status stream client can only be started once")

        self._sink = sink
        self._task = asyncio.create_task(self.run(), name="sentinel-status-stream")
        self._task.add_done_callback(self._on_task_done)

    async def run(self) -> None:
        """Stream until the connection fails, then switch to polling.

        Returns once the client has reached POLLING; the connection is
        released on every exit path.
        """
        attempt = 0
        while True:
            try:
                await self._consume_stream()
            except FeedConnectionError as e:
                logger.warning(
                    "Status stream failed",
                    feed_url=self.feed_url,
                    error=str(e),
                    attempt=attempt,
                )

            self._set_state(StreamState.ERROR)
            if attempt >= self._reconnect_attempts:
                break

            attempt += 1
            await asyncio.sleep(self._reconnect_delay_ms / 1000)
            self._set_state(StreamState.RECONNECTING)

        logger.info("Falling back to polling", poll_url=self.poll_url)
        self._set_state(StreamState.POLLING)

    async def fetch_once(self) -> FeedPayload:
        """Fetch the current feed document with a single request.

        Returns:
            Decoded FeedPayload (samples newest-first)

        Raises:
            FetchError: If the request fails after retries, returns an error
                status, or the body is not a valid feed document
        """
        if self._state is StreamState.CLOSED:
            raise FetchError("Status stream client is closed")

        started = time.perf_counter()
        success = False
        try:
            response = await self._get_status()
            response.raise_for_status()
            payload = parse_feed_payload(response.content)
            success = True

        except httpx.HTTPStatusError as e:
            logger.error(
                "Status endpoint HTTP error",
                status_code=e.response.status_code,
                poll_url=self.poll_url,
            )
            raise FetchError(
                f"Status endpoint returned error: {e.response.status_code}"
            ) from e

        except httpx.HTTPError as e:
            logger.error("Status endpoint connection error", error=str(e))
            raise FetchError(f"Failed to reach status endpoint: {e}") from e

        except FeedParseError as e:
            logger.error("Status endpoint returned invalid document", error=str(e))
            raise FetchError(f"Invalid status document: {e}") from e

        finally:
            record_fetch(time.perf_counter() - started, success)

        record_frame(FeedSource.POLL.value)
        return payload

    async def stop(self) -> None:
        """Release the connection and cancel the stream task.

        Idempotent; after it returns the client is CLOSED.
        """
        if self._state is StreamState.CLOSED:
            return

        task, self._task = self._task, None
        try:
            if task is not None and not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        finally:
            if self._owns_client:
                await self.client.aclose()
            self._set_state(StreamState.CLOSED)
            logger.info("Status stream client closed")

    async def _consume_stream(self) -> None:
        """Read frames until the stream ends or fails.

        Raises:
            FeedConnectionError: Always; a healthy stream never ends on its own
        """
        try:
            async with self.client.stream(
                "GET",
                self.feed_url,
                headers={"Accept": "text/event-stream", "Cache-Control": "no-cache"},
                timeout=httpx.Timeout(self._timeout, read=self._stream_idle_timeout),
            ) as response:
                response.raise_for_status()
                async for frame in iter_event_frames(response.aiter_lines()):
                    self._handle_frame(frame)

        except httpx.HTTPStatusError as e:
            raise FeedConnectionError(
                f"Status stream returned error: {e.response.status_code}"
            ) from e

        except (httpx.HTTPError, httpx.StreamError) as e:
            raise FeedConnectionError(f"Status stream connection failed: {e}") from e

        raise FeedConnectionError("Status stream closed by server")

    def _handle_frame(self, frame: EventFrame) -> None:
        if frame.event != "message":
            logger.debug("Ignoring status stream event", event_type=frame.event)
            return

        try:
            payload = parse_feed_payload(frame.data)
        except FeedParseError as e:
            record_parse_error()
            logger.warning(
                "Discarding malformed status frame",
                error=str(e),
                frame_bytes=len(frame.data),
            )
            return

        if self._state is not StreamState.STREAMING:
            self._set_state(StreamState.STREAMING)

        record_frame(FeedSource.STREAM.value)
        if self._sink is None:
            return

        try:
            self._sink.ingest(payload, FeedSource.STREAM)
        except Exception:
            logger.exception("Feed sink failed to ingest status frame")

    async def _get_status(self) -> httpx.Response:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(self._fetch_retry_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
            reraise=True,
        ):
            with attempt:
                return await self.client.get(
                    self.poll_url,
                    headers={"Accept": "application/json"},
                    timeout=self._timeout,
                )

    def _set_state(self, new_state: StreamState) -> None:
        if new_state not in _TRANSITIONS[self._state]:
            raise InvalidStateTransitionError(
                f"Cannot move from {self._state.value} to {new_state.value}"
            )

        previous, self._state = self._state, new_state
        record_stream_state(new_state.value)
        logger.info(
            "Status stream state changed",
            previous=previous.value,
            state=new_state.value,
        )

        if self._sink is not None:
            self._sink.stream_state_changed(new_state)

    def _on_task_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "Status stream task crashed",
                error=str(error),
                error_type=type(error).__name__,
                exc_info=error,
            )
