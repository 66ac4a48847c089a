"""Reactive in-memory store for the dashboard snapshot.

Holds exactly one current Snapshot (none before the first ingestion) and
notifies subscribers whenever it is replaced or a refresh fails. Data lives
for the session only and is discarded on close.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import structlog

from sentinel.application.use_cases.ingest_feed_payload import (
    IngestFeedPayloadUseCase,
)
from sentinel.domain.entities.snapshot import FeedPayload, FeedSource, Snapshot
from sentinel.infrastructure.feed.errors import FetchError
from sentinel.infrastructure.feed.stream_client import (
    FeedSink,
    StatusStreamClient,
    StreamState,
)
from sentinel.infrastructure.observability.metrics import record_snapshot

logger = structlog.get_logger(__name__)


class DashboardStatus(str, Enum):
    """What the rendering layer should show."""

    LOADING = "loading"  # nothing received yet
    READY = "ready"  # latest data is current
    STALE = "stale"  # last good snapshot shown with an error marker
    FAILED = "failed"  # no snapshot ever obtained and the last attempt failed


@dataclass(frozen=True)
class StoreState:
    """Store contents delivered to subscribers.

    Attributes:
        snapshot: Latest good snapshot, if any
        error: Error of the most recent failed refresh, cleared on success
    """

    snapshot: Snapshot | None
    error: FetchError | None = None

    @property
    def status(self) -> DashboardStatus:
        if self.snapshot is None:
            return DashboardStatus.FAILED if self.error else DashboardStatus.LOADING
        return DashboardStatus.STALE if self.error else DashboardStatus.READY


Subscriber = Callable[[StoreState], None]


class StatusStore(FeedSink):
    """Publishes Snapshots built from stream frames and polls.

    Refreshes are serialized: a refresh requested while another is in flight
    waits for it and then issues its own fetch, so results are applied in
    dispatch order. After close() nothing is applied or published.
    """

    def __init__(
        self,
        client: StatusStreamClient,
        ingest_use_case: IngestFeedPayloadUseCase,
    ) -> None:
        """Initialize the store.

        Args:
            client: Stream client used for polling refreshes
            ingest_use_case: Pipeline turning payloads into Snapshots
        """
        self._client = client
        self._ingest_use_case = ingest_use_case

        self._snapshot: Snapshot | None = None
        self._error: FetchError | None = None
        self._subscribers: list[Subscriber] = []

        self._refresh_lock = asyncio.Lock()
        self._generation = 0
        self._closed = False
        self._pending: set[asyncio.Task] = set()

    @property
    def closed(self) -> bool:
        return self._closed

    def current(self) -> Snapshot | None:
        """Return the latest Snapshot, or None before the first ingestion."""
        return self._snapshot

    def state(self) -> StoreState:
        """Return the latest Snapshot together with the last refresh error."""
        return StoreState(snapshot=self._snapshot, error=self._error)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for store updates.

        Args:
            callback: Called with a StoreState after every successful
                ingestion and every failed refresh

        Returns:
            Function removing the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def ingest(self, payload: FeedPayload, source: FeedSource) -> None:
        """Run the pipeline on a payload and publish the resulting Snapshot.

        Args:
            payload: Freshly decoded feed document
            source: Where the payload came from
        """
        if self._closed:
            logger.debug("Dropping payload received after close", source=source.value)
            return

        snapshot = self._ingest_use_case.execute(payload, source)

        self._snapshot = snapshot
        self._error = None
        record_snapshot(len(snapshot), snapshot.all_operational)
        logger.info(
            "Snapshot published",
            source=source.value,
            sites=len(snapshot),
            all_operational=snapshot.all_operational,
        )
        self._notify()

    def stream_state_changed(self, state: StreamState) -> None:
        """Start polling immediately when the stream falls back."""
        if state is StreamState.POLLING:
            self._schedule_refresh("stream_fallback")

    async def refresh(self) -> None:
        """Fetch and ingest the feed document while the client is polling.

        A no-op while the live stream is active. A failed fetch keeps the
        current Snapshot and notifies subscribers with the error.
        """
        if self._closed:
            return

        if self._client.state is not StreamState.POLLING:
            logger.debug(
                "Skipping refresh, stream is not polling",
                state=self._client.state.value,
            )
            return

        async with self._refresh_lock:
            if self._closed:
                return

            generation = self._generation
            try:
                payload = await self._client.fetch_once()

            except FetchError as e:
                if generation != self._generation:
                    return
                self._error = e
                logger.warning(
                    "Refresh failed, keeping last snapshot",
                    error=str(e),
                    has_snapshot=self._snapshot is not None,
                )
                self._notify()
                return

            if generation != self._generation:
                logger.debug("Discarding refresh result received after close")
                return

            self.ingest(payload, FeedSource.POLL)

    def handle_focus(self) -> None:
        """Refresh when the consumer regains focus."""
        self._schedule_refresh("focus")

    def handle_network_restored(self) -> None:
        """Refresh when network connectivity comes back."""
        self._schedule_refresh("network_restored")

    async def close(self) -> None:
        """Stop publishing.

        Cancels scheduled refreshes; results of fetches already in flight are
        discarded. Idempotent.
        """
        if self._closed:
            return

        self._closed = True
        self._generation += 1
        self._subscribers.clear()

        pending = list(self._pending)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._pending.clear()

        logger.info("Status store closed")

    def _schedule_refresh(self, reason: str) -> None:
        if self._closed:
            return

        logger.debug("Scheduling refresh", reason=reason)
        task = asyncio.create_task(self.refresh(), name=f"sentinel-refresh-{reason}")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _notify(self) -> None:
        state = self.state()
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception:
                logger.exception("Store subscriber raised", subscriber=repr(callback))
