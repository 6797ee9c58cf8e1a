"""Queue Monitor: keeps a polled view of one job kind's queue."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from contentdesk.config import DEFAULT_POLL_INTERVAL_MS
from contentdesk.errors import ContentDeskError
from contentdesk.models.jobs import GenerationJob, JobKind, QueueSnapshot
from contentdesk.poller import PollHandle, Poller
from contentdesk.queue.generation import GenerationQueueClient

logger = logging.getLogger(__name__)


class QueueMonitor:
    """Refreshes a :class:`QueueSnapshot` on a fixed interval.

    A failed refresh empties both lists instead of keeping the last good
    snapshot; the failure is kept in :attr:`last_error`.

    Use as an async context manager, or pair :meth:`start` with
    :meth:`stop`, so the timer never outlives its owner.
    """

    def __init__(
        self,
        queue: GenerationQueueClient,
        kind: JobKind | str,
        poller: Optional[Poller] = None,
        interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        on_update: Optional[Callable[["QueueMonitor"], Any]] = None,
    ) -> None:
        self._queue = queue
        self.kind = JobKind(kind)
        self._poller = poller or Poller()
        self.interval_ms = interval_ms
        self._on_update = on_update
        self._handle: Optional[PollHandle] = None
        self.snapshot = QueueSnapshot()
        self.last_error: Optional[ContentDeskError] = None
        self.refresh_count = 0

    @property
    def processing(self) -> list[GenerationJob]:
        return self.snapshot.processing

    @property
    def completed(self) -> list[GenerationJob]:
        return self.snapshot.completed

    @property
    def running(self) -> bool:
        return self._handle is not None and not self._handle.stopped

    async def refresh(self) -> QueueSnapshot:
        """Fetch the queue once and replace the current snapshot."""
        try:
            snapshot = await self._queue.list_queue(self.kind)
        except ContentDeskError as exc:
            logger.warning("Queue refresh for %s failed: %s", self.kind.value, exc)
            self.snapshot = QueueSnapshot()
            self.last_error = exc
        else:
            self.snapshot = snapshot
            self.last_error = None
        self.refresh_count += 1
        if self._on_update is not None:
            self._on_update(self)
        return self.snapshot

    def start(self) -> PollHandle:
        """Begin polling; refreshes immediately.  No-op while already running."""
        if self.running:
            return self._handle  # type: ignore[return-value]
        self._handle = self._poller.start(self.interval_ms, self.refresh)
        return self._handle

    def stop(self) -> None:
        if self._handle is not None:
            self._poller.stop(self._handle)
            self._handle = None

    async def __aenter__(self) -> "QueueMonitor":
        self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.stop()
