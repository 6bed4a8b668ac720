"""Sync queue worker for reconciling attribute ids against the registry.

The worker runs as a background task within the FastAPI application,
listening for PostgreSQL NOTIFY events and processing queued sync requests.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from uuid import UUID

from shared_kernel.sync_queue.exceptions import (
    PoisonSyncRequestError,
    UnprocessableSyncRequestError,
)

if TYPE_CHECKING:
    from shared_kernel.sync_queue.observability import SyncWorkerProbe
    from shared_kernel.sync_queue.ports import (
        ISyncRequestQueue,
        SyncRequestEventSource,
        SyncRequestHandler,
    )
    from shared_kernel.sync_queue.value_objects import SyncRequest

MALFORMED_REQUEST = "malformed sync request: payload carries no attribute id"
DISCARDED = "discarded"


class SyncQueueWorker:
    """Background worker that drains the sync request queue.

    The worker uses two strategies:
    1. Event source: Real-time processing when new messages are enqueued
    2. Polling: Fallback every N seconds to catch missed notifications,
       scheduled retries and expired leases

    This ensures both low latency and reliability.

    The reconcile logic is injected as a SyncRequestHandler, which keeps the
    worker ignorant of the registry. The handler's exceptions decide the
    disposition of a message:
    - UnprocessableSyncRequestError: completed without effect, not retried
    - PoisonSyncRequestError: moved to the dead letter queue immediately
    - anything else, including a timeout: redelivered until the retry
      budget is spent, then dead-lettered
    """

    def __init__(
        self,
        queue: ISyncRequestQueue,
        handler: SyncRequestHandler,
        probe: SyncWorkerProbe,
        event_source: SyncRequestEventSource | None = None,
        poll_interval_seconds: int = 30,
        batch_size: int = 10,
        concurrency: int = 4,
        max_retries: int = 1,
        retry_delay_seconds: int = 30,
        reconcile_timeout_seconds: float = 30.0,
    ) -> None:
        """Initialize the worker.

        Args:
            queue: The sync request queue to drain
            handler: Reconciles a single attribute id
            probe: Observability probe for logging/metrics
            event_source: Optional push notification of new messages
            poll_interval_seconds: How often to poll for visible messages
            batch_size: Maximum messages claimed per batch
            concurrency: Maximum reconciles running at the same time
            max_retries: Redeliveries allowed before a message is dead-lettered
            retry_delay_seconds: Delay before a failed message is redelivered
            reconcile_timeout_seconds: Wall-clock bound of a single reconcile
        """
        self._queue = queue
        self._handler = handler
        self._probe = probe
        self._event_source = event_source
        self._poll_interval = poll_interval_seconds
        self._batch_size = batch_size
        self._semaphore = asyncio.Semaphore(concurrency)
        self._max_retries = max_retries
        self._retry_delay = retry_delay_seconds
        self._reconcile_timeout = reconcile_timeout_seconds
        self._running = False
        self._tasks: list[asyncio.Task] = []

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the worker processing loops.

        Starts the poll loop, and the event source loop when an event source
        is configured.
        """
        self._running = True
        self._probe.worker_started()

        # Poll loop always runs as fallback
        self._tasks.append(asyncio.create_task(self._poll_loop()))

        if self._event_source is not None:
            self._tasks.append(asyncio.create_task(self._listen_loop()))

    async def stop(self) -> None:
        """Gracefully stop the worker.

        Signals all loops to stop and waits for them to complete. Messages
        claimed by an interrupted batch are redelivered when their lease
        runs out.
        """
        self._running = False

        if self._event_source is not None:
            await self._event_source.stop()

        for task in self._tasks:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        self._tasks.clear()
        self._probe.worker_stopped()

    async def _listen_loop(self) -> None:
        """Process messages as the event source announces them."""
        self._probe.listen_loop_started()
        await self._event_source.start(self._process_single)

    async def _poll_loop(self) -> None:
        """Fallback polling for visible messages.

        A full batch means more messages are probably waiting, so the loop
        continues without sleeping until a batch comes back short.
        """
        self._probe.poll_loop_started()

        while self._running:
            try:
                processed = await self.process_batch()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._probe.poll_loop_error(str(e))
                processed = 0

            if processed < self._batch_size:
                await asyncio.sleep(self._poll_interval)

    async def process_batch(self) -> int:
        """Claim and process one batch of visible messages.

        Returns:
            Number of messages claimed
        """
        requests = await self._queue.claim(self._batch_size)
        if requests:
            await asyncio.gather(*(self._process(request) for request in requests))
            self._probe.batch_processed(len(requests))
        return len(requests)

    async def _process_single(self, entry_id: UUID) -> None:
        """Process a single message by ID (from NOTIFY).

        Failures here are left to the poll loop.
        """
        if not self._running:
            return

        try:
            requests = await self._queue.claim(1, entry_id=entry_id)
            for request in requests:
                await self._process(request)
        except Exception as e:
            self._probe.notification_processing_failed(entry_id, str(e))

    async def _process(self, request: SyncRequest) -> None:
        """Reconcile one message and record its disposition."""
        async with self._semaphore:
            attribute_id = request.requested_id
            if attribute_id is None:
                await self._queue.move_to_dead_letter(request.id, MALFORMED_REQUEST)
                self._probe.request_dead_lettered(
                    request.id, request.attribute_id, MALFORMED_REQUEST
                )
                return

            try:
                outcome = await asyncio.wait_for(
                    self._handler.reconcile(attribute_id),
                    timeout=self._reconcile_timeout,
                )
            except UnprocessableSyncRequestError as e:
                await self._queue.mark_processed(request.id, DISCARDED)
                self._probe.request_discarded(request.id, attribute_id, str(e))
            except PoisonSyncRequestError as e:
                await self._queue.move_to_dead_letter(request.id, str(e))
                self._probe.request_dead_lettered(request.id, attribute_id, str(e))
            except TimeoutError:
                self._probe.request_timed_out(
                    request.id, attribute_id, self._reconcile_timeout
                )
                await self._handle_failure(
                    request,
                    attribute_id,
                    f"reconcile exceeded {self._reconcile_timeout}s",
                )
            except Exception as e:
                await self._handle_failure(request, attribute_id, str(e) or repr(e))
            else:
                await self._queue.mark_processed(request.id, str(outcome))
                self._probe.request_processed(request.id, attribute_id, str(outcome))

    async def _handle_failure(
        self,
        request: SyncRequest,
        attribute_id: str,
        error: str,
    ) -> None:
        """Handle a retryable failure, with retry or DLQ.

        ``receive_count`` already includes the current delivery, so a message
        is delivered at most ``max_retries + 1`` times.

        Args:
            request: The message that failed
            attribute_id: The attribute id being reconciled
            error: The error message
        """
        if request.receive_count > self._max_retries:
            await self._queue.move_to_dead_letter(request.id, error)
            self._probe.request_dead_lettered(request.id, attribute_id, error)
        else:
            await self._queue.schedule_retry(request.id, error, self._retry_delay)
            self._probe.request_failed(
                request.id, attribute_id, error, request.receive_count
            )
