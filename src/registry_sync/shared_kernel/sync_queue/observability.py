"""Observability probes for the sync request queue and its worker.

Following Domain Oriented Observability, probes capture domain-significant
events and metrics without cluttering business logic with logging concerns.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

import structlog

logger = structlog.get_logger()


class SyncWorkerProbe(Protocol):
    """Protocol for sync queue worker observability."""

    def worker_started(self) -> None:
        """Called when the worker starts."""
        ...

    def worker_stopped(self) -> None:
        """Called when the worker stops."""
        ...

    def request_processed(
        self, entry_id: UUID, attribute_id: str, outcome: str
    ) -> None:
        """Called when a message is reconciled successfully."""
        ...

    def request_discarded(
        self, entry_id: UUID, attribute_id: str, reason: str
    ) -> None:
        """Called when a message is handled without effect and not retried."""
        ...

    def request_failed(
        self, entry_id: UUID, attribute_id: str, error: str, receive_count: int
    ) -> None:
        """Called when a message fails and will be redelivered."""
        ...

    def request_timed_out(
        self, entry_id: UUID, attribute_id: str, timeout_seconds: float
    ) -> None:
        """Called when a reconcile exceeds its wall-clock bound."""
        ...

    def request_dead_lettered(
        self, entry_id: UUID, attribute_id: str, error: str
    ) -> None:
        """Called when a message is moved to the dead letter queue."""
        ...

    def batch_processed(self, count: int) -> None:
        """Called when a batch of messages is processed."""
        ...

    def listen_loop_started(self) -> None:
        """Called when the event source loop starts."""
        ...

    def poll_loop_started(self) -> None:
        """Called when the poll loop starts."""
        ...

    def poll_loop_error(self, error: str) -> None:
        """Called when an error occurs in the poll loop."""
        ...

    def notification_processing_failed(self, entry_id: UUID, error: str) -> None:
        """Called when the fast path fails; polling will pick the message up."""
        ...


class DefaultSyncWorkerProbe:
    """Default implementation using structlog.

    Logs all worker events with appropriate log levels.
    """

    def __init__(self) -> None:
        """Initialize the probe with a logger."""
        self._log = logger.bind(component="sync_queue_worker")

    def worker_started(self) -> None:
        """Log worker start."""
        self._log.info("sync_worker_started")

    def worker_stopped(self) -> None:
        """Log worker stop."""
        self._log.info("sync_worker_stopped")

    def request_processed(
        self, entry_id: UUID, attribute_id: str, outcome: str
    ) -> None:
        """Log successful reconcile."""
        self._log.info(
            "sync_request_processed",
            entry_id=str(entry_id),
            attribute_id=attribute_id,
            outcome=outcome,
        )

    def request_discarded(
        self, entry_id: UUID, attribute_id: str, reason: str
    ) -> None:
        """Log a terminal, non-alerting failure."""
        self._log.warning(
            "sync_request_discarded",
            entry_id=str(entry_id),
            attribute_id=attribute_id,
            reason=reason,
        )

    def request_failed(
        self, entry_id: UUID, attribute_id: str, error: str, receive_count: int
    ) -> None:
        """Log failed reconcile that will be redelivered."""
        self._log.warning(
            "sync_request_failed",
            entry_id=str(entry_id),
            attribute_id=attribute_id,
            error=error,
            receive_count=receive_count,
        )

    def request_timed_out(
        self, entry_id: UUID, attribute_id: str, timeout_seconds: float
    ) -> None:
        """Log reconcile timeout."""
        self._log.warning(
            "sync_request_timed_out",
            entry_id=str(entry_id),
            attribute_id=attribute_id,
            timeout_seconds=timeout_seconds,
        )

    def request_dead_lettered(
        self, entry_id: UUID, attribute_id: str, error: str
    ) -> None:
        """Log message moved to the dead letter queue."""
        self._log.error(
            "sync_request_dead_lettered",
            entry_id=str(entry_id),
            attribute_id=attribute_id,
            error=error,
        )

    def batch_processed(self, count: int) -> None:
        """Log batch processing."""
        if count > 0:
            self._log.info("sync_batch_processed", count=count)

    def listen_loop_started(self) -> None:
        """Log event source loop start."""
        self._log.info("sync_listen_loop_started")

    def poll_loop_started(self) -> None:
        """Log poll loop start."""
        self._log.info("sync_poll_loop_started")

    def poll_loop_error(self, error: str) -> None:
        """Log poll loop error."""
        self._log.warning("sync_poll_loop_error", error=error)

    def notification_processing_failed(self, entry_id: UUID, error: str) -> None:
        """Log fast path failure."""
        self._log.warning(
            "sync_notification_processing_failed",
            entry_id=str(entry_id),
            error=error,
        )


class SyncRequestQueueProbe(Protocol):
    """Protocol for queue-level observability."""

    def request_enqueued(self, attribute_id: str, entry_id: UUID) -> None:
        """Called when a new message is written."""
        ...

    def request_deduplicated(self, attribute_id: str) -> None:
        """Called when an enqueue collapses into a waiting message."""
        ...

    def enqueue_failed(self, attribute_id: str, error: str) -> None:
        """Called when the queue rejects a write."""
        ...

    def request_redelivered(
        self, entry_id: UUID, attribute_id: str, receive_count: int
    ) -> None:
        """Called when a message that was delivered before is delivered again."""
        ...

    def dead_letter_replayed(self, entry_id: UUID, attribute_id: str) -> None:
        """Called when a dead-lettered message is re-enqueued."""
        ...


class DefaultSyncRequestQueueProbe:
    """Default implementation using structlog."""

    def __init__(self) -> None:
        """Initialize the probe with a logger."""
        self._log = logger.bind(component="sync_request_queue")

    def request_enqueued(self, attribute_id: str, entry_id: UUID) -> None:
        """Log new message."""
        self._log.debug(
            "sync_request_enqueued",
            attribute_id=attribute_id,
            entry_id=str(entry_id),
        )

    def request_deduplicated(self, attribute_id: str) -> None:
        """Log collapsed enqueue."""
        self._log.debug("sync_request_deduplicated", attribute_id=attribute_id)

    def enqueue_failed(self, attribute_id: str, error: str) -> None:
        """Log rejected write."""
        self._log.error(
            "sync_request_enqueue_failed",
            attribute_id=attribute_id,
            error=error,
        )

    def request_redelivered(
        self, entry_id: UUID, attribute_id: str, receive_count: int
    ) -> None:
        """Log redelivery after a failure or an expired lease."""
        self._log.warning(
            "sync_request_redelivered",
            entry_id=str(entry_id),
            attribute_id=attribute_id,
            receive_count=receive_count,
        )

    def dead_letter_replayed(self, entry_id: UUID, attribute_id: str) -> None:
        """Log replay."""
        self._log.info(
            "sync_dead_letter_replayed",
            entry_id=str(entry_id),
            attribute_id=attribute_id,
        )


class EventSourceProbe(Protocol):
    """Protocol for event source observability."""

    def event_source_started(self, channel: str) -> None:
        """Called when the event source starts listening."""
        ...

    def event_source_stopped(self) -> None:
        """Called when the event source stops."""
        ...

    def notification_received(self, entry_id: UUID) -> None:
        """Called when a valid notification is received."""
        ...

    def invalid_notification_ignored(self, payload: str, reason: str) -> None:
        """Called when an invalid notification is ignored."""
        ...

    def listener_error(self, error: str) -> None:
        """Called when an error occurs in the listener."""
        ...


class DefaultEventSourceProbe:
    """Default implementation using structlog."""

    def __init__(self) -> None:
        """Initialize the probe with a logger."""
        self._log = logger.bind(component="event_source")

    def event_source_started(self, channel: str) -> None:
        """Log event source start."""
        self._log.info("event_source_started", channel=channel)

    def event_source_stopped(self) -> None:
        """Log event source stop."""
        self._log.info("event_source_stopped")

    def notification_received(self, entry_id: UUID) -> None:
        """Log notification received."""
        self._log.debug("notification_received", entry_id=str(entry_id))

    def invalid_notification_ignored(self, payload: str, reason: str) -> None:
        """Log invalid notification ignored."""
        self._log.warning(
            "invalid_notification_ignored",
            payload=payload,
            reason=reason,
        )

    def listener_error(self, error: str) -> None:
        """Log listener error."""
        self._log.error("event_source_listener_error", error=error)
