"""Protocols (ports) for the sync request queue.

These protocols let the queue worker stay generic: the reconcile logic is
injected as a SyncRequestHandler, and the wake-up mechanism as a
SyncRequestEventSource.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable
from uuid import UUID

if TYPE_CHECKING:
    from shared_kernel.sync_queue.value_objects import SyncRequest


@runtime_checkable
class ISyncRequestQueue(Protocol):
    """Ordered, deduplicating, at-least-once queue of attribute ids.

    Messages for the same attribute id are never delivered concurrently.
    Messages that exhaust their retry budget are kept in a dead letter
    queue, never dropped.
    """

    async def enqueue(self, attribute_id: str) -> bool:
        """Add a sync request for an attribute id.

        Args:
            attribute_id: Normalized attribute id

        Returns:
            True if a new message was queued, False if it collapsed into a
            message that is already waiting for delivery

        Raises:
            EnqueueError: If the queue is unavailable
        """
        ...

    async def claim(
        self, limit: int, entry_id: UUID | None = None
    ) -> list["SyncRequest"]:
        """Deliver up to ``limit`` visible messages, at most one per attribute id.

        Args:
            limit: Maximum messages to deliver
            entry_id: Restrict delivery to this message (NOTIFY fast path)

        Returns:
            The claimed messages; each is leased for the visibility timeout
        """
        ...

    async def mark_processed(self, entry_id: UUID, outcome: str) -> None:
        """Complete a message."""
        ...

    async def schedule_retry(
        self, entry_id: UUID, error: str, delay_seconds: int
    ) -> None:
        """Record a failure and make the message visible again after a delay."""
        ...

    async def move_to_dead_letter(self, entry_id: UUID, error: str) -> None:
        """Park a message in the dead letter queue."""
        ...

    async def list_dead_letters(self, limit: int = 100) -> list["SyncRequest"]:
        """List dead-lettered messages that have not been replayed."""
        ...

    async def replay_dead_letter(self, entry_id: UUID) -> "SyncRequest | None":
        """Re-enqueue the attribute id of a dead-lettered message.

        Returns:
            The dead-lettered message, or None if no such dead letter exists
        """
        ...


@runtime_checkable
class SyncRequestHandler(Protocol):
    """Brings the external registry in line with one attribute id.

    Implementations must be idempotent. Raising an
    UnprocessableSyncRequestError or PoisonSyncRequestError makes the
    failure terminal; any other exception is retried by redelivery.
    """

    async def reconcile(self, attribute_id: str) -> str:
        """Reconcile one attribute id and return a short outcome label."""
        ...


@runtime_checkable
class SyncRequestEventSource(Protocol):
    """Push notification of newly enqueued messages.

    Implementations provide different mechanisms for being notified of new
    messages (PostgreSQL NOTIFY, a broker subscription, ...). Polling remains
    the fallback, so a missed notification only adds latency.
    """

    async def start(self, on_event: Callable[[UUID], Awaitable[None]]) -> None:
        """Start monitoring and invoke ``on_event`` with each new message id.

        This method should not return until stop() is called or an error occurs.
        """
        ...

    async def stop(self) -> None:
        """Stop the event source and release its resources."""
        ...
