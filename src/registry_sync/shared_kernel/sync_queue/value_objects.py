"""Value objects for the sync request queue."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID


@dataclass(frozen=True)
class SyncRequest:
    """A single message in the sync request queue.

    Immutable snapshot of a queue row as it existed when it was read.
    The payload is the wire form of the message, ``{"id": <attribute id>}``,
    and is retained on dead-lettered rows so they can be replayed.

    Attributes:
        id: Unique message identifier
        attribute_id: Normalized attribute id (partition key)
        payload: The message body
        created_at: When the message was enqueued
        visible_at: Earliest (re)delivery time; lease expiry while claimed
        receive_count: Number of deliveries so far
        claimed_at: First delivery time (None if never delivered)
        processed_at: When the message completed (None while pending)
        outcome: Reconcile outcome or discard reason
        failed_at: When the message was dead-lettered (None if not)
        last_error: The most recent failure message
        replayed_at: When a dead-lettered message was replayed
    """

    id: UUID
    attribute_id: str
    payload: dict[str, Any]
    created_at: datetime
    visible_at: datetime
    receive_count: int = 0
    claimed_at: datetime | None = None
    processed_at: datetime | None = None
    outcome: str | None = None
    failed_at: datetime | None = None
    last_error: str | None = None
    replayed_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        """True until the message is processed or dead-lettered."""
        return self.processed_at is None and self.failed_at is None

    @property
    def is_dead_lettered(self) -> bool:
        """True once the message has been moved to the dead letter queue."""
        return self.failed_at is not None

    @property
    def requested_id(self) -> str | None:
        """The attribute id carried by the payload, if it is usable."""
        value = self.payload.get("id")
        if isinstance(value, str) and value.strip():
            return value
        return None
