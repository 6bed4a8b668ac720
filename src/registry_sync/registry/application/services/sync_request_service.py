"""Enqueue API of the registry bounded context.

The attribute CRUD API calls into this service after every mutation, and
the periodic reconciler calls it for every stored attribute.
"""

from __future__ import annotations

from uuid import UUID

from registry.application.observability import (
    DefaultSyncRequestServiceProbe,
    SyncRequestServiceProbe,
)
from registry.ports.exceptions import InvalidAttributeIdError
from shared_kernel.sync_queue.exceptions import EnqueueError
from shared_kernel.sync_queue.ports import ISyncRequestQueue
from shared_kernel.sync_queue.value_objects import SyncRequest


def normalize_attribute_id(raw_id: str) -> str:
    """Strip and upper-case an attribute id.

    Raises:
        InvalidAttributeIdError: If the id is empty or blank
    """
    attribute_id = (raw_id or "").strip()
    if not attribute_id:
        raise InvalidAttributeIdError("Attribute id must not be empty")
    return attribute_id.upper()


class SyncRequestService:
    """Application service requesting registry syncs for attribute ids."""

    def __init__(
        self,
        queue: ISyncRequestQueue,
        probe: SyncRequestServiceProbe | None = None,
    ):
        """Initialize the service.

        Args:
            queue: The sync request queue
            probe: Optional domain probe for observability
        """
        self._queue = queue
        self._probe = probe or DefaultSyncRequestServiceProbe()

    async def enqueue(self, attribute_id: str) -> bool:
        """Request a registry sync for one attribute id.

        Args:
            attribute_id: Attribute id in any casing

        Returns:
            True if a new message was queued, False if deduplicated

        Raises:
            InvalidAttributeIdError: If the id is empty or blank
            EnqueueError: If the queue is unavailable
        """
        try:
            normalized = normalize_attribute_id(attribute_id)
        except InvalidAttributeIdError:
            self._probe.invalid_attribute_id(str(attribute_id))
            raise

        queued = await self._queue.enqueue(normalized)
        self._probe.sync_requested(normalized, deduplicated=not queued)
        return queued

    async def request_sync_after_mutation(self, attribute_id: str) -> bool:
        """Request a sync from the attribute mutation path.

        Queue failures must not fail the mutation: they are logged at error
        level and the periodic sweep repairs the registry later.

        Returns:
            True if a new message was queued, False if deduplicated or failed

        Raises:
            InvalidAttributeIdError: If the id is empty or blank
        """
        try:
            return await self.enqueue(attribute_id)
        except EnqueueError as e:
            self._probe.mutation_sync_failed(str(attribute_id), str(e))
            return False

    async def list_dead_letters(self, limit: int = 100) -> list[SyncRequest]:
        """List dead-lettered sync requests awaiting operator action."""
        return await self._queue.list_dead_letters(limit=limit)

    async def replay_dead_letter(self, entry_id: UUID) -> SyncRequest | None:
        """Re-enqueue the attribute id of a dead-lettered sync request.

        Returns:
            The dead letter that was replayed, or None if there is none

        Raises:
            EnqueueError: If the queue is unavailable
        """
        return await self._queue.replay_dead_letter(entry_id)
