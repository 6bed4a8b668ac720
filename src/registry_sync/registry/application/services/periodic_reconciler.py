"""Periodic reconciler for the registry bounded context.

Sweeps the whole attribute store and enqueues every id, repairing anything
the low-latency path lost. The reconciler never talks to the registry
itself; stale registry groups are found because their ids are still in the
store, and orphaned groups are removed when their deletion message arrives.
"""

from __future__ import annotations

from dataclasses import dataclass

from attributes.ports.repositories import IAttributeStore
from registry.application.observability import (
    DefaultPeriodicReconcilerProbe,
    PeriodicReconcilerProbe,
)
from registry.application.services.sync_request_service import SyncRequestService
from registry.ports.exceptions import InvalidAttributeIdError
from shared_kernel.sync_queue.exceptions import EnqueueError


@dataclass(frozen=True)
class SweepReport:
    """Summary of a sweep.

    Attributes:
        pages_read: Store pages read
        enqueued: Ids that produced a new message
        deduplicated: Ids that collapsed into an already queued message
        failed: Ids that could not be enqueued
        last_token: Token of the last page boundary crossed
    """

    pages_read: int = 0
    enqueued: int = 0
    deduplicated: int = 0
    failed: int = 0
    last_token: str | None = None


class PeriodicReconciler:
    """Enqueues every attribute id in the store."""

    def __init__(
        self,
        store: IAttributeStore,
        sync_requests: SyncRequestService,
        page_size: int = 100,
        probe: PeriodicReconcilerProbe | None = None,
    ):
        """Initialize the reconciler.

        Args:
            store: Read access to the attribute store
            sync_requests: Enqueue API
            page_size: Attributes read per store page
            probe: Optional domain probe for observability
        """
        self._store = store
        self._sync_requests = sync_requests
        self._page_size = page_size
        self._probe = probe or DefaultPeriodicReconcilerProbe()

    async def sweep(self, start_token: str | None = None) -> SweepReport:
        """Read the store page by page and enqueue every id.

        A failed enqueue is logged and counted; the sweep moves on. Every
        page boundary is logged with its token, which can be passed back as
        ``start_token`` to resume an interrupted sweep.

        Args:
            start_token: Continuation token to resume from, None for a full sweep

        Returns:
            Counts for the sweep
        """
        self._probe.sweep_started(start_token)

        pages_read = enqueued = deduplicated = failed = 0
        token = start_token

        while True:
            page = await self._store.list_page(self._page_size, token)
            pages_read += 1

            for attribute in page.items:
                try:
                    queued = await self._sync_requests.enqueue(attribute.id)
                except (EnqueueError, InvalidAttributeIdError) as e:
                    failed += 1
                    self._probe.enqueue_failed(attribute.id, str(e))
                    continue

                if queued:
                    enqueued += 1
                else:
                    deduplicated += 1

            self._probe.page_read(pages_read, len(page.items), page.next_token)

            if not page.next_token:
                break
            token = page.next_token

        report = SweepReport(
            pages_read=pages_read,
            enqueued=enqueued,
            deduplicated=deduplicated,
            failed=failed,
            last_token=token,
        )
        self._probe.sweep_completed(report)
        return report
