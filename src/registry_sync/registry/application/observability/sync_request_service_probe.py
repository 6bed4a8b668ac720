"""Protocol for sync request service observability."""

from __future__ import annotations

from typing import Protocol

import structlog


class SyncRequestServiceProbe(Protocol):
    """Domain probe for enqueue operations."""

    def sync_requested(self, attribute_id: str, deduplicated: bool) -> None:
        """Record that a sync request was accepted by the queue."""
        ...

    def invalid_attribute_id(self, raw_id: str) -> None:
        """Record that an enqueue was rejected before reaching the queue."""
        ...

    def mutation_sync_failed(self, attribute_id: str, error: str) -> None:
        """Record that an attribute mutation could not request a sync.

        The mutation itself goes through; the next sweep repairs the registry.
        """
        ...


class DefaultSyncRequestServiceProbe:
    """Default implementation of SyncRequestServiceProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def sync_requested(self, attribute_id: str, deduplicated: bool) -> None:
        self._logger.debug(
            "sync_requested",
            attribute_id=attribute_id,
            deduplicated=deduplicated,
        )

    def invalid_attribute_id(self, raw_id: str) -> None:
        self._logger.warning("invalid_attribute_id", raw_id=raw_id)

    def mutation_sync_failed(self, attribute_id: str, error: str) -> None:
        self._logger.error(
            "mutation_sync_request_failed",
            attribute_id=attribute_id,
            error=error,
        )
