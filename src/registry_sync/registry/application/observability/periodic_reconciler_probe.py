"""Protocol for periodic reconciler observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import structlog

if TYPE_CHECKING:
    from registry.application.services.periodic_reconciler import SweepReport


class PeriodicReconcilerProbe(Protocol):
    """Domain probe for full-store sweeps."""

    def sweep_started(self, start_token: str | None) -> None:
        """Record that a sweep started."""
        ...

    def page_read(self, page_number: int, count: int, next_token: str | None) -> None:
        """Record a page boundary with the token that resumes after it."""
        ...

    def enqueue_failed(self, attribute_id: str, error: str) -> None:
        """Record that one id could not be enqueued; the sweep continues."""
        ...

    def sweep_completed(self, report: SweepReport) -> None:
        """Record that a sweep reached the end of the store."""
        ...


class DefaultPeriodicReconcilerProbe:
    """Default implementation of PeriodicReconcilerProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def sweep_started(self, start_token: str | None) -> None:
        self._logger.info("reconcile_sweep_started", start_token=start_token)

    def page_read(self, page_number: int, count: int, next_token: str | None) -> None:
        self._logger.info(
            "reconcile_sweep_page_read",
            page_number=page_number,
            count=count,
            next_token=next_token,
        )

    def enqueue_failed(self, attribute_id: str, error: str) -> None:
        self._logger.error(
            "reconcile_sweep_enqueue_failed",
            attribute_id=attribute_id,
            error=error,
        )

    def sweep_completed(self, report: SweepReport) -> None:
        self._logger.info(
            "reconcile_sweep_completed",
            pages_read=report.pages_read,
            enqueued=report.enqueued,
            deduplicated=report.deduplicated,
            failed=report.failed,
        )
