"""Application layer for the registry bounded context."""

from registry.application.services import (
    AttributeSynchronizer,
    PeriodicReconciler,
    SweepReport,
    SyncRequestService,
)

__all__ = [
    "AttributeSynchronizer",
    "PeriodicReconciler",
    "SweepReport",
    "SyncRequestService",
]
