"""Application services for the registry bounded context."""

from registry.application.services.attribute_synchronizer import (
    AttributeSynchronizer,
)
from registry.application.services.periodic_reconciler import (
    PeriodicReconciler,
    SweepReport,
)
from registry.application.services.sync_request_service import (
    SyncRequestService,
    normalize_attribute_id,
)

__all__ = [
    "AttributeSynchronizer",
    "PeriodicReconciler",
    "SweepReport",
    "SyncRequestService",
    "normalize_attribute_id",
]
