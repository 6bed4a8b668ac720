"""Domain-Oriented Observability for registry application services."""

from registry.application.observability.attribute_synchronizer_probe import (
    AttributeSynchronizerProbe,
    DefaultAttributeSynchronizerProbe,
)
from registry.application.observability.periodic_reconciler_probe import (
    DefaultPeriodicReconcilerProbe,
    PeriodicReconcilerProbe,
)
from registry.application.observability.sync_request_service_probe import (
    DefaultSyncRequestServiceProbe,
    SyncRequestServiceProbe,
)

__all__ = [
    "AttributeSynchronizerProbe",
    "DefaultAttributeSynchronizerProbe",
    "PeriodicReconcilerProbe",
    "DefaultPeriodicReconcilerProbe",
    "SyncRequestServiceProbe",
    "DefaultSyncRequestServiceProbe",
]
