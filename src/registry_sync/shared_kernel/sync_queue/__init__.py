"""Sync request queue contracts.

Value objects, ports, exceptions and probes for the queue that carries
attribute ids from the CRUD API and the periodic reconciler to the worker.
"""

from shared_kernel.sync_queue.exceptions import (
    EnqueueError,
    PoisonSyncRequestError,
    SyncRequestError,
    UnprocessableSyncRequestError,
)
from shared_kernel.sync_queue.ports import (
    ISyncRequestQueue,
    SyncRequestEventSource,
    SyncRequestHandler,
)
from shared_kernel.sync_queue.value_objects import SyncRequest

__all__ = [
    "EnqueueError",
    "ISyncRequestQueue",
    "PoisonSyncRequestError",
    "SyncRequest",
    "SyncRequestError",
    "SyncRequestEventSource",
    "SyncRequestHandler",
    "UnprocessableSyncRequestError",
]
