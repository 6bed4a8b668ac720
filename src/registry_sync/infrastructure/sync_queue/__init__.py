"""Infrastructure layer for the sync request queue.

Contains the SQLAlchemy model, the PostgreSQL queue implementation and the
worker that drains it.
"""

from infrastructure.sync_queue.models import SyncRequestModel
from infrastructure.sync_queue.repository import SyncRequestQueue
from infrastructure.sync_queue.worker import SyncQueueWorker

__all__ = ["SyncQueueWorker", "SyncRequestModel", "SyncRequestQueue"]
