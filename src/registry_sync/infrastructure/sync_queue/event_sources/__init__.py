"""Event sources for the sync request queue.

Event sources implement different mechanisms for being notified of newly
enqueued messages. Each source invokes a callback with the message id.
"""

from infrastructure.sync_queue.event_sources.postgres_notify import (
    PostgresNotifyEventSource,
)

__all__ = ["PostgresNotifyEventSource"]
