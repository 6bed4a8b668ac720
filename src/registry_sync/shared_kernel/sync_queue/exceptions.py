"""Exceptions for the sync request queue.

The worker classifies failures by these base classes only, so bounded
contexts can make their own errors terminal without the queue knowing
about them.
"""


class SyncRequestError(Exception):
    """Base exception for sync request processing."""

    pass


class EnqueueError(SyncRequestError):
    """Raised when a sync request cannot be written to the queue.

    Callers on the mutation path must not fail because of this; the next
    reconciliation sweep re-enqueues every attribute.
    """

    def __init__(self, message: str, attribute_id: str | None = None):
        super().__init__(message)
        self.attribute_id = attribute_id


class UnprocessableSyncRequestError(SyncRequestError):
    """The message can never succeed and needs no operator attention.

    The worker marks the message as handled without retrying it.
    """

    pass


class PoisonSyncRequestError(SyncRequestError):
    """The message can never succeed and needs operator attention.

    The worker moves the message straight to the dead letter queue.
    """

    pass
