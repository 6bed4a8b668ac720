"""Domain exceptions for the registry bounded context.

Registry adapters translate every provider failure into one of these. The
sync queue worker only knows the queue exception bases, so terminal errors
here also subclass UnprocessableSyncRequestError or PoisonSyncRequestError.
"""

from shared_kernel.sync_queue.exceptions import (
    PoisonSyncRequestError,
    UnprocessableSyncRequestError,
)


class RegistryError(Exception):
    """Base exception for registry failures."""

    def __init__(self, message: str, group_name: str | None = None):
        super().__init__(message)
        self.group_name = group_name


class RegistryGroupNotFoundError(RegistryError):
    """The registry reported that the attribute group does not exist."""

    pass


class TransientRegistryError(RegistryError):
    """Throttling, timeouts, connection errors or server-side failures.

    Retried by redelivering the sync request.
    """

    pass


class FatalConfigurationError(RegistryError, PoisonSyncRequestError):
    """The registry or its configuration cannot complete the reconcile.

    Raised for unusable create/update responses, validation errors and
    access-denied errors. Retrying cannot help, so the sync request is
    dead-lettered immediately.
    """

    pass


class AttributeNotFoundError(UnprocessableSyncRequestError):
    """The id is unknown to both the attribute store and the registry.

    There is nothing to reconcile; the sync request is considered handled.
    """

    def __init__(self, attribute_id: str):
        super().__init__(f"Attribute {attribute_id} not found in store or registry")
        self.attribute_id = attribute_id


class InvalidAttributeIdError(ValueError):
    """Raised when an attribute id is empty or blank."""

    pass
