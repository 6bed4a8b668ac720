"""Domain probe for registry client operations.

Following Domain-Oriented Observability patterns, this probe captures
registry calls and their failures without the adapter logging directly.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class RegistryClientProbe(Protocol):
    """Domain probe for registry client operations."""

    def client_initialized(self, region: str, endpoint_url: str | None) -> None:
        """Record that the registry client was configured."""
        ...

    def group_read(self, name: str, found: bool) -> None:
        """Record that a group was looked up."""
        ...

    def group_written(self, operation: str, name: str) -> None:
        """Record a successful create, update, tag or delete."""
        ...

    def call_failed(
        self,
        operation: str,
        name: str,
        error_code: str,
        classification: str,
    ) -> None:
        """Record that a registry call failed.

        Args:
            operation: Registry operation name
            name: Group name or identifier the call was for
            error_code: Provider error code
            classification: Error class the failure was mapped to
        """
        ...


class DefaultRegistryClientProbe:
    """Default implementation of RegistryClientProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def client_initialized(self, region: str, endpoint_url: str | None) -> None:
        self._logger.info(
            "registry_client_initialized",
            region=region,
            endpoint_url=endpoint_url,
        )

    def group_read(self, name: str, found: bool) -> None:
        self._logger.debug("registry_group_read", name=name, found=found)

    def group_written(self, operation: str, name: str) -> None:
        self._logger.info("registry_group_written", operation=operation, name=name)

    def call_failed(
        self,
        operation: str,
        name: str,
        error_code: str,
        classification: str,
    ) -> None:
        self._logger.warning(
            "registry_call_failed",
            operation=operation,
            name=name,
            error_code=error_code,
            classification=classification,
        )
