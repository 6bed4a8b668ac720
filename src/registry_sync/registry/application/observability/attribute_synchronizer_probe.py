"""Protocol for attribute synchronizer observability.

Defines the interface for domain probes that capture the decisions of a
single reconcile.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class AttributeSynchronizerProbe(Protocol):
    """Domain probe for reconcile-one-entity operations."""

    def group_created(self, attribute_id: str, group_name: str) -> None:
        """Record that a registry group was created."""
        ...

    def group_updated(
        self,
        attribute_id: str,
        group_name: str,
        content_changed: bool,
        tags_added: list[str],
    ) -> None:
        """Record that a registry group was updated or tagged."""
        ...

    def group_unchanged(self, attribute_id: str, group_name: str) -> None:
        """Record that a registry group already matched its attribute."""
        ...

    def group_deleted(self, attribute_id: str, group_name: str) -> None:
        """Record that an orphaned registry group was deleted."""
        ...

    def attribute_not_found(self, attribute_id: str, group_name: str) -> None:
        """Record that neither the store nor the registry knows the id."""
        ...

    def fatal_configuration_error(
        self, attribute_id: str, group_name: str, error: str
    ) -> None:
        """Record a reconcile that cannot succeed without operator action."""
        ...


class DefaultAttributeSynchronizerProbe:
    """Default implementation of AttributeSynchronizerProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def group_created(self, attribute_id: str, group_name: str) -> None:
        """Record that a registry group was created."""
        self._logger.info(
            "registry_group_created",
            attribute_id=attribute_id,
            group_name=group_name,
        )

    def group_updated(
        self,
        attribute_id: str,
        group_name: str,
        content_changed: bool,
        tags_added: list[str],
    ) -> None:
        """Record that a registry group was updated or tagged."""
        self._logger.info(
            "registry_group_updated",
            attribute_id=attribute_id,
            group_name=group_name,
            content_changed=content_changed,
            tags_added=tags_added,
        )

    def group_unchanged(self, attribute_id: str, group_name: str) -> None:
        """Record that a registry group already matched its attribute."""
        self._logger.debug(
            "registry_group_unchanged",
            attribute_id=attribute_id,
            group_name=group_name,
        )

    def group_deleted(self, attribute_id: str, group_name: str) -> None:
        """Record that an orphaned registry group was deleted."""
        self._logger.info(
            "registry_group_deleted",
            attribute_id=attribute_id,
            group_name=group_name,
        )

    def attribute_not_found(self, attribute_id: str, group_name: str) -> None:
        """Record that neither the store nor the registry knows the id."""
        self._logger.warning(
            "attribute_not_found",
            attribute_id=attribute_id,
            group_name=group_name,
        )

    def fatal_configuration_error(
        self, attribute_id: str, group_name: str, error: str
    ) -> None:
        """Record a reconcile that cannot succeed without operator action."""
        self._logger.error(
            "registry_fatal_configuration_error",
            attribute_id=attribute_id,
            group_name=group_name,
            error=error,
        )
