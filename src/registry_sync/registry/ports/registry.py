"""Registry client protocol (port)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from registry.domain.value_objects import RegistryGroup


@runtime_checkable
class IRegistryClient(Protocol):
    """Access to the external attribute registry, keyed by group name.

    Implementations raise only the exceptions in registry.ports.exceptions.
    """

    async def get(self, name: str) -> RegistryGroup | None:
        """Read a group with its tags.

        Returns:
            The group, or None if the registry has no group with this name

        Raises:
            TransientRegistryError: If the registry could not be read
        """
        ...

    async def create(
        self,
        name: str,
        description: str,
        attributes: str,
        tags: dict[str, str],
    ) -> str | None:
        """Create a group carrying the given tags.

        Returns:
            The identifier the registry assigned, None if it reported none
        """
        ...

    async def update(self, name: str, description: str, attributes: str) -> str | None:
        """Replace the description and payload of an existing group.

        Returns:
            The group identifier, None if the registry reported none
        """
        ...

    async def tag(self, identifier: str, tags: dict[str, str]) -> None:
        """Add or overwrite tags on a group. Other tags are left in place."""
        ...

    async def delete(self, name: str) -> None:
        """Delete a group. Deleting a group that does not exist succeeds."""
        ...
