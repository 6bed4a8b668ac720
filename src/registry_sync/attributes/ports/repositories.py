"""Repository protocols (ports) for the attributes bounded context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from attributes.domain.value_objects import Attribute, AttributePage


@runtime_checkable
class IAttributeStore(Protocol):
    """Read access to the canonical attribute store."""

    async def get_by_id(self, attribute_id: str) -> Attribute | None:
        """Retrieve an attribute by its canonical id.

        Args:
            attribute_id: Upper-cased ``KEY:VALUE`` id

        Returns:
            The attribute, or None if the store has no such id
        """
        ...

    async def list_page(
        self, page_size: int, token: str | None = None
    ) -> AttributePage:
        """Read one page of attributes.

        Pages are ordered by id. A page carries a continuation token only
        when more attributes follow it, so a full listing of N attributes
        takes ``ceil(N / page_size)`` calls (one call when N is 0).

        Args:
            page_size: Maximum attributes to return
            token: Continuation token from the previous page, None to start

        Returns:
            The page and the token for the next one
        """
        ...
