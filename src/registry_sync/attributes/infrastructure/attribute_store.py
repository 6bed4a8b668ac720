"""PostgreSQL implementation of IAttributeStore.

Reads the attributes table written by the attribute CRUD API. Listing uses
keyset pagination on the primary key: the continuation token is the id of
the last attribute returned, so pages stay stable while attributes are
added or removed between calls.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from attributes.domain.value_objects import Attribute, AttributePage
from attributes.infrastructure.models import AttributeModel
from attributes.ports.repositories import IAttributeStore

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


class SqlAttributeStore(IAttributeStore):
    """Attribute store backed by the attributes table.

    The store is used from background tasks as well as requests, so it opens
    a short-lived session per call instead of sharing a request session.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the store.

        Args:
            session_factory: Factory for creating database sessions
        """
        self._session_factory = session_factory

    async def get_by_id(self, attribute_id: str) -> Attribute | None:
        """Retrieve an attribute by its canonical id."""
        stmt = select(AttributeModel).where(AttributeModel.id == attribute_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            return model.to_value_object() if model else None

    async def list_page(
        self, page_size: int, token: str | None = None
    ) -> AttributePage:
        """Read one page of attributes ordered by id.

        Fetches one row beyond the page to learn whether another page
        follows, so the last page never carries a token.

        Raises:
            ValueError: If page_size is not positive
        """
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")

        stmt = select(AttributeModel).order_by(AttributeModel.id).limit(page_size + 1)
        if token:
            stmt = stmt.where(AttributeModel.id > token)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            models = list(result.scalars().all())

        has_more = len(models) > page_size
        models = models[:page_size]
        return AttributePage(
            items=[model.to_value_object() for model in models],
            next_token=models[-1].id if has_more else None,
        )
