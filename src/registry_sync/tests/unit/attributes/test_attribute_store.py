"""Unit tests for SqlAttributeStore.

Sessions are mocked; the tests check the queries issued and the paging
decisions taken on the rows returned.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from attributes.infrastructure.attribute_store import SqlAttributeStore
from attributes.infrastructure.models import AttributeModel


def make_model(key: str, value: str, **overrides) -> AttributeModel:
    fields = {
        "id": f"{key.upper()}:{value.upper()}",
        "key": key,
        "value": value,
        "name": f"{key}:{value}",
        "description": "desc",
        "attribute_metadata": {"owner": "platform"},
        "create_time": datetime(2026, 9, 1, tzinfo=UTC),
        "last_update_time": datetime(2026, 9, 2, tzinfo=UTC),
    }
    fields.update(overrides)
    return AttributeModel(**fields)


@pytest.fixture
def mock_session():
    return AsyncMock()


@pytest.fixture
def store(mock_session):
    session_factory = MagicMock()
    session_factory.return_value.__aenter__.return_value = mock_session
    return SqlAttributeStore(session_factory)


def returning_rows(mock_session, models):
    result = MagicMock()
    result.scalars.return_value.all.return_value = models
    result.scalar_one_or_none.return_value = models[0] if models else None
    mock_session.execute.return_value = result


class TestGetById:
    """Tests for SqlAttributeStore.get_by_id()."""

    @pytest.mark.asyncio
    async def test_returns_value_object(self, store, mock_session):
        returning_rows(mock_session, [make_model("Env", "Prod")])

        attribute = await store.get_by_id("ENV:PROD")

        assert attribute is not None
        assert attribute.id == "ENV:PROD"
        assert attribute.metadata == {"owner": "platform"}

    @pytest.mark.asyncio
    async def test_returns_none_when_missing(self, store, mock_session):
        returning_rows(mock_session, [])

        assert await store.get_by_id("FOO:BAR") is None


class TestListPage:
    """Tests for SqlAttributeStore.list_page()."""

    @pytest.mark.asyncio
    async def test_token_only_when_more_rows_exist(self, store, mock_session):
        rows = [make_model("K", f"v{i}") for i in range(3)]
        returning_rows(mock_session, rows)

        page = await store.list_page(2)

        assert [a.id for a in page.items] == ["K:V0", "K:V1"]
        assert page.next_token == "K:V1"

    @pytest.mark.asyncio
    async def test_last_page_has_no_token(self, store, mock_session):
        returning_rows(mock_session, [make_model("K", "v0"), make_model("K", "v1")])

        page = await store.list_page(2)

        assert len(page.items) == 2
        assert page.next_token is None

    @pytest.mark.asyncio
    async def test_fetches_one_row_beyond_the_page(self, store, mock_session):
        returning_rows(mock_session, [])

        await store.list_page(100, token="K:V9")

        stmt = mock_session.execute.call_args.args[0]
        compiled = stmt.compile()
        assert "attributes.id >" in str(compiled)
        assert "K:V9" in compiled.params.values()
        assert 101 in compiled.params.values()

    @pytest.mark.asyncio
    async def test_rejects_non_positive_page_size(self, store):
        with pytest.raises(ValueError):
            await store.list_page(0)
