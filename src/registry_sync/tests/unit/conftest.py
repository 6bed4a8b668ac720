"""Unit test fixtures with in-memory fakes for the store, registry and queue."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from attributes.domain.value_objects import Attribute, AttributePage
from registry.domain.value_objects import RegistryGroup
from shared_kernel.sync_queue.exceptions import EnqueueError

REQUIRED_TAGS = {"managedBy": "Rapm"}
PREFIX = "APO"


class InMemoryAttributeStore:
    """IAttributeStore over a dict, counting page reads."""

    def __init__(self) -> None:
        self.attributes: dict[str, Attribute] = {}
        self.page_reads = 0

    def put(self, attribute: Attribute) -> None:
        self.attributes[attribute.id] = attribute

    def remove(self, attribute_id: str) -> None:
        self.attributes.pop(attribute_id, None)

    async def get_by_id(self, attribute_id: str) -> Attribute | None:
        return self.attributes.get(attribute_id)

    async def list_page(
        self, page_size: int, token: str | None = None
    ) -> AttributePage:
        self.page_reads += 1
        ids = sorted(i for i in self.attributes if token is None or i > token)
        page_ids = ids[:page_size]
        next_token = page_ids[-1] if len(ids) > page_size else None
        return AttributePage(
            items=[self.attributes[i] for i in page_ids], next_token=next_token
        )


class InMemoryRegistry:
    """IRegistryClient over a dict of groups, recording every call."""

    def __init__(self) -> None:
        self.groups: dict[str, RegistryGroup] = {}
        self.calls: list[tuple[str, str]] = []
        self.return_identifier_on_create = True
        self.return_identifier_on_update = True

    @staticmethod
    def arn_for(name: str) -> str:
        return (
            "arn:aws:servicecatalog:ap-southeast-2:123456789012:"
            f"/attribute-groups/{name}"
        )

    @property
    def write_calls(self) -> list[tuple[str, str]]:
        return [call for call in self.calls if call[0] != "get"]

    def seed(self, group: RegistryGroup) -> None:
        self.groups[group.name] = group

    async def get(self, name: str) -> RegistryGroup | None:
        self.calls.append(("get", name))
        return self.groups.get(name)

    async def create(
        self,
        name: str,
        description: str,
        attributes: str,
        tags: dict[str, str],
    ) -> str | None:
        self.calls.append(("create", name))
        identifier = self.arn_for(name)
        self.groups[name] = RegistryGroup(
            name=name,
            description=description,
            attributes=attributes,
            tags=dict(tags),
            identifier=identifier,
        )
        return identifier if self.return_identifier_on_create else None

    async def update(self, name: str, description: str, attributes: str) -> str | None:
        self.calls.append(("update", name))
        group = self.groups[name]
        self.groups[name] = RegistryGroup(
            name=name,
            description=description,
            attributes=attributes,
            tags=group.tags,
            identifier=group.identifier,
        )
        return group.identifier if self.return_identifier_on_update else None

    async def tag(self, identifier: str, tags: dict[str, str]) -> None:
        self.calls.append(("tag", identifier))
        for name, group in self.groups.items():
            if group.identifier == identifier:
                self.groups[name] = RegistryGroup(
                    name=group.name,
                    description=group.description,
                    attributes=group.attributes,
                    tags={**group.tags, **tags},
                    identifier=group.identifier,
                )

    async def delete(self, name: str) -> None:
        self.calls.append(("delete", name))
        self.groups.pop(name, None)


class InMemorySyncRequestQueue:
    """ISyncRequestQueue keeping pending ids in order, deduplicated."""

    def __init__(self) -> None:
        self.pending: list[str] = []
        self.failing_ids: set[str] = set()

    async def enqueue(self, attribute_id: str) -> bool:
        if attribute_id in self.failing_ids:
            raise EnqueueError(f"queue down for {attribute_id}", attribute_id)
        if attribute_id in self.pending:
            return False
        self.pending.append(attribute_id)
        return True

    async def drain(self, handler) -> list[str]:
        """Reconcile every pending id in order, returning the outcomes."""
        outcomes = []
        while self.pending:
            outcomes.append(await handler.reconcile(self.pending.pop(0)))
        return outcomes


def make_attribute(
    key: str = "Env",
    value: str = "Prod",
    description: str | None = "Production environment",
    metadata: dict[str, str] | None = None,
) -> Attribute:
    return Attribute(
        key=key,
        value=value,
        description=description,
        metadata=metadata or {},
        create_time=datetime(2026, 9, 1, 8, 30, tzinfo=UTC),
        last_update_time=datetime(2026, 9, 2, 9, 45, tzinfo=UTC),
    )


@pytest.fixture
def attribute_factory():
    """Build Attribute value objects with fixed timestamps."""
    return make_attribute


@pytest.fixture
def store() -> InMemoryAttributeStore:
    return InMemoryAttributeStore()


@pytest.fixture
def registry() -> InMemoryRegistry:
    return InMemoryRegistry()


@pytest.fixture
def fake_queue() -> InMemorySyncRequestQueue:
    return InMemorySyncRequestQueue()


@pytest.fixture
def required_tags() -> dict[str, str]:
    return dict(REQUIRED_TAGS)
