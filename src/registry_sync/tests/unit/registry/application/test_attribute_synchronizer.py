"""Unit tests for AttributeSynchronizer.

Uses in-memory fakes for the store and the registry so every registry call
made by a reconcile can be asserted on.
"""

import json
from dataclasses import replace
from unittest.mock import MagicMock

import pytest

from registry.application.observability import AttributeSynchronizerProbe
from registry.application.services import AttributeSynchronizer
from registry.domain.value_objects import SyncOutcome
from registry.ports.exceptions import AttributeNotFoundError, FatalConfigurationError


@pytest.fixture
def probe():
    return MagicMock(spec=AttributeSynchronizerProbe)


@pytest.fixture
def synchronizer(store, registry, required_tags, probe):
    return AttributeSynchronizer(
        store=store,
        registry=registry,
        group_name_prefix="APO",
        required_tags=required_tags,
        probe=probe,
    )


class TestReconcileCreate:
    """Tests for attributes without a registry group."""

    @pytest.mark.asyncio
    async def test_creates_group_for_new_attribute(
        self, synchronizer, store, registry, attribute_factory
    ):
        """Env/Prod creates APO.ENV.PROD with description, payload and tags."""
        store.put(attribute_factory(key="Env", value="Prod", description="a"))

        outcome = await synchronizer.reconcile("ENV:PROD")

        assert outcome == SyncOutcome.CREATED
        group = registry.groups["APO.ENV.PROD"]
        assert group.description == "a"
        assert group.tags == {"managedBy": "Rapm"}
        payload = json.loads(group.attributes)
        assert payload["attributeKey"] == "Env"
        assert payload["attributeValue"] == "Prod"
        assert payload["attributeName"] == "Env:Prod"

    @pytest.mark.asyncio
    async def test_normalizes_id_to_upper_case(
        self, synchronizer, store, registry, attribute_factory
    ):
        store.put(attribute_factory(key="Env", value="Prod"))

        outcome = await synchronizer.reconcile("env:prod")

        assert outcome == SyncOutcome.CREATED
        assert "APO.ENV.PROD" in registry.groups

    @pytest.mark.asyncio
    async def test_missing_identifier_on_create_is_fatal(
        self, synchronizer, store, registry, attribute_factory, probe
    ):
        store.put(attribute_factory())
        registry.return_identifier_on_create = False

        with pytest.raises(FatalConfigurationError):
            await synchronizer.reconcile("ENV:PROD")

        probe.fatal_configuration_error.assert_called_once()


class TestReconcileUpdate:
    """Tests for attributes whose group already exists."""

    @pytest.mark.asyncio
    async def test_description_change_updates_without_tagging(
        self, synchronizer, store, registry, attribute_factory
    ):
        """Changing a description from "a" to "b" calls update but not tag."""
        store.put(attribute_factory(description="a"))
        await synchronizer.reconcile("ENV:PROD")
        registry.calls.clear()

        store.put(attribute_factory(description="b"))
        outcome = await synchronizer.reconcile("ENV:PROD")

        assert outcome == SyncOutcome.UPDATED
        assert registry.write_calls == [("update", "APO.ENV.PROD")]
        assert registry.groups["APO.ENV.PROD"].description == "b"

    @pytest.mark.asyncio
    async def test_unchanged_group_is_not_written(
        self, synchronizer, store, registry, attribute_factory, probe
    ):
        store.put(attribute_factory())
        await synchronizer.reconcile("ENV:PROD")
        registry.calls.clear()

        outcome = await synchronizer.reconcile("ENV:PROD")

        assert outcome == SyncOutcome.UNCHANGED
        assert registry.write_calls == []
        probe.group_unchanged.assert_called_once_with("ENV:PROD", "APO.ENV.PROD")

    @pytest.mark.asyncio
    async def test_missing_tag_is_added_using_existing_identifier(
        self, synchronizer, store, registry, attribute_factory
    ):
        store.put(attribute_factory())
        await synchronizer.reconcile("ENV:PROD")
        group = registry.groups["APO.ENV.PROD"]
        registry.seed(replace(group, tags={}))
        registry.calls.clear()

        outcome = await synchronizer.reconcile("ENV:PROD")

        assert outcome == SyncOutcome.UPDATED
        assert registry.write_calls == [("tag", group.identifier)]
        assert registry.groups["APO.ENV.PROD"].tags == {"managedBy": "Rapm"}

    @pytest.mark.asyncio
    async def test_wrong_tag_value_is_overwritten(
        self, synchronizer, store, registry, attribute_factory
    ):
        store.put(attribute_factory())
        await synchronizer.reconcile("ENV:PROD")
        group = registry.groups["APO.ENV.PROD"]
        registry.seed(replace(group, tags={"managedBy": "someone-else"}))

        await synchronizer.reconcile("ENV:PROD")

        assert registry.groups["APO.ENV.PROD"].tags == {"managedBy": "Rapm"}

    @pytest.mark.asyncio
    async def test_external_tags_are_never_removed(
        self, synchronizer, store, registry, attribute_factory
    ):
        store.put(attribute_factory(description="a"))
        await synchronizer.reconcile("ENV:PROD")
        group = registry.groups["APO.ENV.PROD"]
        registry.seed(replace(group, tags={**group.tags, "costCentre": "42"}))

        store.put(attribute_factory(description="b"))
        await synchronizer.reconcile("ENV:PROD")

        assert registry.groups["APO.ENV.PROD"].tags == {
            "managedBy": "Rapm",
            "costCentre": "42",
        }

    @pytest.mark.asyncio
    async def test_missing_identifier_on_update_is_fatal(
        self, synchronizer, store, registry, attribute_factory
    ):
        store.put(attribute_factory(description="a"))
        await synchronizer.reconcile("ENV:PROD")
        registry.return_identifier_on_update = False

        store.put(attribute_factory(description="b"))
        with pytest.raises(FatalConfigurationError):
            await synchronizer.reconcile("ENV:PROD")

    @pytest.mark.asyncio
    async def test_tagging_without_any_identifier_is_fatal(
        self, synchronizer, store, registry, attribute_factory
    ):
        store.put(attribute_factory())
        await synchronizer.reconcile("ENV:PROD")
        group = registry.groups["APO.ENV.PROD"]
        registry.seed(replace(group, tags={}, identifier=None))

        with pytest.raises(FatalConfigurationError):
            await synchronizer.reconcile("ENV:PROD")

    @pytest.mark.asyncio
    async def test_none_description_matches_empty_registry_description(
        self, synchronizer, store, registry, attribute_factory
    ):
        store.put(attribute_factory(description=None))
        await synchronizer.reconcile("ENV:PROD")
        registry.calls.clear()

        outcome = await synchronizer.reconcile("ENV:PROD")

        assert outcome == SyncOutcome.UNCHANGED
        assert registry.groups["APO.ENV.PROD"].description == ""


class TestReconcileDelete:
    """Tests for ids that are no longer in the store."""

    @pytest.mark.asyncio
    async def test_deletes_orphaned_group_once(
        self, synchronizer, store, registry, attribute_factory
    ):
        store.put(attribute_factory())
        await synchronizer.reconcile("ENV:PROD")
        store.remove("ENV:PROD")
        registry.calls.clear()

        outcome = await synchronizer.reconcile("ENV:PROD")

        assert outcome == SyncOutcome.DELETED
        assert registry.write_calls == [("delete", "APO.ENV.PROD")]
        assert "APO.ENV.PROD" not in registry.groups

    @pytest.mark.asyncio
    async def test_second_delete_reconcile_writes_nothing(
        self, synchronizer, store, registry, attribute_factory
    ):
        store.put(attribute_factory())
        await synchronizer.reconcile("ENV:PROD")
        store.remove("ENV:PROD")
        await synchronizer.reconcile("ENV:PROD")
        registry.calls.clear()

        with pytest.raises(AttributeNotFoundError):
            await synchronizer.reconcile("ENV:PROD")

        assert registry.write_calls == []

    @pytest.mark.asyncio
    async def test_unknown_id_raises_not_found_without_writes(
        self, synchronizer, registry, probe
    ):
        """FOO:BAR in neither store nor registry is a terminal no-op."""
        with pytest.raises(AttributeNotFoundError) as exc_info:
            await synchronizer.reconcile("FOO:BAR")

        assert exc_info.value.attribute_id == "FOO:BAR"
        assert registry.write_calls == []
        probe.attribute_not_found.assert_called_once_with("FOO:BAR", "APO.FOO.BAR")

    @pytest.mark.asyncio
    async def test_only_the_matching_group_is_deleted(
        self, synchronizer, store, registry, attribute_factory
    ):
        store.put(attribute_factory(key="Env", value="Prod"))
        store.put(attribute_factory(key="Env", value="Dev"))
        await synchronizer.reconcile("ENV:PROD")
        await synchronizer.reconcile("ENV:DEV")
        store.remove("ENV:PROD")

        await synchronizer.reconcile("ENV:PROD")

        assert set(registry.groups) == {"APO.ENV.DEV"}


class TestReconcileIdempotence:
    """Running reconcile twice on unchanged state performs no writes."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "metadata",
        [{}, {"owner": "platform", "tier": "1"}],
    )
    async def test_second_run_is_a_no_op(
        self, synchronizer, store, registry, attribute_factory, metadata
    ):
        store.put(attribute_factory(metadata=metadata))

        await synchronizer.reconcile("ENV:PROD")
        writes_after_first = list(registry.write_calls)
        await synchronizer.reconcile("ENV:PROD")

        assert registry.write_calls == writes_after_first

