"""Reconcile-one-entity service for the registry bounded context.

Brings the registry group of one attribute id in line with the attribute
store. Every branch is idempotent: running it again on unchanged state
performs no registry writes.
"""

from __future__ import annotations

from attributes.ports.repositories import IAttributeStore
from registry.application.observability import (
    AttributeSynchronizerProbe,
    DefaultAttributeSynchronizerProbe,
)
from registry.domain.value_objects import (
    DesiredRegistryGroup,
    RegistryGroup,
    SyncOutcome,
    registry_group_name,
)
from registry.ports.exceptions import AttributeNotFoundError, FatalConfigurationError
from registry.ports.registry import IRegistryClient


class AttributeSynchronizer:
    """Reconciles a single attribute id against the registry.

    Implements the SyncRequestHandler protocol, so the sync queue worker
    can drive it without knowing about the registry.
    """

    def __init__(
        self,
        store: IAttributeStore,
        registry: IRegistryClient,
        group_name_prefix: str,
        required_tags: dict[str, str],
        probe: AttributeSynchronizerProbe | None = None,
    ):
        """Initialize the synchronizer.

        Args:
            store: Read access to the attribute store
            registry: Client of the external registry
            group_name_prefix: Prefix of every managed group name
            required_tags: Management tags every group must carry
            probe: Optional domain probe for observability
        """
        self._store = store
        self._registry = registry
        self._prefix = group_name_prefix
        self._required_tags = dict(required_tags)
        self._probe = probe or DefaultAttributeSynchronizerProbe()

    async def reconcile(self, attribute_id: str) -> SyncOutcome:
        """Make the registry reflect the current state of one attribute.

        Args:
            attribute_id: Attribute id; normalized to upper case

        Returns:
            What the reconcile changed

        Raises:
            AttributeNotFoundError: If neither the store nor the registry
                knows the id
            FatalConfigurationError: If the registry returns no usable
                identifier where one is required
            TransientRegistryError: If the registry call should be retried
        """
        attribute_id = attribute_id.upper()
        attribute = await self._store.get_by_id(attribute_id)

        if attribute is None:
            return await self._remove_orphan(attribute_id)

        desired = DesiredRegistryGroup.from_attribute(
            attribute, self._prefix, self._required_tags
        )
        existing = await self._registry.get(desired.name)

        if existing is None:
            return await self._create(attribute_id, desired)

        return await self._update(attribute_id, desired, existing)

    async def _create(
        self, attribute_id: str, desired: DesiredRegistryGroup
    ) -> SyncOutcome:
        identifier = await self._registry.create(
            desired.name, desired.description, desired.attributes, desired.tags
        )
        if not identifier:
            raise self._fatal(
                attribute_id,
                desired.name,
                f"create returned no identifier for {desired.name}",
            )

        self._probe.group_created(attribute_id, desired.name)
        return SyncOutcome.CREATED

    async def _update(
        self,
        attribute_id: str,
        desired: DesiredRegistryGroup,
        existing: RegistryGroup,
    ) -> SyncOutcome:
        diff = desired.diff(existing)
        if diff.is_empty:
            self._probe.group_unchanged(attribute_id, desired.name)
            return SyncOutcome.UNCHANGED

        identifier = existing.identifier
        if diff.content_changed:
            identifier = await self._registry.update(
                desired.name, desired.description, desired.attributes
            )
            if not identifier:
                raise self._fatal(
                    attribute_id,
                    desired.name,
                    f"update returned no identifier for {desired.name}",
                )

        if diff.missing_tags:
            if not identifier:
                raise self._fatal(
                    attribute_id,
                    desired.name,
                    f"no identifier to tag {desired.name}",
                )
            # Tag-union only; tags set outside this service stay in place
            await self._registry.tag(identifier, diff.missing_tags)

        self._probe.group_updated(
            attribute_id,
            desired.name,
            content_changed=diff.content_changed,
            tags_added=sorted(diff.missing_tags),
        )
        return SyncOutcome.UPDATED

    async def _remove_orphan(self, attribute_id: str) -> SyncOutcome:
        name = registry_group_name(attribute_id, self._prefix)
        existing = await self._registry.get(name)

        if existing is None:
            self._probe.attribute_not_found(attribute_id, name)
            raise AttributeNotFoundError(attribute_id)

        await self._registry.delete(name)
        self._probe.group_deleted(attribute_id, name)
        return SyncOutcome.DELETED

    def _fatal(
        self, attribute_id: str, group_name: str, message: str
    ) -> FatalConfigurationError:
        self._probe.fatal_configuration_error(attribute_id, group_name, message)
        return FatalConfigurationError(message, group_name=group_name)
