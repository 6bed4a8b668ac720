"""Value objects for the registry domain.

A registry group mirrors one attribute. Its name is derived from the
attribute id alone, so no linkage between the two has to be stored: the
group for ``ENV:PROD`` is always ``<prefix>.ENV.PROD``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from attributes.domain.value_objects import Attribute


class SyncOutcome(StrEnum):
    """Result of reconciling one attribute id."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    DELETED = "deleted"


def registry_group_name(attribute_id: str, prefix: str) -> str:
    """Derive the registry group name for an attribute id.

    The id is split on its first ``:``; an id without one maps to an empty
    value segment.

    Args:
        attribute_id: ``KEY:VALUE`` id, any casing
        prefix: Group name prefix

    Returns:
        ``prefix + "." + UPPER(key) + "." + UPPER(value)``
    """
    key, _, value = attribute_id.partition(":")
    return f"{prefix}.{key.upper()}.{value.upper()}"


def _timestamp(value: datetime) -> str:
    return value.isoformat()


def build_registry_payload(attribute: Attribute) -> str:
    """Serialize the attributes payload of a registry group.

    The attribute's metadata is merged with the fixed ``attribute*`` fields,
    which win on key collision. Keys are sorted and separators are compact,
    so the same attribute always serializes to the same bytes.
    """
    payload: dict[str, str] = {
        **attribute.metadata,
        "attributeName": attribute.name,
        "attributeKey": attribute.key,
        "attributeValue": attribute.value,
        "attributeCreateTime": _timestamp(attribute.create_time),
        "attributeLastUpdateTime": _timestamp(attribute.last_update_time),
    }
    return json.dumps(payload, sort_keys=True, separators=(",", ":"))


@dataclass(frozen=True)
class RegistryGroup:
    """An attribute group as read from the registry.

    Attributes:
        name: Group name
        description: Group description ("" when the registry has none)
        attributes: Serialized attributes payload
        tags: All tags on the group, including externally added ones
        identifier: Registry-assigned identifier (ARN), if reported
    """

    name: str
    description: str = ""
    attributes: str = ""
    tags: dict[str, str] = field(default_factory=dict)
    identifier: str | None = None


@dataclass(frozen=True)
class RegistryGroupDiff:
    """What has to change for a registry group to match its attribute.

    Attributes:
        content_changed: Description or payload differ
        missing_tags: Required tags that are absent or carry another value
    """

    content_changed: bool
    missing_tags: dict[str, str]

    @property
    def is_empty(self) -> bool:
        return not self.content_changed and not self.missing_tags


@dataclass(frozen=True)
class DesiredRegistryGroup:
    """The registry group an attribute should have."""

    name: str
    description: str
    attributes: str
    tags: dict[str, str]

    @classmethod
    def from_attribute(
        cls,
        attribute: Attribute,
        prefix: str,
        required_tags: dict[str, str],
    ) -> DesiredRegistryGroup:
        """Build the desired group for an attribute.

        Args:
            attribute: The attribute from the store
            prefix: Group name prefix
            required_tags: Management tags every group must carry
        """
        return cls(
            name=registry_group_name(attribute.id, prefix),
            description=attribute.description or "",
            attributes=build_registry_payload(attribute),
            tags=dict(required_tags),
        )

    def diff(self, existing: RegistryGroup) -> RegistryGroupDiff:
        """Compare against the group currently in the registry.

        Description and payload are compared byte for byte. Tags only need
        to be a superset of the required tags: tags added outside this
        service are left alone.
        """
        content_changed = (
            (existing.description or "") != self.description
            or existing.attributes != self.attributes
        )
        missing_tags = {
            key: value
            for key, value in self.tags.items()
            if existing.tags.get(key) != value
        }
        return RegistryGroupDiff(
            content_changed=content_changed, missing_tags=missing_tags
        )
