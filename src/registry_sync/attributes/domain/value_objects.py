"""Value objects for the attributes domain.

An attribute is identified by its key and value. The id is the upper-cased
``KEY:VALUE`` form and is what the store and the sync queue are keyed on;
the name keeps the user's casing and is for display only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


def make_attribute_id(key: str, value: str) -> str:
    """Derive the canonical attribute id from a key and value.

    Args:
        key: Attribute key as entered by the user
        value: Attribute value as entered by the user

    Returns:
        ``UPPER(key) + ":" + UPPER(value)``
    """
    return f"{key.upper()}:{value.upper()}"


def make_attribute_name(key: str, value: str) -> str:
    """Derive the display name of an attribute."""
    return f"{key}:{value}"


@dataclass(frozen=True)
class Attribute:
    """A key-value attribute as held by the store.

    Attributes:
        key: Attribute key
        value: Attribute value
        description: Free text; None is treated as the empty string
        metadata: Arbitrary string-valued metadata
        create_time: When the store created the attribute
        last_update_time: When the store last changed the attribute
    """

    key: str
    value: str
    create_time: datetime
    last_update_time: datetime
    description: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return make_attribute_id(self.key, self.value)

    @property
    def name(self) -> str:
        return make_attribute_name(self.key, self.value)


@dataclass(frozen=True)
class AttributePage:
    """One page of a paginated store listing.

    Attributes:
        items: Attributes on this page, ordered by id
        next_token: Opaque continuation token, None on the last page
    """

    items: list[Attribute]
    next_token: str | None = None
