"""Domain layer for the attributes bounded context."""

from attributes.domain.value_objects import (
    Attribute,
    AttributePage,
    make_attribute_id,
    make_attribute_name,
)

__all__ = [
    "Attribute",
    "AttributePage",
    "make_attribute_id",
    "make_attribute_name",
]
