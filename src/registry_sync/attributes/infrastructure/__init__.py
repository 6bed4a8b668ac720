"""Infrastructure layer for the attributes bounded context."""

from attributes.infrastructure.attribute_store import SqlAttributeStore
from attributes.infrastructure.models import AttributeModel

__all__ = ["AttributeModel", "SqlAttributeStore"]
