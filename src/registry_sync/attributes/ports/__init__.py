"""Ports (interfaces) for the attributes bounded context."""

from attributes.ports.repositories import IAttributeStore

__all__ = ["IAttributeStore"]
