"""Infrastructure layer for the registry bounded context."""

from registry.infrastructure.appregistry_client import AppRegistryClient

__all__ = ["AppRegistryClient"]
