"""Ports (interfaces) for the registry bounded context.

Ports define the contract of the external registry and the closed set of
errors its adapters may raise, so the application layer never sees provider
error codes.
"""

from registry.ports.exceptions import (
    AttributeNotFoundError,
    FatalConfigurationError,
    InvalidAttributeIdError,
    RegistryError,
    RegistryGroupNotFoundError,
    TransientRegistryError,
)
from registry.ports.registry import IRegistryClient

__all__ = [
    "AttributeNotFoundError",
    "FatalConfigurationError",
    "IRegistryClient",
    "InvalidAttributeIdError",
    "RegistryError",
    "RegistryGroupNotFoundError",
    "TransientRegistryError",
]
