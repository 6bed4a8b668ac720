"""Domain layer for the registry bounded context."""

from registry.domain.value_objects import (
    DesiredRegistryGroup,
    RegistryGroup,
    RegistryGroupDiff,
    SyncOutcome,
    build_registry_payload,
    registry_group_name,
)

__all__ = [
    "DesiredRegistryGroup",
    "RegistryGroup",
    "RegistryGroupDiff",
    "SyncOutcome",
    "build_registry_payload",
    "registry_group_name",
]
