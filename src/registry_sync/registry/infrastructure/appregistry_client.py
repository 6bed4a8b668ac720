"""AWS Service Catalog AppRegistry implementation of IRegistryClient.

Attribute groups are addressed by name. boto3 is synchronous, so every call
runs in a worker thread; botocore timeouts bound each call and SDK retries
default to a single attempt, leaving retry policy to the sync queue.

This is the only module that inspects AppRegistry error codes. Every
failure leaves it as one of the registry.ports exceptions.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from registry.domain.value_objects import RegistryGroup
from registry.infrastructure.observability import (
    DefaultRegistryClientProbe,
    RegistryClientProbe,
)
from registry.ports.exceptions import (
    FatalConfigurationError,
    RegistryError,
    RegistryGroupNotFoundError,
    TransientRegistryError,
)
from registry.ports.registry import IRegistryClient

SERVICE_NAME = "servicecatalog-appregistry"

NOT_FOUND_CODES = frozenset({"ResourceNotFoundException"})
FATAL_CODES = frozenset(
    {
        "ValidationException",
        "AccessDeniedException",
        "ServiceQuotaExceededException",
        "UnrecognizedClientException",
        "InvalidSignatureException",
    }
)


def create_client_token() -> str:
    """Generate the idempotency token of one create call.

    botocore reuses the token when it retries the call, so a create whose
    response was lost is not applied twice. Every new create gets a fresh
    token: AppRegistry answers a replayed token with the result of the
    first request, which would hide a group deleted in the meantime.
    A redelivered create for a group that does exist fails with a
    conflict and is reconciled as an update on the next delivery.
    """
    return str(uuid.uuid4())


def build_appregistry_client(
    region: str,
    endpoint_url: str | None = None,
    connect_timeout_seconds: float = 5.0,
    read_timeout_seconds: float = 10.0,
    max_attempts: int = 1,
) -> Any:
    """Create a boto3 AppRegistry client with bounded timeouts and retries."""
    client_kwargs: dict[str, Any] = {
        "service_name": SERVICE_NAME,
        "region_name": region,
        "config": Config(
            connect_timeout=connect_timeout_seconds,
            read_timeout=read_timeout_seconds,
            retries={"max_attempts": max_attempts, "mode": "standard"},
        ),
    }
    if endpoint_url:
        client_kwargs["endpoint_url"] = endpoint_url

    return boto3.client(**client_kwargs)


class AppRegistryClient(IRegistryClient):
    """Registry client backed by AWS Service Catalog AppRegistry."""

    def __init__(self, client: Any, probe: RegistryClientProbe | None = None) -> None:
        """Initialize the adapter.

        Args:
            client: boto3 ``servicecatalog-appregistry`` client
            probe: Optional domain probe for observability
        """
        self._client = client
        self._probe = probe or DefaultRegistryClientProbe()

    @classmethod
    def from_settings(
        cls,
        region: str,
        endpoint_url: str | None = None,
        connect_timeout_seconds: float = 5.0,
        read_timeout_seconds: float = 10.0,
        max_attempts: int = 1,
        probe: RegistryClientProbe | None = None,
    ) -> AppRegistryClient:
        probe = probe or DefaultRegistryClientProbe()
        client = build_appregistry_client(
            region=region,
            endpoint_url=endpoint_url,
            connect_timeout_seconds=connect_timeout_seconds,
            read_timeout_seconds=read_timeout_seconds,
            max_attempts=max_attempts,
        )
        probe.client_initialized(region, endpoint_url)
        return cls(client, probe=probe)

    async def get(self, name: str) -> RegistryGroup | None:
        """Read an attribute group, or None if AppRegistry does not know it."""
        try:
            response = await self._call("get_attribute_group", name, attributeGroup=name)
        except RegistryGroupNotFoundError:
            self._probe.group_read(name, found=False)
            return None

        self._probe.group_read(name, found=True)
        return RegistryGroup(
            name=response.get("name", name),
            description=response.get("description") or "",
            attributes=response.get("attributes") or "",
            tags=dict(response.get("tags") or {}),
            identifier=response.get("arn"),
        )

    async def create(
        self,
        name: str,
        description: str,
        attributes: str,
        tags: dict[str, str],
    ) -> str | None:
        """Create an attribute group and return its ARN."""
        response = await self._call(
            "create_attribute_group",
            name,
            name=name,
            description=description,
            attributes=attributes,
            clientToken=create_client_token(),
            tags=dict(tags),
        )
        self._probe.group_written("create", name)
        return (response.get("attributeGroup") or {}).get("arn")

    async def update(self, name: str, description: str, attributes: str) -> str | None:
        """Replace description and attributes, returning the group ARN.

        A group that disappeared since it was read surfaces as
        TransientRegistryError; redelivery will recreate it.
        """
        try:
            response = await self._call(
                "update_attribute_group",
                name,
                attributeGroup=name,
                description=description,
                attributes=attributes,
            )
        except RegistryGroupNotFoundError as e:
            raise TransientRegistryError(
                f"Attribute group {name} disappeared before update", group_name=name
            ) from e
        self._probe.group_written("update", name)
        return (response.get("attributeGroup") or {}).get("arn")

    async def tag(self, identifier: str, tags: dict[str, str]) -> None:
        """Add tags to a group. TagResource never removes other tags."""
        try:
            await self._call(
                "tag_resource", identifier, resourceArn=identifier, tags=dict(tags)
            )
        except RegistryGroupNotFoundError as e:
            raise TransientRegistryError(
                f"Resource {identifier} disappeared before tagging",
                group_name=identifier,
            ) from e
        self._probe.group_written("tag", identifier)

    async def delete(self, name: str) -> None:
        """Delete an attribute group; an absent group counts as deleted."""
        try:
            await self._call("delete_attribute_group", name, attributeGroup=name)
        except RegistryGroupNotFoundError:
            return
        self._probe.group_written("delete", name)

    async def _call(self, operation: str, target: str, **params: Any) -> dict[str, Any]:
        """Run one boto3 operation in a thread and translate its errors."""
        method = getattr(self._client, operation)
        try:
            return await asyncio.to_thread(method, **params)
        except ClientError as e:
            raise self._translate(operation, target, e) from e
        except BotoCoreError as e:
            self._probe.call_failed(operation, target, type(e).__name__, "transient")
            raise TransientRegistryError(
                f"{operation} failed for {target}: {e}", group_name=target
            ) from e

    def _translate(self, operation: str, target: str, error: ClientError) -> RegistryError:
        """Map an AppRegistry error code onto the registry error taxonomy."""
        code = error.response.get("Error", {}).get("Code", "Unknown")
        message = f"{operation} failed for {target}: {code}"

        if code in NOT_FOUND_CODES:
            return RegistryGroupNotFoundError(message, group_name=target)

        if code in FATAL_CODES:
            self._probe.call_failed(operation, target, code, "fatal")
            return FatalConfigurationError(message, group_name=target)

        # Throttling, conflicts, 5xx and unknown codes are worth another delivery
        self._probe.call_failed(operation, target, code, "transient")
        return TransientRegistryError(message, group_name=target)
