"""Architecture tests using pytest-archon.

These tests enforce DDD architectural boundaries between the layers of
the registry and attributes bounded contexts.
"""

from pytest_archon import archrule


class TestRegistryDomainLayerBoundaries:
    """Tests that the registry domain layer has no forbidden dependencies."""

    def test_domain_does_not_import_infrastructure(self):
        """Domain layer should not depend on infrastructure.

        Group naming and payload building must not know about boto3 or
        the database.
        """
        (
            archrule("registry_domain_no_infrastructure")
            .match("registry.domain*")
            .should_not_import("registry.infrastructure*", "infrastructure*")
            .check("registry")
        )

    def test_domain_does_not_import_application(self):
        (
            archrule("registry_domain_no_application")
            .match("registry.domain*")
            .should_not_import("registry.application*")
            .check("registry")
        )

    def test_domain_does_not_import_frameworks(self):
        (
            archrule("registry_domain_no_frameworks")
            .match("registry.domain*")
            .should_not_import("fastapi*", "starlette*", "sqlalchemy*", "boto3*")
            .check("registry")
        )


class TestRegistryApplicationLayerBoundaries:
    """Tests that application services only depend on ports."""

    def test_application_does_not_import_infrastructure(self):
        """Application services receive their adapters by injection.

        The synchronizer talks to IRegistryClient and IAttributeStore; it
        must not import AppRegistryClient or SqlAttributeStore.
        """
        (
            archrule("registry_application_no_infrastructure")
            .match("registry.application*")
            .should_not_import(
                "registry.infrastructure*",
                "attributes.infrastructure*",
                "infrastructure*",
            )
            .check("registry")
        )

    def test_application_does_not_import_boto3(self):
        (
            archrule("registry_application_no_boto3")
            .match("registry.application*")
            .should_not_import("boto3*", "botocore*")
            .check("registry")
        )

    def test_application_does_not_import_presentation(self):
        (
            archrule("registry_application_no_presentation")
            .match("registry.application*")
            .should_not_import("registry.presentation*", "fastapi*")
            .check("registry")
        )


class TestRegistryPortsLayerBoundaries:
    def test_ports_do_not_import_infrastructure(self):
        """Ports define interfaces; they do not know about AppRegistry."""
        (
            archrule("registry_ports_no_infrastructure")
            .match("registry.ports*")
            .should_not_import("registry.infrastructure*", "boto3*", "botocore*")
            .check("registry")
        )


class TestAttributesBoundedContextIsolation:
    """The attribute store must not know that a registry mirrors it."""

    def test_attributes_do_not_import_registry(self):
        (
            archrule("attributes_no_registry")
            .match("attributes*")
            .should_not_import("registry*")
            .check("attributes")
        )

    def test_attributes_domain_does_not_import_sqlalchemy(self):
        (
            archrule("attributes_domain_no_sqlalchemy")
            .match("attributes.domain*")
            .should_not_import("sqlalchemy*", "attributes.infrastructure*")
            .check("attributes")
        )


class TestSharedKernelIsolation:
    """The sync queue contract must not depend on any bounded context."""

    def test_shared_kernel_does_not_import_bounded_contexts(self):
        (
            archrule("shared_kernel_no_bounded_contexts")
            .match("shared_kernel*")
            .should_not_import("registry*", "attributes*", "infrastructure*")
            .check("shared_kernel")
        )
