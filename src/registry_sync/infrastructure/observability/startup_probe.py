"""Domain probe for application startup and lifecycle events.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events during application initialization and shutdown.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class StartupProbe(Protocol):
    """Domain probe for application startup operations."""

    def application_started(self, version: str, database: str) -> None:
        """Record that the application finished wiring its components."""
        ...

    def sync_worker_disabled(self) -> None:
        """Record that the queue worker is disabled by configuration."""
        ...

    def reconciler_disabled(self) -> None:
        """Record that periodic sweeps are disabled by configuration."""
        ...

    def application_stopped(self) -> None:
        """Record that background components were shut down."""
        ...


class DefaultStartupProbe:
    """Default implementation of StartupProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def application_started(self, version: str, database: str) -> None:
        """Record that the application finished wiring its components."""
        self._logger.info("application_started", version=version, database=database)

    def sync_worker_disabled(self) -> None:
        """Record that the queue worker is disabled by configuration."""
        self._logger.info("sync_worker_disabled")

    def reconciler_disabled(self) -> None:
        """Record that periodic sweeps are disabled by configuration."""
        self._logger.info("reconciler_disabled")

    def application_stopped(self) -> None:
        """Record that background components were shut down."""
        self._logger.info("application_stopped")
