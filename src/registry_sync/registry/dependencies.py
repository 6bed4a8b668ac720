"""FastAPI dependency providers for the registry bounded context.

Services are constructed once in the application lifespan and stored on
``app.state``; these providers hand them to routes so tests can swap them
through ``app.dependency_overrides``.
"""

from __future__ import annotations

from fastapi import Request

from registry.application.services import PeriodicReconciler, SyncRequestService


def get_sync_request_service(request: Request) -> SyncRequestService:
    """Get the SyncRequestService built at startup."""
    return request.app.state.sync_request_service


def get_periodic_reconciler(request: Request) -> PeriodicReconciler:
    """Get the PeriodicReconciler built at startup."""
    return request.app.state.periodic_reconciler
