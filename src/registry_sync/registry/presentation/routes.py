"""HTTP routes for registry synchronization."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from registry.application.services import (
    PeriodicReconciler,
    SyncRequestService,
    normalize_attribute_id,
)
from registry.dependencies import get_periodic_reconciler, get_sync_request_service
from registry.ports.exceptions import InvalidAttributeIdError
from registry.presentation.models import (
    DeadLetterResponse,
    SweepReportResponse,
    SyncRequestAccepted,
    SyncRequestCreate,
)
from shared_kernel.sync_queue.exceptions import EnqueueError

router = APIRouter(
    prefix="/registry-sync",
    tags=["registry-sync"],
)


@router.post(
    "/requests",
    status_code=status.HTTP_202_ACCEPTED,
    summary="Request a registry sync",
    responses={
        202: {"description": "Sync request queued or deduplicated"},
        422: {"description": "Empty attribute id"},
        503: {"description": "Sync request queue unavailable"},
    },
)
async def request_sync(
    request: SyncRequestCreate,
    service: Annotated[SyncRequestService, Depends(get_sync_request_service)],
) -> SyncRequestAccepted:
    """Queue a registry sync for one attribute id.

    Args:
        request: The attribute id to sync
        service: Sync request service

    Returns:
        The normalized id and whether the request was deduplicated

    Raises:
        HTTPException: 422 if the id is blank
        HTTPException: 503 if the queue rejects the write
    """
    try:
        queued = await service.enqueue(request.id)
    except InvalidAttributeIdError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    except EnqueueError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Sync request queue unavailable",
        )

    return SyncRequestAccepted(
        id=normalize_attribute_id(request.id), deduplicated=not queued
    )


@router.post("/sweeps")
async def run_sweep(
    reconciler: Annotated[PeriodicReconciler, Depends(get_periodic_reconciler)],
    start_token: Annotated[str | None, Query(description="Resume after this token")] = None,
) -> SweepReportResponse:
    """Run a full reconciliation sweep now.

    Raises:
        HTTPException: 500 if the attribute store cannot be read
    """
    try:
        report = await reconciler.sweep(start_token=start_token)
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Reconciliation sweep failed",
        )
    return SweepReportResponse.from_domain(report)


@router.get("/dead-letters")
async def list_dead_letters(
    service: Annotated[SyncRequestService, Depends(get_sync_request_service)],
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
) -> list[DeadLetterResponse]:
    """List dead-lettered sync requests, newest first."""
    dead_letters = await service.list_dead_letters(limit=limit)
    return [DeadLetterResponse.from_domain(entry) for entry in dead_letters]


@router.post(
    "/dead-letters/{entry_id}/replay",
    status_code=status.HTTP_202_ACCEPTED,
)
async def replay_dead_letter(
    entry_id: UUID,
    service: Annotated[SyncRequestService, Depends(get_sync_request_service)],
) -> DeadLetterResponse:
    """Re-enqueue the attribute id of a dead-lettered sync request.

    Raises:
        HTTPException: 404 if the entry is not an unreplayed dead letter
        HTTPException: 503 if the queue rejects the write
    """
    try:
        dead_letter = await service.replay_dead_letter(entry_id)
    except EnqueueError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Sync request queue unavailable",
        )

    if dead_letter is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Dead letter not found",
        )
    return DeadLetterResponse.from_domain(dead_letter)
