"""Pydantic models for registry sync API requests and responses."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from registry.application.services import SweepReport
from shared_kernel.sync_queue.value_objects import SyncRequest


class SyncRequestCreate(BaseModel):
    """Request model for requesting a registry sync of one attribute."""

    id: str = Field(..., description="Attribute id (KEY:VALUE)", min_length=1)


class SyncRequestAccepted(BaseModel):
    """Response model for an accepted sync request."""

    id: str = Field(..., description="Normalized attribute id")
    deduplicated: bool = Field(
        ..., description="True if an already queued request absorbed this one"
    )


class SweepReportResponse(BaseModel):
    """Response model for a completed reconciliation sweep."""

    pages_read: int
    enqueued: int
    deduplicated: int
    failed: int
    last_token: str | None = None

    @classmethod
    def from_domain(cls, report: SweepReport) -> SweepReportResponse:
        return cls(
            pages_read=report.pages_read,
            enqueued=report.enqueued,
            deduplicated=report.deduplicated,
            failed=report.failed,
            last_token=report.last_token,
        )


class DeadLetterResponse(BaseModel):
    """Response model for a dead-lettered sync request."""

    entry_id: UUID
    attribute_id: str
    payload: dict
    receive_count: int
    last_error: str | None = None
    created_at: datetime
    failed_at: datetime | None = None

    @classmethod
    def from_domain(cls, request: SyncRequest) -> DeadLetterResponse:
        """Convert a SyncRequest value object to an API response."""
        return cls(
            entry_id=request.id,
            attribute_id=request.attribute_id,
            payload=request.payload,
            receive_count=request.receive_count,
            last_error=request.last_error,
            created_at=request.created_at,
            failed_at=request.failed_at,
        )
