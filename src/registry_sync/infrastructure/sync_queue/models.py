"""SQLAlchemy ORM model for the registry sync request queue."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import JSON
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base
from shared_kernel.sync_queue.value_objects import SyncRequest

# Raised by the registry_sync_requests insert trigger (migration c47a0e9f13d2)
NOTIFY_CHANNEL = "registry_sync_requests"

PENDING_PREDICATE = "processed_at IS NULL AND failed_at IS NULL"
UNDELIVERED_PREDICATE = f"{PENDING_PREDICATE} AND claimed_at IS NULL"


class SyncRequestModel(Base):
    """ORM model for the registry_sync_requests table.

    The table uses partial indexes:
    - uq_sync_requests_undelivered: one undelivered message per attribute id
      (content-based deduplication target)
    - idx_sync_requests_visible: for fetching pending messages
    - idx_sync_requests_failed: for inspecting the dead letter queue
    """

    __tablename__ = "registry_sync_requests"
    __table_args__ = (
        Index(
            "uq_sync_requests_undelivered",
            "attribute_id",
            unique=True,
            postgresql_where=text(UNDELIVERED_PREDICATE),
        ),
        Index(
            "idx_sync_requests_visible",
            "visible_at",
            "created_at",
            postgresql_where=text(PENDING_PREDICATE),
        ),
        Index(
            "idx_sync_requests_failed",
            "failed_at",
            postgresql_where=text("failed_at IS NOT NULL"),
        ),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    attribute_id: Mapped[str] = mapped_column(String(1024), nullable=False)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("NOW()"),
    )
    visible_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("NOW()"),
    )
    receive_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        server_default="0",
    )
    claimed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    outcome: Mapped[str | None] = mapped_column(String(64), nullable=True)
    # Retry/DLQ columns
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    failed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    replayed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def to_value_object(self) -> SyncRequest:
        """Convert this ORM model to a SyncRequest value object."""
        return SyncRequest(
            id=self.id,
            attribute_id=self.attribute_id,
            payload=self.payload,
            created_at=self.created_at,
            visible_at=self.visible_at,
            receive_count=self.receive_count,
            claimed_at=self.claimed_at,
            processed_at=self.processed_at,
            outcome=self.outcome,
            failed_at=self.failed_at,
            last_error=self.last_error,
            replayed_at=self.replayed_at,
        )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<SyncRequestModel("
            f"id={self.id}, "
            f"attribute_id={self.attribute_id}, "
            f"receive_count={self.receive_count}, "
            f"processed_at={self.processed_at}, "
            f"failed_at={self.failed_at}"
            f")>"
        )
