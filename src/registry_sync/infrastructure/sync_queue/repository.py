"""PostgreSQL implementation of the sync request queue.

The queue is a table of messages keyed by attribute id. It provides:

- content-based deduplication: at most one undelivered message per
  attribute id, enforced by a partial unique index and ON CONFLICT DO NOTHING
- per-id exclusivity: a message is only claimed while no other message for
  the same id holds an unexpired lease, serialized by a transaction-scoped
  advisory lock on the id
- visibility leases: a claimed message becomes visible again when its lease
  runs out, so a crashed worker never loses a message
- a dead letter queue: rows with ``failed_at`` set, which keep their payload
  for replay
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import exists, func, select, text, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import aliased

from infrastructure.sync_queue.models import SyncRequestModel, UNDELIVERED_PREDICATE
from shared_kernel.sync_queue.exceptions import EnqueueError
from shared_kernel.sync_queue.observability import (
    DefaultSyncRequestQueueProbe,
    SyncRequestQueueProbe,
)
from shared_kernel.sync_queue.value_objects import SyncRequest

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

RETRY_BUDGET_EXHAUSTED = "retry budget exhausted before completion"


def _pending(model=SyncRequestModel):
    return (
        model.processed_at.is_(None),
        model.failed_at.is_(None),
    )


def _leased_elsewhere(now: datetime):
    """Another pending message for the same attribute id holds a lease."""
    other = aliased(SyncRequestModel)
    return exists().where(
        other.attribute_id == SyncRequestModel.attribute_id,
        other.id != SyncRequestModel.id,
        *_pending(other),
        other.claimed_at.is_not(None),
        other.visible_at > now,
    )


class SyncRequestQueue:
    """PostgreSQL-backed implementation of ISyncRequestQueue.

    Unlike a transactional outbox, the queue owns its transactions: an
    enqueue must never roll back the attribute mutation that triggered it,
    and a claim must be committed before the reconcile starts so the lease
    outlives a crashed worker.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        max_retries: int = 1,
        visibility_timeout_seconds: int = 60,
        probe: SyncRequestQueueProbe | None = None,
    ) -> None:
        """Initialize the queue.

        Args:
            session_factory: Factory for creating database sessions
            max_retries: Redeliveries allowed before a message is dead-lettered
            visibility_timeout_seconds: Lease granted to a claimed message
            probe: Optional observability probe
        """
        self._session_factory = session_factory
        self._max_retries = max_retries
        self._visibility_timeout = timedelta(seconds=visibility_timeout_seconds)
        self._probe = probe or DefaultSyncRequestQueueProbe()

    async def enqueue(self, attribute_id: str) -> bool:
        """Queue a sync request unless one is already waiting for delivery.

        A message that is in flight does not absorb new requests: its
        reconcile may already have read the previous state, so the new
        request is queued behind it.

        Args:
            attribute_id: Normalized attribute id

        Returns:
            True if a new message was written, False if deduplicated

        Raises:
            EnqueueError: If the database rejects the write
        """
        stmt = (
            pg_insert(SyncRequestModel)
            .values(attribute_id=attribute_id, payload={"id": attribute_id})
            .on_conflict_do_nothing(
                index_elements=[SyncRequestModel.attribute_id],
                index_where=text(UNDELIVERED_PREDICATE),
            )
            .returning(SyncRequestModel.id)
        )

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                entry_id = result.scalar_one_or_none()
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            self._probe.enqueue_failed(attribute_id, str(e))
            raise EnqueueError(
                f"Failed to enqueue sync request for {attribute_id}",
                attribute_id=attribute_id,
            ) from e

        if entry_id is None:
            self._probe.request_deduplicated(attribute_id)
            return False

        self._probe.request_enqueued(attribute_id, entry_id)
        return True

    async def claim(self, limit: int, entry_id: UUID | None = None) -> list[SyncRequest]:
        """Deliver up to ``limit`` visible messages, at most one per attribute id.

        Uses FOR UPDATE SKIP LOCKED so concurrent workers take different
        rows, and a transaction-scoped advisory lock per attribute id so two
        workers can never lease messages for the same id at the same time.
        Messages that were already delivered more than ``max_retries`` times
        are dead-lettered instead of being delivered again.

        Args:
            limit: Maximum messages to deliver
            entry_id: Restrict delivery to a single message

        Returns:
            The leased messages, oldest first
        """
        now = datetime.now(UTC)
        claimed: list[SyncRequest] = []

        stmt = (
            select(SyncRequestModel)
            .where(*_pending())
            .where(SyncRequestModel.visible_at <= now)
            .where(~_leased_elsewhere(now))
            .order_by(SyncRequestModel.created_at)
            .limit(limit)
            .with_for_update(skip_locked=True, of=SyncRequestModel)
        )
        if entry_id is not None:
            stmt = stmt.where(SyncRequestModel.id == entry_id)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            models = result.scalars().all()

            partitions: set[str] = set()
            for model in models:
                if model.attribute_id in partitions:
                    continue
                if not await self._lock_partition(session, model.attribute_id):
                    continue
                if await self._has_active_lease(session, model, now):
                    continue
                partitions.add(model.attribute_id)

                if model.claimed_at is not None:
                    self._probe.request_redelivered(
                        model.id, model.attribute_id, model.receive_count
                    )
                    if model.receive_count > self._max_retries:
                        model.failed_at = now
                        model.last_error = model.last_error or RETRY_BUDGET_EXHAUSTED
                        continue

                model.receive_count += 1
                model.claimed_at = model.claimed_at or now
                model.visible_at = now + self._visibility_timeout
                claimed.append(model.to_value_object())

            await session.commit()

        return claimed

    async def _lock_partition(self, session: AsyncSession, attribute_id: str) -> bool:
        """Take the per-id advisory lock for the rest of the claim transaction."""
        stmt = select(
            func.pg_try_advisory_xact_lock(func.hashtextextended(attribute_id, 0))
        )
        return bool(await session.scalar(stmt))

    async def _has_active_lease(
        self,
        session: AsyncSession,
        model: SyncRequestModel,
        now: datetime,
    ) -> bool:
        """Check again, under the advisory lock, whether the id is leased.

        The claim query already skips leased ids, but a lease committed by
        another worker after that query ran is only visible here. Messages
        waiting for a scheduled retry hold their lease too, which
        keeps later messages for the id queued behind them.
        """
        stmt = select(
            exists().where(
                SyncRequestModel.attribute_id == model.attribute_id,
                SyncRequestModel.id != model.id,
                *_pending(),
                SyncRequestModel.claimed_at.is_not(None),
                SyncRequestModel.visible_at > now,
            )
        )
        return bool(await session.scalar(stmt))

    async def mark_processed(self, entry_id: UUID, outcome: str) -> None:
        """Mark a message as processed.

        Args:
            entry_id: The message to complete
            outcome: Reconcile outcome or discard reason
        """
        stmt = (
            update(SyncRequestModel)
            .where(SyncRequestModel.id == entry_id)
            .where(*_pending())
            .values(processed_at=datetime.now(UTC), outcome=outcome)
        )
        await self._execute(stmt)

    async def schedule_retry(
        self, entry_id: UUID, error: str, delay_seconds: int
    ) -> None:
        """Record a failure and make the message visible again later.

        The message keeps its lease until the delay has passed, so later
        messages for the same id stay queued behind it.

        Args:
            entry_id: The message that failed
            error: The error that caused the failure
            delay_seconds: Seconds until the message can be redelivered
        """
        stmt = (
            update(SyncRequestModel)
            .where(SyncRequestModel.id == entry_id)
            .where(*_pending())
            .values(
                last_error=error,
                visible_at=datetime.now(UTC) + timedelta(seconds=delay_seconds),
            )
        )
        await self._execute(stmt)

    async def move_to_dead_letter(self, entry_id: UUID, error: str) -> None:
        """Move a message to the dead letter queue.

        Sets failed_at to mark the message as permanently failed. It will no
        longer be delivered, but keeps its payload for replay.

        Args:
            entry_id: The message to move to the DLQ
            error: The error that caused the failure
        """
        stmt = (
            update(SyncRequestModel)
            .where(SyncRequestModel.id == entry_id)
            .where(*_pending())
            .values(last_error=error, failed_at=datetime.now(UTC))
        )
        await self._execute(stmt)

    async def list_dead_letters(self, limit: int = 100) -> list[SyncRequest]:
        """List dead-lettered messages that have not been replayed, newest first."""
        stmt = (
            select(SyncRequestModel)
            .where(SyncRequestModel.failed_at.is_not(None))
            .where(SyncRequestModel.replayed_at.is_(None))
            .order_by(SyncRequestModel.failed_at.desc())
            .limit(limit)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [model.to_value_object() for model in result.scalars().all()]

    async def replay_dead_letter(self, entry_id: UUID) -> SyncRequest | None:
        """Re-enqueue the attribute id carried by a dead-lettered message.

        Args:
            entry_id: The dead-lettered message

        Returns:
            The dead letter as it was before the replay, or None if the
            message does not exist, is not dead-lettered or was already replayed

        Raises:
            EnqueueError: If the database rejects the write
        """
        select_stmt = (
            select(SyncRequestModel)
            .where(SyncRequestModel.id == entry_id)
            .where(SyncRequestModel.failed_at.is_not(None))
            .where(SyncRequestModel.replayed_at.is_(None))
            .with_for_update()
        )

        try:
            async with self._session_factory() as session:
                model = (await session.execute(select_stmt)).scalar_one_or_none()
                if model is None:
                    return None

                dead_letter = model.to_value_object()
                attribute_id = dead_letter.requested_id or model.attribute_id

                await session.execute(
                    pg_insert(SyncRequestModel)
                    .values(attribute_id=attribute_id, payload={"id": attribute_id})
                    .on_conflict_do_nothing(
                        index_elements=[SyncRequestModel.attribute_id],
                        index_where=text(UNDELIVERED_PREDICATE),
                    )
                )
                model.replayed_at = datetime.now(UTC)
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            self._probe.enqueue_failed(str(entry_id), str(e))
            raise EnqueueError(f"Failed to replay dead letter {entry_id}") from e

        self._probe.dead_letter_replayed(entry_id, attribute_id)
        return dead_letter

    async def _execute(self, stmt) -> None:
        async with self._session_factory() as session:
            await session.execute(stmt)
            await session.commit()
