"""Integration tests for the PostgreSQL sync request queue.

These tests exercise the guarantees that only the database can provide:
1. Deduplication of undelivered messages by the partial unique index
2. Messages enqueued during a reconcile queue behind the in-flight one
3. Concurrent claims never lease the same attribute id twice
4. Redelivery past the retry budget dead-letters the message

Requirements:
    - PostgreSQL 13+ (gen_random_uuid)
"""

import asyncio

import pytest
from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.sync_queue.models import SyncRequestModel
from infrastructure.sync_queue.repository import (
    RETRY_BUDGET_EXHAUSTED,
    SyncRequestQueue,
)

pytestmark = pytest.mark.integration


async def count_rows(
    session_factory: async_sessionmaker[AsyncSession], attribute_id: str
) -> int:
    async with session_factory() as session:
        stmt = (
            select(func.count())
            .select_from(SyncRequestModel)
            .where(SyncRequestModel.attribute_id == attribute_id)
        )
        return (await session.execute(stmt)).scalar_one()


async def expire_leases(session_factory: async_sessionmaker[AsyncSession]) -> None:
    """Move every lease into the past, as if the worker had crashed."""
    async with session_factory() as session:
        await session.execute(
            text(
                "UPDATE registry_sync_requests "
                "SET visible_at = NOW() - INTERVAL '1 minute' "
                "WHERE claimed_at IS NOT NULL"
            )
        )
        await session.commit()


class TestEnqueue:
    """Tests for deduplication against the partial unique index."""

    @pytest.mark.asyncio
    async def test_same_id_twice_is_stored_once(self, session_factory):
        queue = SyncRequestQueue(session_factory)

        first = await queue.enqueue("apo:color")
        second = await queue.enqueue("apo:color")

        assert first is True
        assert second is False
        assert await count_rows(session_factory, "apo:color") == 1

    @pytest.mark.asyncio
    async def test_distinct_ids_are_stored_separately(self, session_factory):
        queue = SyncRequestQueue(session_factory)

        await queue.enqueue("apo:color")
        await queue.enqueue("apo:size")

        assert await count_rows(session_factory, "apo:color") == 1
        assert await count_rows(session_factory, "apo:size") == 1

    @pytest.mark.asyncio
    async def test_enqueue_during_flight_queues_behind(self, session_factory):
        queue = SyncRequestQueue(session_factory)
        await queue.enqueue("apo:color")
        [in_flight] = await queue.claim(10)

        queued = await queue.enqueue("apo:color")

        assert queued is True
        assert await count_rows(session_factory, "apo:color") == 2
        assert await queue.claim(10) == []

        await queue.mark_processed(in_flight.id, "UPDATED")
        [next_request] = await queue.claim(10)

        assert next_request.id != in_flight.id
        assert next_request.attribute_id == "apo:color"


class TestClaim:
    """Tests for leasing under concurrency."""

    @pytest.mark.asyncio
    async def test_concurrent_claims_never_share_a_message(self, session_factory):
        queue = SyncRequestQueue(session_factory)
        for i in range(20):
            await queue.enqueue(f"apo:attr-{i}")

        batches = await asyncio.gather(
            queue.claim(20), queue.claim(20), queue.claim(20)
        )

        claimed = [request.attribute_id for batch in batches for request in batch]
        assert len(claimed) == len(set(claimed))
        assert len(claimed) <= 20

    @pytest.mark.asyncio
    async def test_concurrent_claims_lease_an_id_at_most_once(self, session_factory):
        queue = SyncRequestQueue(session_factory, max_retries=5)
        await queue.enqueue("apo:color")
        await queue.claim(10)
        await queue.enqueue("apo:color")
        await expire_leases(session_factory)

        # Both the expired redelivery and the queued message are now visible
        batches = await asyncio.gather(
            queue.claim(10), queue.claim(10), queue.claim(10)
        )

        claimed = [request for batch in batches for request in batch]
        assert len(claimed) == 1
        assert claimed[0].attribute_id == "apo:color"

    @pytest.mark.asyncio
    async def test_leased_id_does_not_use_up_the_limit(self, session_factory):
        queue = SyncRequestQueue(session_factory)
        await queue.enqueue("apo:color")
        await queue.claim(1)
        await queue.enqueue("apo:color")
        await queue.enqueue("apo:size")

        claimed = await queue.claim(1)

        assert [request.attribute_id for request in claimed] == ["apo:size"]


class TestRetryBudget:
    """Tests for dead-lettering on redelivery."""

    @pytest.mark.asyncio
    async def test_redelivery_past_max_retries_is_dead_lettered(
        self, session_factory
    ):
        queue = SyncRequestQueue(session_factory, max_retries=1)
        await queue.enqueue("apo:color")

        [first] = await queue.claim(10)
        await expire_leases(session_factory)
        [redelivered] = await queue.claim(10)
        await expire_leases(session_factory)
        exhausted = await queue.claim(10)

        assert first.receive_count == 1
        assert redelivered.id == first.id
        assert redelivered.receive_count == 2
        assert exhausted == []

        async with session_factory() as session:
            model = await session.get(SyncRequestModel, first.id)

        assert model.failed_at is not None
        assert model.processed_at is None
        assert model.last_error == RETRY_BUDGET_EXHAUSTED

    @pytest.mark.asyncio
    async def test_dead_letter_can_be_replayed(self, session_factory):
        queue = SyncRequestQueue(session_factory, max_retries=0)
        await queue.enqueue("apo:color")
        [first] = await queue.claim(10)
        await expire_leases(session_factory)
        await queue.claim(10)

        [dead_letter] = await queue.list_dead_letters()
        replayed = await queue.replay_dead_letter(dead_letter.id)

        assert replayed is not None
        assert replayed.id == first.id
        assert await queue.list_dead_letters() == []
        [fresh] = await queue.claim(10)
        assert fresh.id != first.id
        assert fresh.attribute_id == "apo:color"
