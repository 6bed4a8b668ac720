"""PostgreSQL NOTIFY-based event source for the sync request queue.

This module provides an event source that listens for PostgreSQL NOTIFY
events raised by the queue table trigger and invokes a callback for each
newly enqueued message. It uses asyncpg-listen for reliable connection
handling and automatic reconnection.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from uuid import UUID

from asyncpg_listen import (
    ListenPolicy,
    NotificationListener,
    NotificationOrTimeout,
    Timeout,
    connect_func,
)

from infrastructure.sync_queue.models import NOTIFY_CHANNEL
from shared_kernel.sync_queue.observability import (
    DefaultEventSourceProbe,
    EventSourceProbe,
)
from shared_kernel.sync_queue.ports import SyncRequestEventSource


class PostgresNotifyEventSource(SyncRequestEventSource):
    """PostgreSQL NOTIFY-based event source for sync requests.

    The payload of each notification is the id of the inserted message.
    Notifications are a latency optimization only: anything missed here is
    picked up by the worker's poll loop.
    """

    def __init__(
        self,
        db_url: str,
        channel: str = NOTIFY_CHANNEL,
        probe: EventSourceProbe | None = None,
    ) -> None:
        """Initialize the NOTIFY event source.

        Args:
            db_url: PostgreSQL connection URL (libpq form, no driver suffix)
            channel: NOTIFY channel name; must match the insert trigger
            probe: Optional observability probe (default: DefaultEventSourceProbe)
        """
        self._db_url = db_url
        self._channel = channel
        self._probe = probe or DefaultEventSourceProbe()
        self._on_event: Callable[[UUID], Awaitable[None]] | None = None
        self._running = False
        self._listener: NotificationListener | None = None
        self._listener_task: asyncio.Task[None] | None = None

    async def start(self, on_event: Callable[[UUID], Awaitable[None]]) -> None:
        """Start listening for NOTIFY events.

        Blocks until stop() is called, invoking the callback for each
        notification whose payload is a valid UUID.

        Args:
            on_event: Async callback to invoke when a message is enqueued
        """
        self._on_event = on_event
        self._running = True

        try:
            self._listener = NotificationListener(connect_func(self._db_url))
            self._probe.event_source_started(self._channel)

            self._listener_task = asyncio.create_task(
                self._listener.run(
                    {self._channel: self._handle_notification},
                    policy=ListenPolicy.ALL,
                )
            )
            await self._listener_task
        except asyncio.CancelledError:
            # Cancelled via stop()
            pass
        except Exception as e:
            self._probe.listener_error(str(e))

    async def _handle_notification(self, notification: NotificationOrTimeout) -> None:
        if not self._running:
            return

        # asyncpg-listen sends Timeout when nothing arrives within its window
        if isinstance(notification, Timeout):
            return

        if not notification.payload:
            return

        try:
            entry_id = UUID(notification.payload)
        except (ValueError, TypeError):
            self._probe.invalid_notification_ignored(
                notification.payload, "Invalid UUID format"
            )
            return

        self._probe.notification_received(entry_id)
        if self._on_event is not None:
            await self._on_event(entry_id)

    async def stop(self) -> None:
        """Stop the event source and clean up resources."""
        self._running = False

        if self._listener_task and not self._listener_task.done():
            self._listener_task.cancel()
            try:
                await self._listener_task
            except asyncio.CancelledError:
                pass

        self._probe.event_source_stopped()
