"""Interval scheduling for background jobs.

The periodic reconciler runs as a background task within the FastAPI
application. Each tick awaits the job to completion, so two runs of the same
job never overlap in one process.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

import structlog

logger = structlog.get_logger()


class SchedulerProbe(Protocol):
    """Protocol for scheduler observability."""

    def scheduler_started(self, job: str, interval_seconds: float) -> None:
        ...

    def scheduler_stopped(self, job: str) -> None:
        ...

    def job_failed(self, job: str, error: str) -> None:
        ...


class DefaultSchedulerProbe:
    """Default implementation using structlog."""

    def __init__(self) -> None:
        self._log = logger.bind(component="scheduler")

    def scheduler_started(self, job: str, interval_seconds: float) -> None:
        self._log.info(
            "scheduler_started", job=job, interval_seconds=interval_seconds
        )

    def scheduler_stopped(self, job: str) -> None:
        self._log.info("scheduler_stopped", job=job)

    def job_failed(self, job: str, error: str) -> None:
        self._log.error("scheduled_job_failed", job=job, error=error)


class IntervalScheduler:
    """Runs an async job every ``interval_seconds``.

    A failed run is reported through the probe and the job is attempted
    again at the next tick. Cancellation stops the job at its next await.
    """

    def __init__(
        self,
        name: str,
        job: Callable[[], Awaitable[Any]],
        interval_seconds: float,
        run_on_startup: bool = False,
        probe: SchedulerProbe | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            name: Job name used in log events
            job: Coroutine function to run on every tick
            interval_seconds: Seconds between the end of one run and the next
            run_on_startup: Run the job immediately instead of after one interval
            probe: Optional observability probe
        """
        self._name = name
        self._job = job
        self._interval = interval_seconds
        self._run_on_startup = run_on_startup
        self._probe = probe or DefaultSchedulerProbe()
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the schedule in a background task."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run())
        self._probe.scheduler_started(self._name, self._interval)

    async def stop(self) -> None:
        """Cancel the schedule and any run in progress."""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self._probe.scheduler_stopped(self._name)

    async def _run(self) -> None:
        if not self._run_on_startup:
            await asyncio.sleep(self._interval)

        while True:
            await self.run_once()
            await asyncio.sleep(self._interval)

    async def run_once(self) -> None:
        """Run the job once, reporting failures instead of raising them."""
        try:
            await self._job()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._probe.job_failed(self._name, str(e) or repr(e))
