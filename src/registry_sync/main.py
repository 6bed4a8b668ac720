"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from attributes.infrastructure.attribute_store import SqlAttributeStore
from infrastructure.database import (
    build_listen_url,
    create_session_factory,
    create_write_engine,
)
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.scheduling import IntervalScheduler
from infrastructure.settings import (
    get_database_settings,
    get_reconciler_settings,
    get_registry_settings,
    get_settings,
    get_sync_queue_settings,
)
from infrastructure.sync_queue import SyncQueueWorker, SyncRequestQueue
from infrastructure.sync_queue.event_sources import PostgresNotifyEventSource
from infrastructure.version import __version__
from registry.application.services import (
    AttributeSynchronizer,
    PeriodicReconciler,
    SyncRequestService,
)
from registry.infrastructure.appregistry_client import AppRegistryClient
from registry.presentation import routes as registry_routes
from shared_kernel.sync_queue.observability import DefaultSyncWorkerProbe


@asynccontextmanager
async def registry_sync_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Database engine and session factory
    - Registry client, synchronizer and enqueue API (stored on app.state)
    - Sync queue worker (poll loop + NOTIFY listener)
    - Periodic reconciler schedule
    """
    configure_logging()
    probe = DefaultStartupProbe()

    db_settings = get_database_settings()
    registry_settings = get_registry_settings()
    queue_settings = get_sync_queue_settings()
    reconciler_settings = get_reconciler_settings()

    engine = create_write_engine(db_settings)
    session_factory = create_session_factory(engine)

    queue = SyncRequestQueue(
        session_factory,
        max_retries=queue_settings.max_retries,
        visibility_timeout_seconds=queue_settings.visibility_timeout_seconds,
    )
    store = SqlAttributeStore(session_factory)
    registry = AppRegistryClient.from_settings(
        region=registry_settings.region,
        endpoint_url=registry_settings.endpoint_url,
        connect_timeout_seconds=registry_settings.connect_timeout_seconds,
        read_timeout_seconds=registry_settings.read_timeout_seconds,
        max_attempts=registry_settings.max_attempts,
    )

    synchronizer = AttributeSynchronizer(
        store=store,
        registry=registry,
        group_name_prefix=registry_settings.group_name_prefix,
        required_tags=registry_settings.required_tags,
    )
    sync_requests = SyncRequestService(queue)
    reconciler = PeriodicReconciler(
        store=store,
        sync_requests=sync_requests,
        page_size=reconciler_settings.page_size,
    )

    app.state.sync_request_service = sync_requests
    app.state.periodic_reconciler = reconciler

    worker: SyncQueueWorker | None = None
    if queue_settings.enabled:
        worker = SyncQueueWorker(
            queue=queue,
            handler=synchronizer,
            probe=DefaultSyncWorkerProbe(),
            event_source=PostgresNotifyEventSource(
                build_listen_url(db_settings)
            ),
            poll_interval_seconds=queue_settings.poll_interval_seconds,
            batch_size=queue_settings.batch_size,
            concurrency=queue_settings.concurrency,
            max_retries=queue_settings.max_retries,
            retry_delay_seconds=queue_settings.retry_delay_seconds,
            reconcile_timeout_seconds=queue_settings.reconcile_timeout_seconds,
        )
        await worker.start()
    else:
        probe.sync_worker_disabled()

    scheduler: IntervalScheduler | None = None
    if reconciler_settings.enabled:
        scheduler = IntervalScheduler(
            name="registry_reconcile_sweep",
            job=reconciler.sweep,
            interval_seconds=reconciler_settings.interval_seconds,
            run_on_startup=reconciler_settings.run_on_startup,
        )
        await scheduler.start()
    else:
        probe.reconciler_disabled()

    probe.application_started(__version__, db_settings.connection_string)

    try:
        yield
    finally:
        if scheduler is not None:
            await scheduler.stop()
        if worker is not None:
            await worker.stop()
        await engine.dispose()
        probe.application_stopped()


app = FastAPI(
    title=get_settings().app_name,
    description="Keeps the attribute registry in sync with the attribute store",
    version=__version__,
    lifespan=registry_sync_lifespan,
)

# Include Registry bounded context routes
app.include_router(registry_routes.router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}
