"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    The database holds the attributes table (owned by the attribute CRUD API)
    and the registry sync request queue.

    Environment variables:
        REGISTRY_SYNC_DB_HOST: Database host (default: localhost)
        REGISTRY_SYNC_DB_PORT: Database port (default: 5432)
        REGISTRY_SYNC_DB_DATABASE: Database name (default: registry_sync)
        REGISTRY_SYNC_DB_USERNAME: Database user (default: registry_sync)
        REGISTRY_SYNC_DB_PASSWORD: Database password (required in production)
        REGISTRY_SYNC_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="REGISTRY_SYNC_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="registry_sync", description="Database name")
    username: str = Field(default="registry_sync", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class RegistrySettings(BaseSettings):
    """External attribute registry (AWS Service Catalog AppRegistry) settings.

    Environment variables:
        REGISTRY_SYNC_REGISTRY_REGION: AWS region (default: ap-southeast-2)
        REGISTRY_SYNC_REGISTRY_ENDPOINT_URL: Override endpoint (LocalStack etc.)
        REGISTRY_SYNC_REGISTRY_GROUP_NAME_PREFIX: Attribute group name prefix (default: APO)
        REGISTRY_SYNC_REGISTRY_APPLICATION_NAME: Value of the managedBy tag (default: Rapm)
        REGISTRY_SYNC_REGISTRY_CONNECT_TIMEOUT_SECONDS: Connect timeout (default: 5)
        REGISTRY_SYNC_REGISTRY_READ_TIMEOUT_SECONDS: Read timeout (default: 10)
        REGISTRY_SYNC_REGISTRY_MAX_ATTEMPTS: SDK-level attempts per call (default: 1)
    """

    model_config = SettingsConfigDict(
        env_prefix="REGISTRY_SYNC_REGISTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    region: str = Field(default="ap-southeast-2", description="AWS region")
    endpoint_url: str | None = Field(
        default=None,
        description="Optional endpoint override for the registry API",
    )
    group_name_prefix: str = Field(
        default="APO",
        description="Prefix of every managed attribute group name",
        min_length=1,
    )
    application_name: str = Field(
        default="Rapm",
        description="Application name written to the managedBy tag",
        min_length=1,
    )
    connect_timeout_seconds: float = Field(
        default=5.0,
        description="Registry connect timeout in seconds",
        gt=0,
    )
    read_timeout_seconds: float = Field(
        default=10.0,
        description="Registry read timeout in seconds",
        gt=0,
    )
    max_attempts: int = Field(
        default=1,
        description="SDK attempts per registry call; redelivery is left to the queue",
        ge=1,
        le=10,
    )

    @property
    def required_tags(self) -> dict[str, str]:
        """Management tags every attribute group must carry."""
        return {"managedBy": self.application_name}


class SyncQueueSettings(BaseSettings):
    """Sync request queue and worker settings.

    Environment variables:
        REGISTRY_SYNC_QUEUE_ENABLED: Run the worker in this process (default: true)
        REGISTRY_SYNC_QUEUE_POLL_INTERVAL_SECONDS: Poll fallback interval (default: 30)
        REGISTRY_SYNC_QUEUE_BATCH_SIZE: Messages claimed per batch (default: 10)
        REGISTRY_SYNC_QUEUE_CONCURRENCY: Concurrent reconciles per worker (default: 4)
        REGISTRY_SYNC_QUEUE_MAX_RETRIES: Redeliveries before dead-lettering (default: 1)
        REGISTRY_SYNC_QUEUE_RETRY_DELAY_SECONDS: Delay before a redelivery (default: 30)
        REGISTRY_SYNC_QUEUE_VISIBILITY_TIMEOUT_SECONDS: Lease of a claimed message (default: 60)
        REGISTRY_SYNC_QUEUE_RECONCILE_TIMEOUT_SECONDS: Wall-clock bound per reconcile (default: 30)
    """

    model_config = SettingsConfigDict(
        env_prefix="REGISTRY_SYNC_QUEUE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Run the queue worker")
    poll_interval_seconds: int = Field(
        default=30,
        description="How often to poll for visible messages",
        ge=1,
    )
    batch_size: int = Field(
        default=10,
        description="Maximum messages claimed per batch",
        ge=1,
        le=1000,
    )
    concurrency: int = Field(
        default=4,
        description="Maximum concurrent reconciles per worker",
        ge=1,
        le=100,
    )
    max_retries: int = Field(
        default=1,
        description="Redeliveries allowed before a message is dead-lettered",
        ge=0,
        le=100,
    )
    retry_delay_seconds: int = Field(
        default=30,
        description="Delay before a failed message becomes visible again",
        ge=0,
    )
    visibility_timeout_seconds: int = Field(
        default=60,
        description="Lease of a claimed message before it is redelivered",
        ge=1,
    )
    reconcile_timeout_seconds: float = Field(
        default=30.0,
        description="Wall-clock bound of a single reconcile",
        gt=0,
    )

    @model_validator(mode="after")
    def validate_timeouts(self) -> "SyncQueueSettings":
        """Validate reconcile timeout < visibility timeout."""
        if self.reconcile_timeout_seconds >= self.visibility_timeout_seconds:
            raise ValueError(
                f"reconcile_timeout_seconds ({self.reconcile_timeout_seconds}) must be < "
                f"visibility_timeout_seconds ({self.visibility_timeout_seconds})"
            )
        return self


class ReconcilerSettings(BaseSettings):
    """Periodic reconciler settings.

    Environment variables:
        REGISTRY_SYNC_RECONCILER_ENABLED: Schedule sweeps in this process (default: true)
        REGISTRY_SYNC_RECONCILER_INTERVAL_SECONDS: Seconds between sweeps (default: 43200)
        REGISTRY_SYNC_RECONCILER_PAGE_SIZE: Attributes read per page (default: 100)
        REGISTRY_SYNC_RECONCILER_RUN_ON_STARTUP: Sweep immediately on start (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="REGISTRY_SYNC_RECONCILER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Schedule periodic sweeps")
    interval_seconds: int = Field(
        default=43200,
        description="Seconds between two full sweeps",
        ge=1,
    )
    page_size: int = Field(
        default=100,
        description="Attributes read per store page",
        ge=1,
        le=1000,
    )
    run_on_startup: bool = Field(
        default=False,
        description="Run one sweep as soon as the scheduler starts",
    )


class Settings(BaseSettings):
    """Application-wide settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(
        default="Attribute Registry Sync", description="Application name"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings."""
    return DatabaseSettings()


@lru_cache
def get_registry_settings() -> RegistrySettings:
    """Get cached registry settings."""
    return RegistrySettings()


@lru_cache
def get_sync_queue_settings() -> SyncQueueSettings:
    """Get cached sync queue settings."""
    return SyncQueueSettings()


@lru_cache
def get_reconciler_settings() -> ReconcilerSettings:
    """Get cached reconciler settings."""
    return ReconcilerSettings()
