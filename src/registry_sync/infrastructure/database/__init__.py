"""Database infrastructure - shared async SQLAlchemy primitives."""

from infrastructure.database.engines import (
    build_async_url,
    build_listen_url,
    create_session_factory,
    create_write_engine,
)
from infrastructure.database.models import Base

__all__ = [
    "Base",
    "build_async_url",
    "build_listen_url",
    "create_session_factory",
    "create_write_engine",
]
