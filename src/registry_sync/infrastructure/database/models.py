"""SQLAlchemy declarative base shared by all ORM models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import DeclarativeBase


def utc_now() -> datetime:
    """Generate a timezone-aware UTC timestamp.

    Uses a named function instead of lambda for SQLAlchemy 2.0 compatibility.
    """
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models.

    All models in the application should inherit from this base class.
    """

    type_annotation_map: dict[type, Any] = {}
