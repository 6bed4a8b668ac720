"""SQLAlchemy ORM model for the attributes table.

The table is owned by the attribute CRUD API. This model maps the columns
the sync service reads.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from attributes.domain.value_objects import Attribute
from infrastructure.database.models import Base


class AttributeModel(Base):
    """ORM model for the attributes table."""

    __tablename__ = "attributes"

    id: Mapped[str] = mapped_column(String(1024), primary_key=True)
    key: Mapped[str] = mapped_column(String(511), nullable=False)
    value: Mapped[str] = mapped_column(String(511), nullable=False)
    name: Mapped[str] = mapped_column(String(1024), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # "metadata" is reserved on declarative classes
    attribute_metadata: Mapped[dict] = mapped_column(
        "metadata",
        JSON,
        nullable=False,
        server_default=text("'{}'::json"),
    )
    create_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("NOW()"),
    )
    last_update_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("NOW()"),
    )

    def to_value_object(self) -> Attribute:
        """Convert this ORM model to an Attribute value object."""
        return Attribute(
            key=self.key,
            value=self.value,
            description=self.description,
            metadata={str(k): str(v) for k, v in (self.attribute_metadata or {}).items()},
            create_time=self.create_time,
            last_update_time=self.last_update_time,
        )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<AttributeModel(id={self.id}, name={self.name})>"
