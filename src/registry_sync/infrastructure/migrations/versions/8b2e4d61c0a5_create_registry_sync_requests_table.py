"""create_registry_sync_requests_table

Create the queue table for registry sync requests. Each row is one message
carrying an attribute id. A partial unique index allows at most one
undelivered message per attribute id, which is the deduplication target of
enqueue. Dead-lettered messages keep their row with failed_at set.

Revision ID: 8b2e4d61c0a5
Revises: 3f1c9a2b7d40
Create Date: 2026-09-28 09:40:17.552901

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "8b2e4d61c0a5"
down_revision: Union[str, Sequence[str], None] = "3f1c9a2b7d40"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PENDING = "processed_at IS NULL AND failed_at IS NULL"


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "registry_sync_requests",
        sa.Column(
            "id",
            sa.UUID(),
            nullable=False,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("attribute_id", sa.String(length=1024), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),  # {"id": "KEY:VALUE"}
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "visible_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),  # lease end or retry time once claimed
        sa.Column(
            "receive_count",
            sa.Integer(),
            nullable=False,
            server_default="0",
        ),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("outcome", sa.String(length=64), nullable=True),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("failed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("replayed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "uq_sync_requests_undelivered",
        "registry_sync_requests",
        ["attribute_id"],
        unique=True,
        postgresql_where=sa.text(f"{PENDING} AND claimed_at IS NULL"),
    )
    op.create_index(
        "idx_sync_requests_visible",
        "registry_sync_requests",
        ["visible_at", "created_at"],
        unique=False,
        postgresql_where=sa.text(PENDING),
    )
    op.create_index(
        "idx_sync_requests_failed",
        "registry_sync_requests",
        ["failed_at"],
        unique=False,
        postgresql_where=sa.text("failed_at IS NOT NULL"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_sync_requests_failed", table_name="registry_sync_requests")
    op.drop_index("idx_sync_requests_visible", table_name="registry_sync_requests")
    op.drop_index("uq_sync_requests_undelivered", table_name="registry_sync_requests")
    op.drop_table("registry_sync_requests")
