"""create_attributes_table

Create the attributes table. Rows are written by the attribute CRUD API;
the sync service only reads them.

Revision ID: 3f1c9a2b7d40
Revises:
Create Date: 2026-09-28 09:12:44.108312

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "3f1c9a2b7d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "attributes",
        sa.Column("id", sa.String(length=1024), nullable=False),  # KEY:VALUE
        sa.Column("key", sa.String(length=511), nullable=False),
        sa.Column("value", sa.String(length=511), nullable=False),
        sa.Column("name", sa.String(length=1024), nullable=False),  # key:value
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "metadata",
            sa.JSON(),
            nullable=False,
            server_default=sa.text("'{}'::json"),
        ),
        sa.Column(
            "create_time",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "last_update_time",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("attributes")
