"""create_sync_request_notify_trigger

Create a PostgreSQL trigger that sends NOTIFY when a sync request is
inserted. This lets the worker pick up new messages immediately instead of
waiting for the next poll.

Revision ID: c47a0e9f13d2
Revises: 8b2e4d61c0a5
Create Date: 2026-09-28 10:05:51.930467

"""

from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "c47a0e9f13d2"
down_revision: Union[str, Sequence[str], None] = "8b2e4d61c0a5"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Channel name is NOTIFY_CHANNEL in infrastructure.sync_queue.models
    op.execute("""
        CREATE OR REPLACE FUNCTION notify_registry_sync_request_insert()
        RETURNS TRIGGER AS $$
        BEGIN
            PERFORM pg_notify('registry_sync_requests', NEW.id::text);
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)

    op.execute("""
        CREATE TRIGGER registry_sync_requests_after_insert
            AFTER INSERT ON registry_sync_requests
            FOR EACH ROW
            EXECUTE FUNCTION notify_registry_sync_request_insert();
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute(
        "DROP TRIGGER IF EXISTS registry_sync_requests_after_insert "
        "ON registry_sync_requests;"
    )
    op.execute("DROP FUNCTION IF EXISTS notify_registry_sync_request_insert();")
