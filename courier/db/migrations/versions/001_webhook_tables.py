"""Create subscription and event ledger tables.

Revision ID: 001
Revises:
Create Date: 2025-10-02

Tables: subscribers, events, event_results
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB, UUID

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create subscription and ledger tables."""
    op.create_table(
        "subscribers",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("who", sa.Text, nullable=False),
        sa.Column("url", sa.Text, nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.UniqueConstraint("who", "url", name="uq_subscribers_who_url"),
    )
    op.create_index("idx_subscribers_who", "subscribers", ["who"])
    op.create_index("idx_subscribers_created", "subscribers", [sa.text("created_at DESC")])

    op.create_table(
        "events",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("event", sa.Text, nullable=False),
        sa.Column("payload", JSONB, nullable=False),
        sa.Column("sender", sa.Text, nullable=False),
        sa.Column("status", sa.String(32), nullable=False, server_default="pending"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'no_recipients', 'no_matching_subscribers', 'done')",
            name="chk_event_status",
        ),
    )
    op.create_index("idx_events_created", "events", [sa.text("created_at DESC")])

    # subscriber_id carries no foreign key; results outlive unsubscribe
    op.create_table(
        "event_results",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("event_id", UUID, sa.ForeignKey("events.id"), nullable=False),
        sa.Column("subscriber_id", UUID, nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("response", sa.Text),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.CheckConstraint(
            "status IN ('ok', 'failed', 'error')",
            name="chk_event_result_status",
        ),
    )
    op.create_index("idx_event_results_event", "event_results", ["event_id"])


def downgrade() -> None:
    """Drop subscription and ledger tables."""
    op.drop_table("event_results")
    op.drop_table("events")
    op.drop_table("subscribers")
