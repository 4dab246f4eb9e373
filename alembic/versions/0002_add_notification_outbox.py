"""add notification_outbox table

Revision ID: 0002_add_notification_outbox
Revises: 0001_baseline_schema
Create Date: 2026-10-19 00:30:00.000000

"""

from __future__ import annotations

from alembic import op


revision = "0002_add_notification_outbox"
down_revision = "0001_baseline_schema"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS app.notification_outbox (
            id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
            artist_id uuid NOT NULL REFERENCES app.artists(id),
            withdrawal_id uuid REFERENCES app.withdrawals(id),
            event text NOT NULL CHECK (event IN ('requested', 'approved', 'completed', 'rejected')),
            recipient text NOT NULL,
            payload jsonb NOT NULL DEFAULT '{}'::jsonb,
            status text NOT NULL DEFAULT 'PENDING' CHECK (status IN ('PENDING', 'SENT', 'FAILED')),
            attempt_count integer NOT NULL DEFAULT 0,
            last_error text,
            next_retry_at timestamptz,
            created_at timestamptz NOT NULL DEFAULT now(),
            updated_at timestamptz NOT NULL DEFAULT now()
        );
        """
    )
    op.execute(
        """
        CREATE INDEX IF NOT EXISTS ix_notification_outbox_due
        ON app.notification_outbox (created_at)
        WHERE status = 'PENDING';
        """
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS app.notification_outbox;")
