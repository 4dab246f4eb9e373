"""baseline schema: artists, withdrawals, credit and activity ledgers

Revision ID: 0001_baseline_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from __future__ import annotations

from alembic import op


revision = "0001_baseline_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto;")
    op.execute("CREATE SCHEMA IF NOT EXISTS app;")

    op.execute(
        """
        CREATE TABLE IF NOT EXISTS app.artists (
            id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id uuid,
            name text NOT NULL,
            email text NOT NULL DEFAULT '',
            available_balance numeric(14, 2) NOT NULL DEFAULT 0 CHECK (available_balance >= 0),
            credit_balance numeric(14, 2) NOT NULL DEFAULT 0 CHECK (credit_balance >= 0),
            created_at timestamptz NOT NULL DEFAULT now()
        );
        """
    )

    op.execute(
        """
        CREATE TABLE IF NOT EXISTS app.artist_members (
            artist_id uuid NOT NULL REFERENCES app.artists(id) ON DELETE CASCADE,
            user_id uuid NOT NULL,
            role text NOT NULL DEFAULT 'MEMBER',
            created_at timestamptz NOT NULL DEFAULT now(),
            PRIMARY KEY (artist_id, user_id)
        );
        """
    )

    op.execute(
        """
        CREATE TABLE IF NOT EXISTS app.user_roles (
            user_id uuid NOT NULL,
            role text NOT NULL CHECK (role IN ('ADMIN', 'ARTIST')),
            created_at timestamptz NOT NULL DEFAULT now(),
            PRIMARY KEY (user_id, role)
        );
        """
    )

    op.execute(
        """
        CREATE TABLE IF NOT EXISTS app.withdrawals (
            id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
            artist_id uuid NOT NULL REFERENCES app.artists(id),
            user_id uuid NOT NULL,
            amount numeric(14, 2) NOT NULL CHECK (amount > 0),
            naira_amount numeric(18, 2) NOT NULL,
            credit_deduction numeric(14, 2) NOT NULL DEFAULT 0 CHECK (credit_deduction >= 0),
            final_amount numeric(14, 2) NOT NULL CHECK (final_amount >= 0),
            final_naira_amount numeric(18, 2) NOT NULL,
            account_name text NOT NULL,
            account_number text NOT NULL,
            bank_name text NOT NULL,
            status text NOT NULL DEFAULT 'PENDING'
                CHECK (status IN ('PENDING', 'APPROVED', 'PROCESSING', 'COMPLETED', 'REJECTED')),
            rejection_reason text,
            created_at timestamptz NOT NULL DEFAULT now(),
            updated_at timestamptz NOT NULL DEFAULT now(),
            approved_at timestamptz,
            processed_at timestamptz,
            CHECK (credit_deduction <= amount),
            CHECK (processed_at IS NULL OR status = 'COMPLETED')
        );
        """
    )
    # at most one outstanding request per artist
    op.execute(
        """
        CREATE UNIQUE INDEX IF NOT EXISTS uq_withdrawals_one_outstanding
        ON app.withdrawals (artist_id)
        WHERE status IN ('PENDING', 'APPROVED', 'PROCESSING');
        """
    )
    op.execute(
        "CREATE INDEX IF NOT EXISTS ix_withdrawals_artist_created ON app.withdrawals (artist_id, created_at DESC);"
    )
    op.execute(
        "CREATE INDEX IF NOT EXISTS ix_withdrawals_status_created ON app.withdrawals (status, created_at DESC);"
    )

    op.execute(
        """
        CREATE TABLE IF NOT EXISTS app.credit_transactions (
            id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
            artist_id uuid NOT NULL REFERENCES app.artists(id),
            amount numeric(14, 2) NOT NULL CHECK (amount > 0),
            type text NOT NULL CHECK (type IN ('credit_added', 'withdrawal_deduction')),
            description text,
            created_by uuid,
            withdrawal_id uuid REFERENCES app.withdrawals(id),
            created_at timestamptz NOT NULL DEFAULT now()
        );
        """
    )
    op.execute(
        "CREATE INDEX IF NOT EXISTS ix_credit_transactions_artist_created "
        "ON app.credit_transactions (artist_id, created_at DESC);"
    )

    op.execute(
        """
        CREATE TABLE IF NOT EXISTS app.activity_logs (
            id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
            artist_id uuid NOT NULL REFERENCES app.artists(id),
            user_id uuid,
            activity_type text NOT NULL,
            title text NOT NULL,
            description text,
            metadata jsonb NOT NULL DEFAULT '{}'::jsonb,
            created_at timestamptz NOT NULL DEFAULT now()
        );
        """
    )
    op.execute(
        "CREATE INDEX IF NOT EXISTS ix_activity_logs_artist_created ON app.activity_logs (artist_id, created_at DESC);"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS app.activity_logs;")
    op.execute("DROP TABLE IF EXISTS app.credit_transactions;")
    op.execute("DROP TABLE IF EXISTS app.withdrawals;")
    op.execute("DROP TABLE IF EXISTS app.user_roles;")
    op.execute("DROP TABLE IF EXISTS app.artist_members;")
    op.execute("DROP TABLE IF EXISTS app.artists;")
