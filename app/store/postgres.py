
# app/store/postgres.py
from __future__ import annotations

import json
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Sequence
from uuid import UUID

import psycopg2
from psycopg2 import errors as pg_errors
from psycopg2.extras import Json, RealDictCursor

from app.errors import PendingRequestExists, StoreError
from app.withdrawals.model import ActivityLog, Artist, CreditTransaction, Withdrawal

OUTSTANDING_INDEX = "uq_withdrawals_one_outstanding"


def _dumps(value: Any) -> str:
    return json.dumps(value, default=str)


_WITHDRAWAL_COLUMNS = """
  w.id,
  w.artist_id,
  w.user_id,
  w.amount,
  w.naira_amount,
  w.credit_deduction,
  w.final_amount,
  w.final_naira_amount,
  w.account_name,
  w.account_number,
  w.bank_name,
  w.status,
  w.rejection_reason,
  w.created_at,
  w.approved_at,
  w.processed_at,
  a.name AS artist_name,
  a.email AS artist_email
"""

# columns update_withdrawal may touch
_UPDATABLE = ("status", "approved_at", "processed_at", "rejection_reason")


def _to_artist(row: dict[str, Any]) -> Artist:
    return Artist(
        id=row["id"],
        user_id=row.get("user_id"),
        name=row["name"],
        email=row["email"],
        available_balance=Decimal(row.get("available_balance") or 0),
        credit_balance=Decimal(row.get("credit_balance") or 0),
    )


def _to_withdrawal(row: dict[str, Any]) -> Withdrawal:
    return Withdrawal(
        id=row["id"],
        artist_id=row["artist_id"],
        user_id=row["user_id"],
        amount=Decimal(row["amount"]),
        naira_amount=Decimal(row["naira_amount"]),
        credit_deduction=Decimal(row["credit_deduction"]),
        final_amount=Decimal(row["final_amount"]),
        final_naira_amount=Decimal(row["final_naira_amount"]),
        account_name=row["account_name"],
        account_number=row["account_number"],
        bank_name=row["bank_name"],
        status=row["status"],
        rejection_reason=row.get("rejection_reason"),
        created_at=row["created_at"],
        approved_at=row.get("approved_at"),
        processed_at=row.get("processed_at"),
        artist_name=row.get("artist_name"),
        artist_email=row.get("artist_email"),
    )


def _to_credit_tx(row: dict[str, Any]) -> CreditTransaction:
    return CreditTransaction(
        id=row["id"],
        artist_id=row["artist_id"],
        amount=Decimal(row["amount"]),
        type=row["type"],
        description=row.get("description"),
        created_by=row.get("created_by"),
        withdrawal_id=row.get("withdrawal_id"),
        created_at=row["created_at"],
    )


def _to_activity(row: dict[str, Any]) -> ActivityLog:
    return ActivityLog(
        id=row["id"],
        artist_id=row["artist_id"],
        user_id=row.get("user_id"),
        activity_type=row["activity_type"],
        title=row["title"],
        description=row.get("description"),
        metadata=dict(row.get("metadata") or {}),
        created_at=row["created_at"],
    )


class PgRecordStore:
    """
    RecordStore over a single psycopg2 connection obtained from db.get_conn().
    Commit/rollback is owned by get_conn(). commit() exists for the
    notification worker, which commits after each outbox row.
    """

    def __init__(self, conn):
        self.conn = conn

    @contextmanager
    def _cursor(self):
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                yield cur
        except pg_errors.UniqueViolation as exc:
            constraint = getattr(getattr(exc, "diag", None), "constraint_name", None)
            if constraint == OUTSTANDING_INDEX:
                raise PendingRequestExists(
                    "You already have a withdrawal request in progress"
                ) from exc
            raise StoreError(f"{type(exc).__name__}: {exc}") from exc
        except psycopg2.Error as exc:
            raise StoreError(f"{type(exc).__name__}: {exc}") from exc

    # ==========================================================
    # Artists / access
    # ==========================================================

    def get_artist(self, artist_id: UUID) -> Optional[Artist]:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT id, user_id, name, email, available_balance, credit_balance
                FROM app.artists
                WHERE id = %s::uuid
                """,
                (str(artist_id),),
            )
            row = cur.fetchone()
            return _to_artist(row) if row else None

    def user_has_artist_access(self, user_id: UUID, artist_id: UUID) -> bool:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT 1
                FROM app.artists a
                WHERE a.id = %s::uuid
                  AND (
                    a.user_id = %s::uuid
                    OR EXISTS (
                      SELECT 1 FROM app.artist_members m
                      WHERE m.artist_id = a.id AND m.user_id = %s::uuid
                    )
                  )
                LIMIT 1
                """,
                (str(artist_id), str(user_id), str(user_id)),
            )
            return cur.fetchone() is not None

    def is_admin(self, user_id: UUID) -> bool:
        with self._cursor() as cur:
            cur.execute(
                "SELECT 1 FROM app.user_roles WHERE user_id = %s::uuid AND role = 'ADMIN' LIMIT 1",
                (str(user_id),),
            )
            return cur.fetchone() is not None

    def adjust_artist_balances(
        self,
        artist_id: UUID,
        *,
        available_delta: Decimal = Decimal("0"),
        credit_delta: Decimal = Decimal("0"),
        require_available: Optional[Decimal] = None,
    ) -> Optional[Artist]:
        """
        Single-statement delta update. Returns None when the artist is missing
        or available_balance < require_available.
        """
        with self._cursor() as cur:
            cur.execute(
                """
                UPDATE app.artists
                SET
                  available_balance = available_balance + %s,
                  credit_balance = GREATEST(credit_balance + %s, 0)
                WHERE id = %s::uuid
                  AND (%s::numeric IS NULL OR available_balance >= %s::numeric)
                RETURNING id, user_id, name, email, available_balance, credit_balance
                """,
                (
                    available_delta,
                    credit_delta,
                    str(artist_id),
                    require_available,
                    require_available,
                ),
            )
            row = cur.fetchone()
            return _to_artist(row) if row else None

    # ==========================================================
    # Withdrawals
    # ==========================================================

    def list_withdrawals(
        self,
        artist_id: UUID,
        *,
        status_in: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
    ) -> list[Withdrawal]:
        status_filter = ""
        params: list[Any] = [str(artist_id)]
        if status_in:
            status_filter = "AND w.status = ANY(%s)"
            params.append(list(status_in))
        limit_sql = ""
        if limit:
            limit_sql = "LIMIT %s"
            params.append(int(limit))

        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT {_WITHDRAWAL_COLUMNS}
                FROM app.withdrawals w
                JOIN app.artists a ON a.id = w.artist_id
                WHERE w.artist_id = %s::uuid
                {status_filter}
                ORDER BY w.created_at DESC, w.id DESC
                {limit_sql}
                """,
                tuple(params),
            )
            return [_to_withdrawal(r) for r in cur.fetchall()]

    def list_all_withdrawals(self, *, status: Optional[str] = None, limit: int = 100) -> list[Withdrawal]:
        status_filter = ""
        params: list[Any] = []
        if status:
            status_filter = "WHERE w.status = %s"
            params.append(status)
        params.append(int(limit))

        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT {_WITHDRAWAL_COLUMNS}
                FROM app.withdrawals w
                JOIN app.artists a ON a.id = w.artist_id
                {status_filter}
                ORDER BY w.created_at DESC, w.id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_withdrawal(r) for r in cur.fetchall()]

    def get_withdrawal(self, withdrawal_id: UUID) -> Optional[Withdrawal]:
        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT {_WITHDRAWAL_COLUMNS}
                FROM app.withdrawals w
                JOIN app.artists a ON a.id = w.artist_id
                WHERE w.id = %s::uuid
                """,
                (str(withdrawal_id),),
            )
            row = cur.fetchone()
            return _to_withdrawal(row) if row else None

    def insert_withdrawal(self, record: dict[str, Any]) -> Withdrawal:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO app.withdrawals (
                  artist_id, user_id,
                  amount, naira_amount, credit_deduction, final_amount, final_naira_amount,
                  account_name, account_number, bank_name,
                  status
                )
                VALUES (
                  %s::uuid, %s::uuid,
                  %s, %s, %s, %s, %s,
                  %s, %s, %s,
                  'PENDING'
                )
                RETURNING id
                """,
                (
                    str(record["artist_id"]),
                    str(record["user_id"]),
                    record["amount"],
                    record["naira_amount"],
                    record["credit_deduction"],
                    record["final_amount"],
                    record["final_naira_amount"],
                    record["account_name"],
                    record["account_number"],
                    record["bank_name"],
                ),
            )
            new_id = cur.fetchone()["id"]

        created = self.get_withdrawal(new_id)
        if created is None:
            raise StoreError("Withdrawal insert returned no row")
        return created

    def update_withdrawal(
        self,
        withdrawal_id: UUID,
        fields: dict[str, Any],
        *,
        from_status: Optional[str] = None,
    ) -> Optional[Withdrawal]:
        """
        Returns None when the row is missing or its status moved away from
        from_status in the meantime.
        """
        cols = [c for c in _UPDATABLE if c in fields]
        if not cols:
            return self.get_withdrawal(withdrawal_id)

        set_sql = ", ".join(f"{c} = %s" for c in cols)
        params: list[Any] = [fields[c] for c in cols]
        params.append(str(withdrawal_id))

        guard_sql = ""
        if from_status is not None:
            guard_sql = "AND status = %s"
            params.append(from_status)

        with self._cursor() as cur:
            cur.execute(
                f"""
                UPDATE app.withdrawals
                SET {set_sql}, updated_at = now()
                WHERE id = %s::uuid
                {guard_sql}
                """,
                tuple(params),
            )
            if cur.rowcount != 1:
                return None

        return self.get_withdrawal(withdrawal_id)

    # ==========================================================
    # Credit transactions / activity
    # ==========================================================

    def insert_credit_transaction(self, record: dict[str, Any]) -> CreditTransaction:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO app.credit_transactions (
                  artist_id, amount, type, description, created_by, withdrawal_id
                )
                VALUES (%s::uuid, %s, %s, %s, %s::uuid, %s::uuid)
                RETURNING id, artist_id, amount, type, description, created_by, withdrawal_id, created_at
                """,
                (
                    str(record["artist_id"]),
                    record["amount"],
                    record["type"],
                    record.get("description"),
                    str(record["created_by"]) if record.get("created_by") else None,
                    str(record["withdrawal_id"]) if record.get("withdrawal_id") else None,
                ),
            )
            return _to_credit_tx(cur.fetchone())

    def list_credit_transactions(self, artist_id: UUID, *, limit: int = 50) -> list[CreditTransaction]:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT id, artist_id, amount, type, description, created_by, withdrawal_id, created_at
                FROM app.credit_transactions
                WHERE artist_id = %s::uuid
                ORDER BY created_at DESC, id DESC
                LIMIT %s
                """,
                (str(artist_id), int(limit)),
            )
            return [_to_credit_tx(r) for r in cur.fetchall()]

    def insert_activity_log(self, record: dict[str, Any]) -> ActivityLog:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO app.activity_logs (
                  artist_id, user_id, activity_type, title, description, metadata
                )
                VALUES (%s::uuid, %s::uuid, %s, %s, %s, %s::jsonb)
                RETURNING id, artist_id, user_id, activity_type, title, description, metadata, created_at
                """,
                (
                    str(record["artist_id"]),
                    str(record["user_id"]) if record.get("user_id") else None,
                    record["activity_type"],
                    record["title"],
                    record.get("description"),
                    Json(record.get("metadata") or {}, dumps=_dumps),
                ),
            )
            return _to_activity(cur.fetchone())

    def list_activity_logs(self, artist_id: UUID, *, limit: int = 20) -> list[ActivityLog]:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT id, artist_id, user_id, activity_type, title, description, metadata, created_at
                FROM app.activity_logs
                WHERE artist_id = %s::uuid
                ORDER BY created_at DESC, id DESC
                LIMIT %s
                """,
                (str(artist_id), int(limit)),
            )
            return [_to_activity(r) for r in cur.fetchall()]

    # ==========================================================
    # Notification outbox
    # ==========================================================

    def enqueue_notification(self, record: dict[str, Any]) -> UUID:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO app.notification_outbox (
                  artist_id, withdrawal_id, event, recipient, payload, status
                )
                VALUES (%s::uuid, %s::uuid, %s, %s, %s::jsonb, 'PENDING')
                RETURNING id
                """,
                (
                    str(record["artist_id"]),
                    str(record["withdrawal_id"]) if record.get("withdrawal_id") else None,
                    record["event"],
                    record["recipient"],
                    Json(record.get("payload") or {}, dumps=_dumps),
                ),
            )
            return cur.fetchone()["id"]

    def claim_due_notifications(self, *, limit: int, lease_seconds: int) -> list[dict[str, Any]]:
        # pushing next_retry_at out is the lease; an unfinished row becomes due again when it lapses
        with self._cursor() as cur:
            cur.execute(
                """
                UPDATE app.notification_outbox o
                SET
                  next_retry_at = now() + (%s * interval '1 second'),
                  updated_at = now()
                WHERE o.id IN (
                  SELECT id
                  FROM app.notification_outbox
                  WHERE status = 'PENDING'
                    AND (next_retry_at IS NULL OR next_retry_at <= now())
                  ORDER BY created_at ASC
                  FOR UPDATE SKIP LOCKED
                  LIMIT %s
                )
                RETURNING o.id, o.artist_id, o.withdrawal_id, o.event, o.recipient,
                          o.payload, o.attempt_count, o.created_at
                """,
                (int(lease_seconds), int(limit)),
            )
            rows = [dict(r) for r in cur.fetchall()]
        rows.sort(key=lambda r: r["created_at"])
        return rows

    def update_notification(
        self,
        notification_id: UUID,
        *,
        status: str,
        attempt_count: int,
        last_error: Optional[str],
        next_retry_at: Optional[datetime],
    ) -> None:
        with self._cursor() as cur:
            cur.execute(
                """
                UPDATE app.notification_outbox
                SET
                  status = %s,
                  attempt_count = %s,
                  last_error = %s,
                  next_retry_at = %s,
                  updated_at = now()
                WHERE id = %s::uuid
                """,
                (status, int(attempt_count), last_error, next_retry_at, str(notification_id)),
            )

    def commit(self) -> None:
        try:
            self.conn.commit()
        except psycopg2.Error as exc:
            raise StoreError(f"{type(exc).__name__}: {exc}") from exc
