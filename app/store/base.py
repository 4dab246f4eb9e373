
# app/store/base.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Protocol, Sequence
from uuid import UUID

from app.withdrawals.model import ActivityLog, Artist, CreditTransaction, Withdrawal


class RecordStore(Protocol):
    """
    Everything the payouts domain reads or writes.

    Implementations bind to one unit of work: all calls made on one instance
    commit or roll back together.
    commit() ends the unit early. Only the notification worker calls it.
    """

    # artists / access
    def get_artist(self, artist_id: UUID) -> Optional[Artist]: ...
    def user_has_artist_access(self, user_id: UUID, artist_id: UUID) -> bool: ...
    def is_admin(self, user_id: UUID) -> bool: ...
    def adjust_artist_balances(
        self,
        artist_id: UUID,
        *,
        available_delta: Decimal = Decimal("0"),
        credit_delta: Decimal = Decimal("0"),
        require_available: Optional[Decimal] = None,
    ) -> Optional[Artist]: ...

    # withdrawals
    def list_withdrawals(
        self,
        artist_id: UUID,
        *,
        status_in: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
    ) -> list[Withdrawal]: ...
    def list_all_withdrawals(self, *, status: Optional[str] = None, limit: int = 100) -> list[Withdrawal]: ...
    def get_withdrawal(self, withdrawal_id: UUID) -> Optional[Withdrawal]: ...
    def insert_withdrawal(self, record: dict[str, Any]) -> Withdrawal: ...
    def update_withdrawal(
        self,
        withdrawal_id: UUID,
        fields: dict[str, Any],
        *,
        from_status: Optional[str] = None,
    ) -> Optional[Withdrawal]: ...

    # ledgers
    def insert_credit_transaction(self, record: dict[str, Any]) -> CreditTransaction: ...
    def list_credit_transactions(self, artist_id: UUID, *, limit: int = 50) -> list[CreditTransaction]: ...
    def insert_activity_log(self, record: dict[str, Any]) -> ActivityLog: ...
    def list_activity_logs(self, artist_id: UUID, *, limit: int = 20) -> list[ActivityLog]: ...

    # notification outbox
    def enqueue_notification(self, record: dict[str, Any]) -> UUID: ...
    def claim_due_notifications(self, *, limit: int, lease_seconds: int) -> list[dict[str, Any]]: ...
    def update_notification(
        self,
        notification_id: UUID,
        *,
        status: str,
        attempt_count: int,
        last_error: Optional[str],
        next_retry_at: Optional[datetime],
    ) -> None: ...

    def commit(self) -> None: ...
