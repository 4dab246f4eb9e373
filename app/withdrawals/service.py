from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from app.activity.service import log_activity
from app.errors import (
    ArtistNotFound,
    InsufficientBalance,
    MissingField,
    PendingRequestExists,
    StoreError,
    WithdrawalNotFound,
)
from app.ledger.balance import (
    OUTSTANDING_STATUSES,
    compute_breakdown,
    has_pending_request,
    to_money,
    validate,
)
from app.notifications.outbox import enqueue_withdrawal_notification
from app.notifications.templates import format_ngn, format_usd
from app.store.base import RecordStore
from app.withdrawals.model import BankDetails, Withdrawal
from app.withdrawals.state_machine import assert_transition, normalize_status
from settings import settings

logger = logging.getLogger("payouts.withdrawals")

# status -> (activity type, title, notification event)
_STATUS_ACTIVITY = {
    "APPROVED": ("withdrawal_approved", "Withdrawal approved", "approved"),
    "PROCESSING": ("withdrawal_processing", "Withdrawal processing", None),
    "COMPLETED": ("withdrawal_completed", "Withdrawal completed", "completed"),
    "REJECTED": ("withdrawal_rejected", "Withdrawal rejected", "rejected"),
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _require_bank_details(bank_details: BankDetails) -> BankDetails:
    cleaned = BankDetails(
        account_name=(bank_details.account_name or "").strip(),
        account_number=(bank_details.account_number or "").strip(),
        bank_name=(bank_details.bank_name or "").strip(),
    )
    missing = [k for k in ("account_name", "account_number", "bank_name") if not getattr(cleaned, k)]
    if missing:
        raise MissingField("Please fill in all bank details: " + ", ".join(missing))
    return cleaned


def _breakdown_metadata(w: Withdrawal) -> dict[str, Any]:
    return {
        "withdrawal_id": str(w.id),
        "amount": str(w.amount),
        "naira_amount": str(w.naira_amount),
        "credit_deduction": str(w.credit_deduction),
        "final_amount": str(w.final_amount),
        "final_naira_amount": str(w.final_naira_amount),
    }


def _request_description(w: Withdrawal) -> str:
    text = f"Requested {format_usd(w.amount)} ({format_ngn(w.naira_amount)})"
    if w.credit_deduction > 0:
        text += f", {format_usd(w.credit_deduction)} deducted for credit"
    return text


def submit_withdrawal(
    store: RecordStore,
    *,
    artist_id: UUID,
    user_id: UUID,
    amount: Any,
    bank_details: BankDetails,
) -> Withdrawal:
    """
    Validates and records a new PENDING withdrawal, then appends the activity
    log entry and queues the "requested" email.

    All writes share the store's transaction: if anything fails after the
    insert the whole request rolls back.
    """
    bank = _require_bank_details(bank_details)

    artist = store.get_artist(artist_id)
    if artist is None:
        raise ArtistNotFound()

    outstanding = store.list_withdrawals(artist_id, status_in=OUTSTANDING_STATUSES)
    if has_pending_request(outstanding, artist_id):
        raise PendingRequestExists("You already have a withdrawal request in progress")

    amt = validate(
        amount,
        artist.available_balance,
        min_withdrawal=settings.MIN_WITHDRAWAL,
        max_withdrawal=settings.MAX_WITHDRAWAL,
    )

    breakdown = compute_breakdown(amt, artist.credit_balance, exchange_rate=settings.EXCHANGE_RATE)

    withdrawal = store.insert_withdrawal(
        {
            "artist_id": artist_id,
            "user_id": user_id,
            "amount": breakdown.amount,
            "naira_amount": breakdown.naira_amount,
            "credit_deduction": breakdown.credit_deduction,
            "final_amount": breakdown.final_amount,
            "final_naira_amount": breakdown.final_naira_amount,
            "account_name": bank.account_name,
            "account_number": bank.account_number,
            "bank_name": bank.bank_name,
        }
    )

    log_activity(
        store,
        artist_id=artist_id,
        user_id=user_id,
        activity_type="withdrawal_requested",
        title="Withdrawal requested",
        description=_request_description(withdrawal),
        metadata=_breakdown_metadata(withdrawal),
    )

    enqueue_withdrawal_notification(store, withdrawal, "requested")

    logger.info(
        "withdrawal requested id=%s artist=%s amount=%s credit_deduction=%s",
        withdrawal.id,
        artist_id,
        withdrawal.amount,
        withdrawal.credit_deduction,
    )
    return withdrawal


def apply_approval_side_effects(store: RecordStore, withdrawal: Withdrawal, *, admin_user_id: UUID) -> None:
    """
    Moves the approved amount out of the artist's balance and consumes the
    credit deduction. Raises InsufficientBalance when the balance no longer
    covers the amount.
    """
    updated = store.adjust_artist_balances(
        withdrawal.artist_id,
        available_delta=-withdrawal.amount,
        credit_delta=-withdrawal.credit_deduction,
        require_available=withdrawal.amount,
    )
    if updated is None:
        if store.get_artist(withdrawal.artist_id) is None:
            raise ArtistNotFound()
        raise InsufficientBalance("The artist's balance no longer covers this withdrawal")

    if withdrawal.credit_deduction > 0:
        store.insert_credit_transaction(
            {
                "artist_id": withdrawal.artist_id,
                "amount": withdrawal.credit_deduction,
                "type": "withdrawal_deduction",
                "description": f"Credit deducted from withdrawal of {format_usd(withdrawal.amount)}",
                "created_by": admin_user_id,
                "withdrawal_id": withdrawal.id,
            }
        )


def reverse_approval_side_effects(store: RecordStore, withdrawal: Withdrawal, *, admin_user_id: UUID) -> None:
    updated = store.adjust_artist_balances(
        withdrawal.artist_id,
        available_delta=withdrawal.amount,
        credit_delta=withdrawal.credit_deduction,
    )
    if updated is None:
        raise ArtistNotFound()

    if withdrawal.credit_deduction > 0:
        store.insert_credit_transaction(
            {
                "artist_id": withdrawal.artist_id,
                "amount": withdrawal.credit_deduction,
                "type": "credit_added",
                "description": f"Credit restored from rejected withdrawal of {format_usd(withdrawal.amount)}",
                "created_by": admin_user_id,
                "withdrawal_id": withdrawal.id,
            }
        )


def _transition(
    store: RecordStore,
    withdrawal_id: UUID,
    new_status: str,
    *,
    admin_user_id: UUID,
    reason: Optional[str] = None,
) -> Withdrawal:
    current = store.get_withdrawal(withdrawal_id)
    if current is None:
        raise WithdrawalNotFound()

    assert_transition(current.status, new_status)

    fields: dict[str, Any] = {
        "status": new_status,
        "processed_at": _now() if new_status == "COMPLETED" else None,
    }
    if new_status == "APPROVED":
        fields["approved_at"] = _now()
    if new_status == "REJECTED":
        fields["rejection_reason"] = reason

    # guarded on the status we validated against; a concurrent admin change loses
    updated = store.update_withdrawal(withdrawal_id, fields, from_status=current.status)
    if updated is None:
        raise StoreError("Withdrawal changed while it was being updated, please retry")

    if new_status == "APPROVED":
        apply_approval_side_effects(store, updated, admin_user_id=admin_user_id)
    elif new_status == "REJECTED" and current.status == "APPROVED":
        reverse_approval_side_effects(store, updated, admin_user_id=admin_user_id)

    activity_type, title, event = _STATUS_ACTIVITY[new_status]
    description = f"{format_usd(updated.amount)} ({format_ngn(updated.naira_amount)})"
    if reason:
        description += f": {reason}"

    metadata = _breakdown_metadata(updated)
    metadata["from_status"] = current.status
    if reason:
        metadata["reason"] = reason

    log_activity(
        store,
        artist_id=updated.artist_id,
        user_id=admin_user_id,
        activity_type=activity_type,
        title=title,
        description=description,
        metadata=metadata,
    )

    if event is not None:
        enqueue_withdrawal_notification(store, updated, event, reason=reason)

    logger.info(
        "withdrawal status id=%s %s -> %s by admin=%s",
        withdrawal_id,
        current.status,
        new_status,
        admin_user_id,
    )
    return updated


def admin_update_status(
    store: RecordStore,
    withdrawal_id: UUID,
    new_status: str,
    *,
    admin_user_id: UUID,
) -> Withdrawal:
    return _transition(store, withdrawal_id, normalize_status(new_status), admin_user_id=admin_user_id)


def reject_withdrawal(
    store: RecordStore,
    withdrawal_id: UUID,
    reason: str,
    *,
    admin_user_id: UUID,
) -> Withdrawal:
    reason = (reason or "").strip()
    if not reason:
        raise MissingField("Please provide a reason for rejection")
    return _transition(store, withdrawal_id, "REJECTED", admin_user_id=admin_user_id, reason=reason)


def get_withdrawal(store: RecordStore, withdrawal_id: UUID) -> Withdrawal:
    w = store.get_withdrawal(withdrawal_id)
    if w is None:
        raise WithdrawalNotFound()
    return w


def list_artist_withdrawals(store: RecordStore, artist_id: UUID, *, limit: int = 50) -> list[Withdrawal]:
    return store.list_withdrawals(artist_id, limit=limit)


def list_all_withdrawals(store: RecordStore, *, status: Optional[str] = None, limit: int = 100) -> list[Withdrawal]:
    normalized = normalize_status(status) if status else None
    return store.list_all_withdrawals(status=normalized, limit=limit)


def pending_total(withdrawals: list[Withdrawal]) -> Decimal:
    """Sum of amounts still tied up in outstanding requests."""
    return sum(
        (to_money(w.amount) for w in withdrawals if w.status in OUTSTANDING_STATUSES),
        Decimal("0.00"),
    )
