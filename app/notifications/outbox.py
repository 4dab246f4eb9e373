from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from app.notifications.base import WITHDRAWAL_EVENTS
from app.store.base import RecordStore
from app.withdrawals.model import Withdrawal

logger = logging.getLogger("payouts.notifications")


def enqueue_withdrawal_notification(
    store: RecordStore,
    withdrawal: Withdrawal,
    event: str,
    *,
    reason: Optional[str] = None,
) -> UUID | None:
    """
    Writes the notification to the outbox on the caller's transaction.
    Delivery happens later in the notification worker.
    """
    if event not in WITHDRAWAL_EVENTS:
        raise ValueError(f"Unknown withdrawal notification event: {event}")

    if not withdrawal.artist_email:
        logger.info("no email on file for artist=%s, skipping %s notification", withdrawal.artist_id, event)
        return None

    return store.enqueue_notification(
        {
            "artist_id": withdrawal.artist_id,
            "withdrawal_id": withdrawal.id,
            "event": event,
            "recipient": withdrawal.artist_email,
            "payload": {
                "amount": str(withdrawal.amount),
                "naira_amount": str(withdrawal.naira_amount),
                "credit_deduction": str(withdrawal.credit_deduction),
                "final_amount": str(withdrawal.final_amount),
                "reason": reason,
            },
        }
    )
