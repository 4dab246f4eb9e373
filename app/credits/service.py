from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from app.activity.service import log_activity
from app.errors import ArtistNotFound, InvalidAmount
from app.ledger.balance import to_money
from app.notifications.templates import format_usd
from app.store.base import RecordStore
from app.withdrawals.model import CreditTransaction

logger = logging.getLogger("payouts.credits")


def _positive(amount: Any) -> Decimal:
    amt = to_money(amount)
    if amt <= 0:
        raise InvalidAmount("Amount must be greater than zero")
    return amt


def add_credit(
    store: RecordStore,
    artist_id: UUID,
    amount: Any,
    *,
    description: Optional[str] = None,
    created_by: Optional[UUID] = None,
) -> Decimal:
    """
    Grants credit to an artist. The credit is consumed by the artist's next
    withdrawal as a deduction. Returns the new credit balance.
    """
    amt = _positive(amount)

    artist = store.adjust_artist_balances(artist_id, credit_delta=amt)
    if artist is None:
        raise ArtistNotFound()

    description = (description or "").strip() or f"Admin added credit of {format_usd(amt)}"

    store.insert_credit_transaction(
        {
            "artist_id": artist_id,
            "amount": amt,
            "type": "credit_added",
            "description": description,
            "created_by": created_by,
            "withdrawal_id": None,
        }
    )

    log_activity(
        store,
        artist_id=artist_id,
        user_id=created_by,
        activity_type="credit_added",
        title="Credit added",
        description=description,
        metadata={"amount": str(amt), "new_balance": str(artist.credit_balance)},
    )

    logger.info("credit added artist=%s amount=%s new_balance=%s", artist_id, amt, artist.credit_balance)
    return artist.credit_balance


def record_earnings(
    store: RecordStore,
    artist_id: UUID,
    amount: Any,
    *,
    description: Optional[str] = None,
    created_by: Optional[UUID] = None,
) -> Decimal:
    """Adds earnings to the withdrawable balance, returns the new balance."""
    amt = _positive(amount)

    artist = store.adjust_artist_balances(artist_id, available_delta=amt)
    if artist is None:
        raise ArtistNotFound()

    description = (description or "").strip() or f"Earnings of {format_usd(amt)} added"

    log_activity(
        store,
        artist_id=artist_id,
        user_id=created_by,
        activity_type="earnings_added",
        title="Earnings added",
        description=description,
        metadata={"amount": str(amt), "new_balance": str(artist.available_balance)},
    )

    logger.info("earnings added artist=%s amount=%s new_balance=%s", artist_id, amt, artist.available_balance)
    return artist.available_balance


def list_credit_transactions(store: RecordStore, artist_id: UUID, *, limit: int = 50) -> list[CreditTransaction]:
    return store.list_credit_transactions(artist_id, limit=limit)
