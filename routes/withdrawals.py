# routes/withdrawals.py
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.errors import ArtistNotFound
from app.ledger.balance import OUTSTANDING_STATUSES
from app.store.base import RecordStore
from app.withdrawals import service as withdrawals
from app.withdrawals.model import BankDetails
from deps.artist import require_artist_access
from deps.auth import CurrentUser
from deps.store import get_store
from schemas import (
    BalanceResponse,
    WithdrawalCreateRequest,
    WithdrawalItem,
    WithdrawalListResponse,
)
from settings import settings

router = APIRouter(prefix="/v1/artists", tags=["withdrawals"])


@router.get("/{artist_id}/balance", response_model=BalanceResponse)
def get_balance(
    artist_id: UUID,
    user: CurrentUser = Depends(require_artist_access),
    store: RecordStore = Depends(get_store),
):
    artist = store.get_artist(artist_id)
    if artist is None:
        raise ArtistNotFound()

    outstanding = store.list_withdrawals(artist_id, status_in=OUTSTANDING_STATUSES)
    return BalanceResponse(
        artist_id=artist.id,
        available_balance=artist.available_balance,
        credit_balance=artist.credit_balance,
        pending_withdrawals=withdrawals.pending_total(outstanding),
        exchange_rate=settings.EXCHANGE_RATE,
        min_withdrawal=settings.MIN_WITHDRAWAL,
        max_withdrawal=settings.MAX_WITHDRAWAL,
    )


@router.post("/{artist_id}/withdrawals", response_model=WithdrawalItem, status_code=201)
def create_withdrawal(
    artist_id: UUID,
    body: WithdrawalCreateRequest,
    user: CurrentUser = Depends(require_artist_access),
    store: RecordStore = Depends(get_store),
):
    w = withdrawals.submit_withdrawal(
        store,
        artist_id=artist_id,
        user_id=user.user_id,
        amount=body.amount,
        bank_details=BankDetails(
            account_name=body.account_name,
            account_number=body.account_number,
            bank_name=body.bank_name,
        ),
    )
    return WithdrawalItem.from_model(w)


@router.get("/{artist_id}/withdrawals", response_model=WithdrawalListResponse)
def list_withdrawals(
    artist_id: UUID,
    limit: int = Query(default=50, ge=1, le=200),
    user: CurrentUser = Depends(require_artist_access),
    store: RecordStore = Depends(get_store),
):
    items = withdrawals.list_artist_withdrawals(store, artist_id, limit=limit)
    return WithdrawalListResponse(withdrawals=[WithdrawalItem.from_model(w) for w in items])
