# routes/activity.py
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.activity.service import fetch_activity_logs
from app.credits.service import list_credit_transactions
from app.store.base import RecordStore
from deps.artist import require_artist_access
from deps.auth import CurrentUser
from deps.store import get_store
from schemas import (
    ActivityItem,
    ActivityListResponse,
    CreditTransactionItem,
    CreditTransactionListResponse,
)

router = APIRouter(prefix="/v1/artists", tags=["activity"])


@router.get("/{artist_id}/activity", response_model=ActivityListResponse)
def list_activity(
    artist_id: UUID,
    limit: int = Query(default=20, ge=1, le=100),
    user: CurrentUser = Depends(require_artist_access),
    store: RecordStore = Depends(get_store),
):
    logs = fetch_activity_logs(store, artist_id, limit=limit)
    return ActivityListResponse(activities=[ActivityItem.from_model(a) for a in logs])


@router.get("/{artist_id}/credit-transactions", response_model=CreditTransactionListResponse)
def list_credits(
    artist_id: UUID,
    limit: int = Query(default=50, ge=1, le=200),
    user: CurrentUser = Depends(require_artist_access),
    store: RecordStore = Depends(get_store),
):
    txs = list_credit_transactions(store, artist_id, limit=limit)
    return CreditTransactionListResponse(transactions=[CreditTransactionItem.from_model(t) for t in txs])
