# routes/admin_credits.py
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from app.credits import service as credits
from app.store.base import RecordStore
from deps.admin import require_admin
from deps.auth import CurrentUser
from deps.store import get_store
from schemas import AmountRequest, CreditResponse, EarningsResponse

router = APIRouter(prefix="/v1/admin/artists", tags=["admin", "credits"])


@router.post("/{artist_id}/credits", response_model=CreditResponse)
def admin_add_credit(
    artist_id: UUID,
    body: AmountRequest,
    admin: CurrentUser = Depends(require_admin),
    store: RecordStore = Depends(get_store),
):
    balance = credits.add_credit(
        store,
        artist_id,
        body.amount,
        description=body.description,
        created_by=admin.user_id,
    )
    return CreditResponse(artist_id=artist_id, credit_balance=balance)


@router.post("/{artist_id}/earnings", response_model=EarningsResponse)
def admin_add_earnings(
    artist_id: UUID,
    body: AmountRequest,
    admin: CurrentUser = Depends(require_admin),
    store: RecordStore = Depends(get_store),
):
    balance = credits.record_earnings(
        store,
        artist_id,
        body.amount,
        description=body.description,
        created_by=admin.user_id,
    )
    return EarningsResponse(artist_id=artist_id, available_balance=balance)
