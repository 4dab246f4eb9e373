# routes/admin_withdrawals.py
from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.store.base import RecordStore
from app.withdrawals import service as withdrawals
from deps.admin import require_admin
from deps.auth import CurrentUser
from deps.store import get_store
from schemas import (
    WithdrawalItem,
    WithdrawalListResponse,
    WithdrawalRejectRequest,
    WithdrawalStatusRequest,
)

router = APIRouter(prefix="/v1/admin/withdrawals", tags=["admin", "withdrawals"])


@router.get("", response_model=WithdrawalListResponse)
def admin_list_withdrawals(
    status: Optional[str] = Query(default=None),
    limit: int = Query(default=100, ge=1, le=500),
    admin: CurrentUser = Depends(require_admin),
    store: RecordStore = Depends(get_store),
):
    items = withdrawals.list_all_withdrawals(store, status=status, limit=limit)
    return WithdrawalListResponse(withdrawals=[WithdrawalItem.from_model(w) for w in items])


@router.get("/{withdrawal_id}", response_model=WithdrawalItem)
def admin_get_withdrawal(
    withdrawal_id: UUID,
    admin: CurrentUser = Depends(require_admin),
    store: RecordStore = Depends(get_store),
):
    return WithdrawalItem.from_model(withdrawals.get_withdrawal(store, withdrawal_id))


@router.post("/{withdrawal_id}/status", response_model=WithdrawalItem)
def admin_set_status(
    withdrawal_id: UUID,
    body: WithdrawalStatusRequest,
    admin: CurrentUser = Depends(require_admin),
    store: RecordStore = Depends(get_store),
):
    """
    Moves a withdrawal along its lifecycle. Approval charges the artist's
    balance in the same transaction; any failure leaves the withdrawal as it was.
    """
    w = withdrawals.admin_update_status(store, withdrawal_id, body.status, admin_user_id=admin.user_id)
    return WithdrawalItem.from_model(w)


@router.post("/{withdrawal_id}/reject", response_model=WithdrawalItem)
def admin_reject(
    withdrawal_id: UUID,
    body: WithdrawalRejectRequest,
    admin: CurrentUser = Depends(require_admin),
    store: RecordStore = Depends(get_store),
):
    w = withdrawals.reject_withdrawal(store, withdrawal_id, body.reason, admin_user_id=admin.user_id)
    return WithdrawalItem.from_model(w)
