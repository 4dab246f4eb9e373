

# schemas.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.withdrawals.model import ActivityLog, CreditTransaction, Withdrawal


# -------- WITHDRAWALS --------
class WithdrawalCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    # validated by the ledger so the caller gets the domain error code
    amount: Decimal
    account_name: str = Field(default="", max_length=200)
    account_number: str = Field(default="", max_length=40)
    bank_name: str = Field(default="", max_length=200)


class WithdrawalItem(BaseModel):
    id: UUID
    artist_id: UUID
    user_id: UUID
    amount: Decimal
    naira_amount: Decimal
    credit_deduction: Decimal
    final_amount: Decimal
    final_naira_amount: Decimal
    account_name: str
    account_number: str
    bank_name: str
    status: str
    rejection_reason: Optional[str] = None
    created_at: datetime
    approved_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    artist_name: Optional[str] = None
    artist_email: Optional[str] = None

    @classmethod
    def from_model(cls, w: Withdrawal) -> "WithdrawalItem":
        return cls(**w.__dict__)


class WithdrawalListResponse(BaseModel):
    withdrawals: List[WithdrawalItem]


class WithdrawalStatusRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    status: str = Field(min_length=1, max_length=20)


class WithdrawalRejectRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    reason: str = Field(default="", max_length=500)


# -------- BALANCE --------
class BalanceResponse(BaseModel):
    artist_id: UUID
    available_balance: Decimal
    credit_balance: Decimal
    pending_withdrawals: Decimal
    exchange_rate: Decimal
    min_withdrawal: Decimal
    max_withdrawal: Decimal


# -------- CREDITS / EARNINGS --------
class AmountRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    amount: Decimal
    description: Optional[str] = Field(default=None, max_length=500)


class CreditResponse(BaseModel):
    artist_id: UUID
    credit_balance: Decimal


class EarningsResponse(BaseModel):
    artist_id: UUID
    available_balance: Decimal


class CreditTransactionItem(BaseModel):
    id: UUID
    artist_id: UUID
    amount: Decimal
    type: str
    description: Optional[str] = None
    created_by: Optional[UUID] = None
    withdrawal_id: Optional[UUID] = None
    created_at: datetime

    @classmethod
    def from_model(cls, t: CreditTransaction) -> "CreditTransactionItem":
        return cls(**t.__dict__)


class CreditTransactionListResponse(BaseModel):
    transactions: List[CreditTransactionItem]


# -------- ACTIVITY --------
class ActivityItem(BaseModel):
    id: UUID
    artist_id: UUID
    user_id: Optional[UUID] = None
    activity_type: str
    title: str
    description: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime

    @classmethod
    def from_model(cls, a: ActivityLog) -> "ActivityItem":
        return cls(**a.__dict__)


class ActivityListResponse(BaseModel):
    activities: List[ActivityItem]


# -------- NOTIFICATIONS --------
class NotificationProcessOnceRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    batch_size: int = Field(default=50, ge=1, le=500)


class NotificationProcessOnceResponse(BaseModel):
    ok: bool = True
    processed: int
