
from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Any
from uuid import UUID
from datetime import datetime


@dataclass(frozen=True)
class Artist:
    id: UUID
    user_id: Optional[UUID]
    name: str
    email: str
    available_balance: Decimal
    credit_balance: Decimal


@dataclass(frozen=True)
class BankDetails:
    account_name: str
    account_number: str
    bank_name: str


@dataclass(frozen=True)
class Withdrawal:
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
    rejection_reason: Optional[str]
    created_at: datetime
    approved_at: Optional[datetime]
    processed_at: Optional[datetime]
    artist_name: Optional[str] = None
    artist_email: Optional[str] = None


@dataclass(frozen=True)
class CreditTransaction:
    id: UUID
    artist_id: UUID
    amount: Decimal
    type: str
    description: Optional[str]
    created_by: Optional[UUID]
    withdrawal_id: Optional[UUID]
    created_at: datetime


@dataclass(frozen=True)
class ActivityLog:
    id: UUID
    artist_id: UUID
    user_id: Optional[UUID]
    activity_type: str
    title: str
    description: Optional[str]
    metadata: dict[str, Any]
    created_at: datetime
