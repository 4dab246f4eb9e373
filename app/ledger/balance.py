# app/ledger/balance.py
"""
Withdrawal arithmetic: bounds/balance validation, credit deduction and
naira conversion.

Everything here is pure. Amounts are Decimal USD quantised to cents; callers
may pass ints, strings or floats and get the same result as the equivalent
decimal string.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional

from app.errors import AboveMaximum, BelowMinimum, InsufficientBalance, InvalidAmount

EXCHANGE_RATE = Decimal("1250")  # NGN per USD
MIN_WITHDRAWAL = Decimal("50")
MAX_WITHDRAWAL = Decimal("10000")

OUTSTANDING_STATUSES = ("PENDING", "APPROVED", "PROCESSING")

_CENT = Decimal("0.01")


@dataclass(frozen=True)
class WithdrawalBreakdown:
    amount: Decimal
    credit_deduction: Decimal
    final_amount: Decimal
    naira_amount: Decimal
    final_naira_amount: Decimal

    def as_dict(self) -> dict[str, str]:
        return {
            "amount": str(self.amount),
            "credit_deduction": str(self.credit_deduction),
            "final_amount": str(self.final_amount),
            "naira_amount": str(self.naira_amount),
            "final_naira_amount": str(self.final_naira_amount),
        }


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise InvalidAmount("Amount must be a number")

    if isinstance(value, Decimal):
        d = value
    else:
        try:
            d = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise InvalidAmount("Amount must be a number")

    if not d.is_finite():
        raise InvalidAmount("Amount must be a finite number")

    return d


def to_money(value: Any) -> Decimal:
    return _to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP)


def validate(
    amount: Any,
    available_balance: Any,
    *,
    min_withdrawal: Decimal = MIN_WITHDRAWAL,
    max_withdrawal: Decimal = MAX_WITHDRAWAL,
) -> Decimal:
    """
    Returns the normalised amount, raises the first failing rule otherwise.

    Limits are checked against the exact value; rounding to cents happens
    only once every rule has passed.
    """
    amt = _to_decimal(amount)
    if amt <= 0:
        raise InvalidAmount("Amount must be greater than zero")

    if amt < min_withdrawal:
        raise BelowMinimum(f"Minimum withdrawal is ${min_withdrawal:,.2f}")

    if amt > max_withdrawal:
        raise AboveMaximum(f"Maximum withdrawal is ${max_withdrawal:,.2f}")

    balance = _to_decimal(available_balance if available_balance is not None else 0)
    if amt > balance:
        raise InsufficientBalance(f"Amount exceeds your available balance of ${balance:,.2f}")

    return to_money(amt)


def compute_breakdown(
    amount: Any,
    credit_balance: Any,
    *,
    exchange_rate: Decimal = EXCHANGE_RATE,
) -> WithdrawalBreakdown:
    amt = to_money(amount)
    credit = to_money(credit_balance if credit_balance is not None else 0)

    credit_deduction = min(max(credit, Decimal("0.00")), amt)
    final_amount = amt - credit_deduction

    return WithdrawalBreakdown(
        amount=amt,
        credit_deduction=credit_deduction,
        final_amount=final_amount,
        naira_amount=amt * exchange_rate,
        final_naira_amount=final_amount * exchange_rate,
    )


def _field(w: Any, name: str) -> Optional[Any]:
    if isinstance(w, Mapping):
        return w.get(name)
    return getattr(w, name, None)


def has_pending_request(withdrawals: Iterable[Any], artist_id: Any) -> bool:
    target = str(artist_id)
    for w in withdrawals:
        if str(_field(w, "artist_id")) != target:
            continue
        if (_field(w, "status") or "").strip().upper() in OUTSTANDING_STATUSES:
            return True
    return False
