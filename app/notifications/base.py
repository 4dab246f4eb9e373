

# app/notifications/base.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Literal, Optional, Protocol

WithdrawalEvent = Literal["requested", "approved", "completed", "rejected"]

WITHDRAWAL_EVENTS = ("requested", "approved", "completed", "rejected")


@dataclass(frozen=True)
class SendResult:
    ok: bool
    error: Optional[str] = None
    response: Optional[dict[str, Any]] = None

    # None => let the worker classify based on http_status
    retryable: Optional[bool] = None

    @property
    def success(self) -> bool:
        return self.ok


class NotificationDispatcher(Protocol):
    def send_withdrawal_notification(
        self,
        email: str,
        event: WithdrawalEvent,
        amount: Decimal,
        naira_amount: Decimal,
        reason: Optional[str] = None,
    ) -> SendResult: ...
