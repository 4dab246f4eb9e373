

# app/notifications/mock.py
from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from app.notifications.base import SendResult
from app.notifications.templates import render_withdrawal_email


class MockDispatcher:
    """
    Dev/test dispatcher. Renders the email so template errors still surface,
    keeps every send in `sent`, never talks to the network.

    On failures leave retryable=None so the worker classifies by http_status
    (503 => retry).
    """

    def __init__(
        self,
        *,
        succeed: bool = True,
        retryable: Optional[bool] = None,
        failure_http_status: int = 503,
    ):
        self.succeed = succeed
        self.retryable = retryable
        self.failure_http_status = failure_http_status
        self.sent: list[dict[str, Any]] = []

    def send_withdrawal_notification(
        self,
        email: str,
        event: str,
        amount: Decimal,
        naira_amount: Decimal,
        reason: Optional[str] = None,
    ) -> SendResult:
        subject, _html = render_withdrawal_email(event, amount=amount, naira_amount=naira_amount, reason=reason)
        self.sent.append(
            {
                "email": email,
                "event": event,
                "amount": amount,
                "naira_amount": naira_amount,
                "reason": reason,
                "subject": subject,
            }
        )

        if self.succeed:
            return SendResult(ok=True, response={"http_status": 200, "mock": True})

        return SendResult(
            ok=False,
            error="Mock email failure",
            response={"http_status": self.failure_http_status, "mock": True},
            retryable=self.retryable,
        )
