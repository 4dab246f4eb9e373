

# app/notifications/relay.py
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

import httpx

from app.notifications.base import SendResult
from app.notifications.http import HttpClient, is_retryable_http
from app.notifications.templates import render_withdrawal_email
from services.redaction import redact_text
from settings import settings

logger = logging.getLogger("payouts.notifications")


class EmailRelayDispatcher:
    """
    Sends transactional email through the platform's email relay function:
    POST {to, subject, html, from} with the relay's `apikey` header.

    Never raises for delivery problems; the outcome is in SendResult.
    """

    def __init__(
        self,
        *,
        api_url: str | None = None,
        api_key: str | None = None,
        sender: str | None = None,
        dashboard_url: str | None = None,
        client: HttpClient | None = None,
    ):
        self.api_url = (api_url if api_url is not None else settings.EMAIL_API_URL).strip()
        self.api_key = api_key if api_key is not None else settings.EMAIL_API_KEY
        self.sender = sender or settings.EMAIL_FROM
        self.dashboard_url = dashboard_url if dashboard_url is not None else settings.DASHBOARD_URL
        self.client = client or HttpClient(timeout_s=settings.EMAIL_HTTP_TIMEOUT_S)

    def send_email(self, to: str, subject: str, html: str) -> SendResult:
        if not self.api_url:
            return SendResult(ok=False, error="EMAIL_API_URL is not configured", retryable=False)

        headers = {
            "Content-Type": "application/json",
            "apikey": self.api_key,
        }
        body = {"to": to, "subject": subject, "html": html, "from": self.sender}

        try:
            resp = self.client.post(self.api_url, headers=headers, json_body=body)
        except httpx.HTTPError as exc:
            logger.warning("email relay transport error to=%s: %s", redact_text(to), exc)
            return SendResult(ok=False, error=f"{type(exc).__name__}: {exc}", retryable=True)

        response = {"http_status": resp.status_code, **(resp.json or {})}

        if 200 <= resp.status_code < 300:
            logger.info("email sent to=%s subject=%s", redact_text(to), subject)
            return SendResult(ok=True, response=response)

        error = (resp.json or {}).get("error") or f"Email relay returned HTTP {resp.status_code}"
        logger.warning("email relay failed to=%s status=%s error=%s", redact_text(to), resp.status_code, error)
        return SendResult(
            ok=False,
            error=str(error),
            response=response,
            retryable=is_retryable_http(resp.status_code),
        )

    def send_withdrawal_notification(
        self,
        email: str,
        event: str,
        amount: Decimal,
        naira_amount: Decimal,
        reason: Optional[str] = None,
    ) -> SendResult:
        subject, html = render_withdrawal_email(
            event,
            amount=amount,
            naira_amount=naira_amount,
            reason=reason,
            dashboard_url=self.dashboard_url,
        )
        return self.send_email(email, subject, html)
