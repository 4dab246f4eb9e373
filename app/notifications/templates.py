from __future__ import annotations

from decimal import Decimal
from html import escape
from typing import Optional

from app.errors import NotificationError

_SUBJECTS = {
    "requested": "Withdrawal Request Received",
    "approved": "Withdrawal Approved",
    "completed": "Withdrawal Completed",
    "rejected": "Withdrawal Request Rejected",
}

_HEADLINES = {
    "requested": ("#1e40af", "We received your withdrawal request"),
    "approved": ("#059669", "Your withdrawal has been approved"),
    "completed": ("#059669", "Your withdrawal has been paid"),
    "rejected": ("#dc2626", "Your withdrawal request was rejected"),
}

_BODIES = {
    "requested": "Your request is now pending review by our team. "
    "Any outstanding credit on your account is deducted from the payout.",
    "approved": "Your withdrawal has been approved and will be processed shortly. "
    "It may take 3-5 business days for the funds to reach your bank account.",
    "completed": "The funds have been sent to your bank account.",
    "rejected": "Your withdrawal request could not be processed. "
    "Your available balance has not been charged.",
}


def format_usd(value: Decimal) -> str:
    return f"${Decimal(value):,.2f}"


def format_ngn(value: Decimal) -> str:
    return f"₦{Decimal(value):,.2f}"


def render_withdrawal_email(
    event: str,
    *,
    amount: Decimal,
    naira_amount: Decimal,
    reason: Optional[str] = None,
    dashboard_url: str = "",
) -> tuple[str, str]:
    """
    Returns (subject, html) for a withdrawal lifecycle email.
    """
    if event not in _SUBJECTS:
        raise NotificationError(f"Unknown withdrawal notification event: {event}")

    color, headline = _HEADLINES[event]

    reason_html = ""
    if event == "rejected" and reason:
        reason_html = (
            '<div style="background: #fef2f2; border-left: 4px solid #dc2626; padding: 16px; margin-bottom: 24px;">'
            f'<p style="color: #991b1b; font-size: 14px; margin: 0;"><strong>Reason:</strong> {escape(reason)}</p>'
            "</div>"
        )

    button_html = ""
    if dashboard_url:
        button_html = (
            '<div style="text-align: center; margin-top: 32px;">'
            f'<a href="{escape(dashboard_url, quote=True)}" style="background: {color}; color: white; '
            'padding: 16px 32px; text-decoration: none; border-radius: 8px; font-weight: bold; display: inline-block;">'
            "View Earnings Dashboard</a></div>"
        )

    html = (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; background-color: #f8fafc;">'
        '<div style="background: white; border-radius: 12px; padding: 32px;">'
        f'<h1 style="color: {color}; font-size: 26px; margin: 0 0 24px 0; text-align: center;">{headline}</h1>'
        f'<p style="color: #6b7280; font-size: 16px; line-height: 1.6;">{_BODIES[event]}</p>'
        '<ul style="color: #374151; font-size: 15px; line-height: 1.8;">'
        f"<li><strong>Amount:</strong> {format_usd(amount)}</li>"
        f"<li><strong>Naira equivalent:</strong> {format_ngn(naira_amount)}</li>"
        "</ul>"
        f"{reason_html}"
        f"{button_html}"
        "</div></div>"
    )

    return _SUBJECTS[event], html
