# app/errors.py
from __future__ import annotations


class PayoutsError(Exception):
    """
    Base for every business error in the payouts domain.

    `code` is stable and machine readable, `title`/`description` are what the
    dashboard shows in its toast.
    """

    code = "PAYOUTS_ERROR"
    title = "Request failed"

    def __init__(self, description: str | None = None):
        self.description = description or self.title
        super().__init__(self.description)


class InvalidAmount(PayoutsError):
    code = "INVALID_AMOUNT"
    title = "Invalid amount"


class BelowMinimum(PayoutsError):
    code = "BELOW_MINIMUM"
    title = "Amount too low"


class AboveMaximum(PayoutsError):
    code = "ABOVE_MAXIMUM"
    title = "Amount too high"


class InsufficientBalance(PayoutsError):
    code = "INSUFFICIENT_BALANCE"
    title = "Insufficient balance"


class PendingRequestExists(PayoutsError):
    code = "PENDING_REQUEST_EXISTS"
    title = "Pending withdrawal"


class MissingField(PayoutsError):
    code = "MISSING_FIELD"
    title = "Missing information"


class ArtistNotFound(PayoutsError):
    code = "ARTIST_NOT_FOUND"
    title = "Artist not found"


class WithdrawalNotFound(PayoutsError):
    code = "WITHDRAWAL_NOT_FOUND"
    title = "Withdrawal not found"


class InvalidTransition(PayoutsError):
    code = "INVALID_TRANSITION"
    title = "Invalid status change"


class InvalidStatus(PayoutsError):
    code = "INVALID_STATUS"
    title = "Unknown status"


class StoreError(PayoutsError):
    code = "STORE_ERROR"
    title = "Request failed"


class NotificationError(PayoutsError):
    # never surfaced to the user, only logged
    code = "NOTIFICATION_ERROR"
    title = "Notification failed"
