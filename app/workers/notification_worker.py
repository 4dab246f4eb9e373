# app/workers/notification_worker.py
from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Optional

import psycopg2

from app.errors import NotificationError, StoreError
from app.notifications.base import NotificationDispatcher, SendResult
from app.notifications.factory import get_dispatcher
from app.store.base import RecordStore
from app.store.postgres import PgRecordStore
from db import get_conn
from services.redaction import redact_text
from settings import settings

logger = logging.getLogger("payouts.worker")

BASE_BACKOFF_SECONDS = 30


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _next_retry_at(attempt_count: int) -> datetime:
    # 30, 60, 120, 240, 480...
    delay = BASE_BACKOFF_SECONDS * (2 ** max(0, attempt_count - 1))
    return _now() + timedelta(seconds=delay)


def _http_status(resp: Any) -> Optional[int]:
    if isinstance(resp, dict):
        v = resp.get("http_status")
        return int(v) if v is not None else None
    return None


def _is_retryable(res: SendResult) -> bool:
    if res.retryable is not None:
        return bool(res.retryable)
    return _http_status(res.response) in {408, 425, 429, 500, 502, 503, 504}


def process_once(
    store: RecordStore,
    dispatcher: NotificationDispatcher,
    *,
    batch_size: Optional[int] = None,
    max_attempts: Optional[int] = None,
) -> int:
    """
    Claims due outbox rows and tries to deliver each one.
    Returns the number of rows handled. Delivery failures are recorded on the
    row, never raised.

    The claim and every row's outcome are committed on their own, so no
    transaction is open while the relay is being called. A row whose outcome
    never lands becomes due again when its lease runs out.
    """
    batch_size = batch_size or settings.NOTIFY_BATCH_SIZE
    max_attempts = max_attempts or settings.NOTIFY_MAX_ATTEMPTS

    rows = store.claim_due_notifications(limit=batch_size, lease_seconds=settings.NOTIFY_LEASE_SECONDS)
    store.commit()
    logger.info("found_due=%s", len(rows))

    for row in rows:
        _handle(store, dispatcher, row, max_attempts=max_attempts)
        store.commit()

    return len(rows)


def _handle(store: RecordStore, dispatcher: NotificationDispatcher, row: dict, *, max_attempts: int) -> None:
    notification_id = row["id"]
    attempt = int(row.get("attempt_count") or 0) + 1
    payload = row.get("payload") or {}
    recipient = row.get("recipient") or ""

    try:
        res = dispatcher.send_withdrawal_notification(
            recipient,
            row["event"],
            Decimal(str(payload.get("amount") or "0")),
            Decimal(str(payload.get("naira_amount") or "0")),
            payload.get("reason"),
        )
    except NotificationError as exc:
        logger.error("notification=%s to=%s cannot be rendered: %s", notification_id, redact_text(recipient), exc)
        store.update_notification(
            notification_id,
            status="FAILED",
            attempt_count=attempt,
            last_error=str(exc),
            next_retry_at=None,
        )
        return

    if res.success:
        logger.info("notification=%s event=%s to=%s -> SENT", notification_id, row["event"], redact_text(recipient))
        store.update_notification(
            notification_id,
            status="SENT",
            attempt_count=attempt,
            last_error=None,
            next_retry_at=None,
        )
        return

    if _is_retryable(res) and attempt < max_attempts:
        retry_at = _next_retry_at(attempt)
        logger.warning(
            "notification=%s attempt=%s failed (%s), retry at %s",
            notification_id,
            attempt,
            res.error,
            retry_at.isoformat(),
        )
        store.update_notification(
            notification_id,
            status="PENDING",
            attempt_count=attempt,
            last_error=res.error or "Retryable failure",
            next_retry_at=retry_at,
        )
        return

    logger.error("notification=%s attempt=%s -> FAILED: %s", notification_id, attempt, res.error)
    store.update_notification(
        notification_id,
        status="FAILED",
        attempt_count=attempt,
        last_error=res.error or "Non-retryable failure",
        next_retry_at=None,
    )


def _poll(dispatcher: NotificationDispatcher, *, batch_size: Optional[int] = None) -> int:
    try:
        with get_conn() as conn:
            return process_once(PgRecordStore(conn), dispatcher, batch_size=batch_size)
    except (StoreError, psycopg2.Error):
        logger.exception("notification batch aborted; unfinished rows retry after their lease")
        return 0


def run_forever(*, poll_seconds: Optional[int] = None, batch_size: Optional[int] = None) -> None:
    poll_seconds = poll_seconds or settings.NOTIFY_POLL_SECONDS
    dispatcher = get_dispatcher()

    logger.info("notification worker started mode=%s", settings.EMAIL_MODE)
    while True:
        n = _poll(dispatcher, batch_size=batch_size)
        if n == 0:
            time.sleep(poll_seconds)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_forever()
