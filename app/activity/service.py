from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from app.store.base import RecordStore
from app.withdrawals.model import ActivityLog

logger = logging.getLogger("payouts.activity")

ACTIVITY_TYPES = frozenset(
    {
        "withdrawal_requested",
        "withdrawal_approved",
        "withdrawal_processing",
        "withdrawal_completed",
        "withdrawal_rejected",
        "credit_added",
        "earnings_added",
    }
)


def log_activity(
    store: RecordStore,
    *,
    artist_id: UUID,
    user_id: UUID | None,
    activity_type: str,
    title: str,
    description: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> ActivityLog:
    if activity_type not in ACTIVITY_TYPES:
        raise ValueError(f"Unknown activity type: {activity_type}")

    entry = store.insert_activity_log(
        {
            "artist_id": artist_id,
            "user_id": user_id,
            "activity_type": activity_type,
            "title": title,
            "description": description,
            "metadata": metadata or {},
        }
    )
    logger.info("activity artist=%s type=%s id=%s", artist_id, activity_type, entry.id)
    return entry


def fetch_activity_logs(store: RecordStore, artist_id: UUID, *, limit: int = 20) -> list[ActivityLog]:
    return store.list_activity_logs(artist_id, limit=limit)
