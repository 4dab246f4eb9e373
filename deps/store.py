# deps/store.py
from __future__ import annotations

from typing import Iterator

from app.notifications.base import NotificationDispatcher
from app.notifications.factory import get_dispatcher as _get_dispatcher
from app.store.base import RecordStore
from app.store.postgres import PgRecordStore
from db import get_conn


def get_store() -> Iterator[RecordStore]:
    """
    One store per request, bound to one transaction: committed when the
    handler returns, rolled back when it raises.
    """
    with get_conn() as conn:
        yield PgRecordStore(conn)


def get_dispatcher() -> NotificationDispatcher:
    return _get_dispatcher()
