# routes/admin_notifications.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from app.notifications.base import NotificationDispatcher
from app.store.base import RecordStore
from app.workers import notification_worker
from deps.admin import require_admin
from deps.auth import CurrentUser
from deps.store import get_dispatcher, get_store
from schemas import NotificationProcessOnceRequest, NotificationProcessOnceResponse

router = APIRouter(prefix="/v1/admin/notifications", tags=["admin", "notifications"])


@router.post("/process-once", response_model=NotificationProcessOnceResponse)
def admin_process_notifications_once(
    body: NotificationProcessOnceRequest,
    admin: CurrentUser = Depends(require_admin),
    store: RecordStore = Depends(get_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    processed = notification_worker.process_once(store, dispatcher, batch_size=body.batch_size)
    return NotificationProcessOnceResponse(processed=processed)
