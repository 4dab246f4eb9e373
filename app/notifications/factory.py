

# app/notifications/factory.py
from __future__ import annotations

from typing import Any, Dict

from settings import settings

_DISPATCHER_CACHE: Dict[str, Any] = {}


def get_dispatcher(mode: str | None = None):
    key = (mode or settings.EMAIL_MODE or "mock").strip().lower()

    if key in _DISPATCHER_CACHE:
        return _DISPATCHER_CACHE[key]

    if key == "relay":
        from app.notifications.relay import EmailRelayDispatcher
        dispatcher = EmailRelayDispatcher()

    elif key == "mock":
        from app.notifications.mock import MockDispatcher
        dispatcher = MockDispatcher()

    else:
        raise ValueError(f"Unsupported EMAIL_MODE: {key}")

    _DISPATCHER_CACHE[key] = dispatcher
    return dispatcher
