# services/error_mapping.py
from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from app.errors import PayoutsError
from services.observability import get_request_id

logger = logging.getLogger("payouts")

PAYOUTS_ERROR_HTTP_MAP: dict[str, int] = {
    "INVALID_AMOUNT": 422,
    "BELOW_MINIMUM": 422,
    "ABOVE_MAXIMUM": 422,
    "MISSING_FIELD": 422,
    "INVALID_STATUS": 422,
    "INSUFFICIENT_BALANCE": 409,
    "PENDING_REQUEST_EXISTS": 409,
    "INVALID_TRANSITION": 409,
    "ARTIST_NOT_FOUND": 404,
    "WITHDRAWAL_NOT_FOUND": 404,
    "STORE_ERROR": 500,
    "NOTIFICATION_ERROR": 500,
}

# internals of these are never shown to the caller
_OPAQUE_CODES = {"STORE_ERROR", "NOTIFICATION_ERROR"}


def http_status_for(exc: PayoutsError) -> int:
    return PAYOUTS_ERROR_HTTP_MAP.get(exc.code, 500)


def error_detail(exc: PayoutsError) -> dict[str, str]:
    description = exc.description
    if exc.code in _OPAQUE_CODES:
        description = "Something went wrong, please try again"
    return {"code": exc.code, "title": exc.title, "description": description}


async def payouts_error_handler(request: Request, exc: PayoutsError) -> JSONResponse:
    status = http_status_for(exc)
    request_id = getattr(request.state, "request_id", None) or get_request_id()
    if status >= 500:
        logger.error("request_id=%s %s: %s", request_id, exc.code, exc.description)
    else:
        logger.info("request_id=%s rejected %s: %s", request_id, exc.code, exc.description)
    return JSONResponse(status_code=status, content={"detail": error_detail(exc)})
