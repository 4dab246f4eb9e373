import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from services.observability import set_request_id

logger = logging.getLogger("payouts.http")

SENSITIVE_HEADERS = {"authorization", "cookie", "apikey"}


def _safe_headers(headers: dict) -> dict:
    safe = {}
    for k, v in headers.items():
        if k.lower() in SENSITIVE_HEADERS:
            safe[k] = "***"
        else:
            safe[k] = v
    return safe


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        start = time.time()

        request.state.request_id = req_id
        set_request_id(req_id)

        response = None
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = req_id
            return response
        finally:
            duration_ms = int((time.time() - start) * 1000)
            status = getattr(response, "status_code", 500)

            # one line per request, no PII
            logger.info(
                "http_request_end request_id=%s method=%s path=%s status=%s duration_ms=%s client=%s headers=%s",
                req_id,
                request.method,
                request.url.path,
                status,
                duration_ms,
                request.client.host if request.client else None,
                _safe_headers(dict(request.headers)),
            )
            set_request_id(None)
