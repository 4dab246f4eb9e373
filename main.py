# main.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.errors import PayoutsError
from db import close_pool
from middleware import RequestContextMiddleware
from routes.activity import router as activity_router
from routes.admin_credits import router as admin_credits_router
from routes.admin_notifications import router as admin_notifications_router
from routes.admin_withdrawals import router as admin_withdrawals_router
from routes.health import router as health_router
from routes.withdrawals import router as withdrawals_router
from services.error_mapping import payouts_error_handler
from settings import validate_env_settings

logger = logging.getLogger("payouts")


def create_app() -> FastAPI:
    validate_env_settings()

    app = FastAPI(title="Artist Payouts API", version="1.0.0")

    app.add_middleware(RequestContextMiddleware)

    # -----------------------------
    # ROUTERS
    # -----------------------------
    app.include_router(health_router)
    app.include_router(withdrawals_router)
    app.include_router(activity_router)
    app.include_router(admin_withdrawals_router)
    app.include_router(admin_credits_router)
    app.include_router(admin_notifications_router)

    app.add_exception_handler(PayoutsError, payouts_error_handler)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(
            "unhandled error request_id=%s path=%s",
            getattr(request.state, "request_id", None),
            request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    @app.on_event("shutdown")
    def _shutdown() -> None:
        close_pool()

    return app


app = create_app()
