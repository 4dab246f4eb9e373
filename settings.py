

# settings.py
from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


_DEV_JWT_SECRET = "dev-secret-change-me"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    ENV: str = "dev"

    # -----------------------
    # DB
    # -----------------------
    DATABASE_URL: str = Field(default="")
    DB_POOL_MIN: int = 1
    DB_POOL_MAX: int = 10
    DB_STATEMENT_TIMEOUT_MS: int = 5000
    DB_IDLE_TX_TIMEOUT_MS: int = 5000

    # -----------------------
    # JWT (tokens are minted by the auth service, we only verify)
    # -----------------------
    JWT_SECRET: str = Field(default=_DEV_JWT_SECRET, min_length=16)
    JWT_ALG: str = Field(default="HS256")
    JWT_ACCESS_MINUTES: int = Field(default=60)

    # -----------------------
    # Withdrawals
    # -----------------------
    EXCHANGE_RATE: Decimal = Decimal("1250")  # NGN per USD, fixed
    MIN_WITHDRAWAL: Decimal = Decimal("50")
    MAX_WITHDRAWAL: Decimal = Decimal("10000")

    # -----------------------
    # Email (mode switch)
    # -----------------------
    EMAIL_MODE: Literal["mock", "relay"] = "mock"
    EMAIL_API_URL: str = ""
    EMAIL_API_KEY: str = ""
    EMAIL_FROM: str = "MALPINOHdistro <noreply@malpinohdistro.com.ng>"
    EMAIL_HTTP_TIMEOUT_S: float = 20.0
    DASHBOARD_URL: str = "https://malpinohdistro.com.ng/dashboard"

    # -----------------------
    # Notification worker
    # -----------------------
    NOTIFY_MAX_ATTEMPTS: int = 5
    NOTIFY_BATCH_SIZE: int = 50
    NOTIFY_POLL_SECONDS: int = 5
    # claimed rows stay hidden from other workers this long; keep it above EMAIL_HTTP_TIMEOUT_S
    NOTIFY_LEASE_SECONDS: int = 120


settings = Settings()


def validate_env_settings() -> None:
    """
    Fail fast outside dev when required config is missing.
    """
    env = (settings.ENV or "dev").strip().lower()
    if env in {"dev", "test", "local"}:
        return

    missing: list[str] = []

    if not (settings.DATABASE_URL or "").strip():
        missing.append("DATABASE_URL")

    secret = settings.JWT_SECRET or ""
    if secret == _DEV_JWT_SECRET or len(secret) < 32:
        missing.append("JWT_SECRET")

    if settings.EMAIL_MODE == "relay":
        if not (settings.EMAIL_API_URL or "").strip():
            missing.append("EMAIL_API_URL")
        if not (settings.EMAIL_API_KEY or "").strip():
            missing.append("EMAIL_API_KEY")

    if settings.NOTIFY_LEASE_SECONDS <= settings.EMAIL_HTTP_TIMEOUT_S:
        missing.append("NOTIFY_LEASE_SECONDS")

    if missing:
        raise RuntimeError(f"Missing or insecure settings for ENV={env}: {', '.join(missing)}")
