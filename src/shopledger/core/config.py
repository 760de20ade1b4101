"""Application settings read from the environment at the app/CLI edge."""

import os
from decimal import Decimal
from functools import lru_cache

from pydantic import BaseModel, Field

DEFAULT_DATABASE_URL = "postgresql+asyncpg://shopledger:dev_password_change_in_prod@db:5432/shopledger_dev"


def normalize_database_url(url: str) -> str:
    """Rewrite postgres:// style URLs for the asyncpg driver."""
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url or DEFAULT_DATABASE_URL


class Settings(BaseModel):
    """Runtime configuration."""

    database_url: str = DEFAULT_DATABASE_URL
    environment: str = "development"
    log_level: str = "DEBUG"
    currency_symbol: str = Field("₹", min_length=1, max_length=5)
    low_stock_threshold: Decimal = Field(Decimal("10"), ge=0)
    sentry_dsn: str | None = None


def load_settings() -> Settings:
    """Build settings from environment variables."""
    return Settings(
        database_url=normalize_database_url(os.getenv("DATABASE_URL", "")),
        environment=os.getenv("ENVIRONMENT", "development"),
        log_level=os.getenv("LOG_LEVEL", "DEBUG").upper(),
        currency_symbol=os.getenv("CURRENCY_SYMBOL", "₹"),
        low_stock_threshold=Decimal(os.getenv("LOW_STOCK_THRESHOLD", "10")),
        sentry_dsn=os.getenv("SENTRY_DSN") or None,
    )


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, loaded once."""
    return load_settings()
