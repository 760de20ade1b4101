"""Tests for settings loading and Sentry setup."""

from decimal import Decimal

import pytest

from shopledger.core import sentry
from shopledger.core.config import DEFAULT_DATABASE_URL, Settings, load_settings, normalize_database_url


class TestDatabaseUrl:
    """Test database URL normalization."""

    @pytest.mark.parametrize(
        "url",
        ["postgres://u:p@host/db", "postgresql://u:p@host/db"],
    )
    def test_rewrites_to_asyncpg(self, url: str):
        assert normalize_database_url(url) == "postgresql+asyncpg://u:p@host/db"

    def test_keeps_explicit_driver(self):
        assert normalize_database_url("sqlite+aiosqlite:///shop.db") == "sqlite+aiosqlite:///shop.db"

    def test_empty_falls_back_to_default(self):
        assert normalize_database_url("") == DEFAULT_DATABASE_URL


class TestLoadSettings:
    """Test environment-driven settings."""

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgres://u:p@host/db")
        monkeypatch.setenv("LOG_LEVEL", "info")
        monkeypatch.setenv("CURRENCY_SYMBOL", "$")
        monkeypatch.setenv("LOW_STOCK_THRESHOLD", "2.5")
        monkeypatch.setenv("SENTRY_DSN", "")

        settings = load_settings()

        assert settings.database_url == "postgresql+asyncpg://u:p@host/db"
        assert settings.log_level == "INFO"
        assert settings.currency_symbol == "$"
        assert settings.low_stock_threshold == Decimal("2.5")
        assert settings.sentry_dsn is None

    def test_defaults(self, monkeypatch):
        for name in ("DATABASE_URL", "ENVIRONMENT", "LOG_LEVEL", "CURRENCY_SYMBOL", "LOW_STOCK_THRESHOLD", "SENTRY_DSN"):
            monkeypatch.delenv(name, raising=False)

        settings = load_settings()

        assert settings.environment == "development"
        assert settings.currency_symbol == "₹"
        assert settings.low_stock_threshold == Decimal("10")


class TestSentry:
    """Test Sentry initialization guards and event scrubbing."""

    @pytest.fixture(autouse=True)
    def reset_sentry(self, monkeypatch):
        monkeypatch.setattr(sentry, "_sentry_initialized", False)

    def test_disabled_without_dsn(self):
        assert sentry.init_sentry(Settings(sentry_dsn=None)) is False

    def test_disabled_for_placeholder_dsn(self):
        assert sentry.init_sentry(Settings(sentry_dsn="your-dsn-here")) is False

    def test_filter_drops_sensitive_extras(self):
        event = {
            "extra": {"customer_id": "c1", "pending_amount": "120.00", "sql_query": "SELECT 1"},
            "breadcrumbs": {"values": [{"message": "SELECT * FROM customers"}, {"message": "order.created"}]},
        }

        filtered = sentry._filter_sensitive_data(event, {})

        assert filtered["extra"] == {"customer_id": "c1"}
        assert filtered["breadcrumbs"]["values"] == [{"message": "order.created"}]
