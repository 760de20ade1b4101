"""Optional Sentry error tracking."""

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.utils import BadDsn

from shopledger.core.config import Settings, get_settings
from shopledger.core.logging import get_logger

logger = get_logger(__name__)

_sentry_initialized = False

# Balances and contact numbers stay out of error reports
SENSITIVE_KEYS = frozenset({"contact", "pending_amount", "debt", "amount"})


def init_sentry(settings: Settings | None = None) -> bool:
    """
    Turn on Sentry when SENTRY_DSN holds a real DSN. Returns True when active.

    Local runs, tests and CI carry no DSN or a placeholder and stay
    untracked. Calling this again after a successful init is a no-op.
    """
    global _sentry_initialized

    if _sentry_initialized:
        return True

    settings = settings or get_settings()
    dsn = (settings.sentry_dsn or "").strip()
    if not dsn.startswith(("https://", "http://")):
        logger.info("sentry.disabled", reason="missing" if not dsn else "placeholder")
        return False

    try:
        sentry_sdk.init(
            dsn=dsn,
            environment=settings.environment,
            traces_sample_rate=0.0,
            send_default_pii=False,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                LoggingIntegration(level=None, event_level=None),  # structlog already logs
            ],
            before_send=_filter_sensitive_data,
        )
    except BadDsn as exc:
        logger.warning("sentry.init_failed", error=str(exc))
        return False

    _sentry_initialized = True
    logger.info("sentry.initialized", environment=settings.environment)
    return True


def _mentions_sql(value: object) -> bool:
    return "sql" in str(value).lower()


def _scrub_extra(extra: dict) -> dict:
    return {
        key: value
        for key, value in extra.items()
        if str(key).lower() not in SENSITIVE_KEYS and not _mentions_sql(key) and not _mentions_sql(value)
    }


def _scrub_breadcrumbs(crumbs: list) -> list:
    return [
        crumb
        for crumb in crumbs
        if not _mentions_sql(crumb.get("message", "") if isinstance(crumb, dict) else crumb)
    ]


def _filter_sensitive_data(event: dict, hint: dict) -> dict:
    """before_send hook: drop SQL text and money/contact fields."""
    if isinstance(event.get("extra"), dict):
        event["extra"] = _scrub_extra(event["extra"])

    breadcrumbs = event.get("breadcrumbs")
    if isinstance(breadcrumbs, dict) and isinstance(breadcrumbs.get("values"), list):
        breadcrumbs["values"] = _scrub_breadcrumbs(breadcrumbs["values"])
    elif isinstance(breadcrumbs, list):
        event["breadcrumbs"] = _scrub_breadcrumbs(breadcrumbs)

    return event
