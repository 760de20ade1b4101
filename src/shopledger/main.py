"""FastAPI application factory."""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI

from shopledger.core.config import get_settings
from shopledger.core.logging import configure_logging, get_logger

configure_logging(get_settings().log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for startup and shutdown events."""
    start_time = datetime.now()
    logger.info("app.startup", message="shopledger starting up", timestamp=start_time.isoformat())

    from shopledger.api.health import set_app_start_time

    set_app_start_time(start_time)

    yield

    logger.info("app.shutdown", message="shopledger shutting down gracefully")


def _setup_middleware(app: FastAPI) -> None:
    """Configure all middleware in correct order."""
    # Last added runs first: request ids are set before anything logs
    from shopledger.middleware.logging import RequestIDMiddleware
    from shopledger.middleware.sentry import SentryContextMiddleware

    app.add_middleware(SentryContextMiddleware)
    app.add_middleware(RequestIDMiddleware)


def _register_routers(app: FastAPI) -> None:
    """Register all API routers."""
    from shopledger.api import (
        customers,
        health,
        inventory,
        orders,
        reconciliation,
        reports,
        suppliers,
        transactions,
    )

    app.include_router(health.router)
    app.include_router(customers.router)
    app.include_router(suppliers.router)
    app.include_router(inventory.router)
    app.include_router(orders.router)
    app.include_router(transactions.router)
    app.include_router(reconciliation.router)
    app.include_router(reports.router)


def create_app() -> FastAPI:
    """Application factory for shopledger."""
    app = FastAPI(
        title="shopledger API",
        description="Meat shop orders, supplier ledger and balance reconciliation",
        version="0.1.0",
        lifespan=lifespan,
    )

    from shopledger.core.exception_handlers import register_exception_handlers
    from shopledger.core.sentry import init_sentry

    init_sentry()
    register_exception_handlers(app)
    _setup_middleware(app)
    _register_routers(app)

    logger.info("app.configured", message="FastAPI application created successfully")

    return app


def run() -> None:
    """Development server entrypoint."""
    uvicorn.run(
        "shopledger.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
