"""
Health check endpoint for monitoring and orchestration.

Reports uptime and whether the document store answers. Always returns 200;
a failing store shows up as "degraded" in the body.
"""

import time
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, status

from shopledger.api.deps import get_store
from shopledger.core.errors import AppError
from shopledger.core.logging import get_logger
from shopledger.store.base import DocumentStore

logger = get_logger(__name__)

router = APIRouter(tags=["health"])

# Global app start time (set in lifespan)
_app_start_time: datetime | None = None


def set_app_start_time(start_time: datetime) -> None:
    """Called by lifespan to track when app started."""
    global _app_start_time
    _app_start_time = start_time


def get_uptime_seconds() -> int:
    """Calculate seconds since app start."""
    if _app_start_time is None:
        return 0
    return int((datetime.now() - _app_start_time).total_seconds())


async def check_store(store: DocumentStore) -> dict[str, Any]:
    """
    Round-trip the customers collection.

    Returns: {"status": "ok"|"down", "response_time_ms": N, "error": str (if down)}
    """
    start = time.time()
    try:
        await store.customers.get_by_id("health-check")
    except AppError as exc:
        logger.warning("health.store_down", error=exc.code)
        return {
            "status": "down",
            "response_time_ms": int((time.time() - start) * 1000),
            "error": exc.code,
        }
    return {
        "status": "ok",
        "response_time_ms": int((time.time() - start) * 1000),
    }


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def health_check(store: DocumentStore = Depends(get_store)) -> dict[str, Any]:
    """
    Example response (degraded):
        {
            "status": "degraded",
            "uptime_seconds": 3600,
            "checks": {
                "store": {"status": "down", "response_time_ms": 1000, "error": "DATABASE_ERROR"}
            }
        }
    """
    store_check = await check_store(store)
    return {
        "status": "ok" if store_check["status"] == "ok" else "degraded",
        "uptime_seconds": get_uptime_seconds(),
        "checks": {"store": store_check},
    }
