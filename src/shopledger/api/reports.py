"""Business report API endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query

from shopledger.api.deps import get_app_settings, get_store
from shopledger.core.config import Settings
from shopledger.core.errors import ValidationError
from shopledger.models.report_schemas import BusinessSummary
from shopledger.services.reports import build_summary
from shopledger.store.base import DocumentStore

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/summary", response_model=BusinessSummary)
async def business_summary(
    from_date: date | None = Query(None, description="First day included (YYYY-MM-DD)"),
    to_date: date | None = Query(None, description="Last day included (YYYY-MM-DD)"),
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """Revenue, debts, pending amounts, stock alerts and recent transactions."""
    if from_date and to_date and from_date > to_date:
        raise ValidationError(
            "from_date must not be after to_date",
            details={"from_date": str(from_date), "to_date": str(to_date)},
        )
    return await build_summary(
        store,
        start=from_date,
        end=to_date,
        low_stock_threshold=settings.low_stock_threshold,
    )
