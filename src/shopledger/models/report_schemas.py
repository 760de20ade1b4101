"""Pydantic schemas for the business summary report."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from shopledger.models.inventory_schemas import InventoryRead
from shopledger.models.transaction_schemas import TransactionRead


class BusinessSummary(BaseModel):
    """Dashboard totals. Revenue counts orders inside the optional date range."""

    from_date: date | None = None
    to_date: date | None = None
    total_revenue: Decimal
    total_supplier_debt: Decimal
    total_customer_pending: Decimal
    total_orders: int
    total_customers: int
    total_suppliers: int
    total_inventory_items: int
    low_stock_count: int
    out_of_stock_count: int
    low_stock_items: list[InventoryRead] = Field(default_factory=list)
    out_of_stock_items: list[InventoryRead] = Field(
        default_factory=list, description="Items with negative stock (oversold)"
    )
    recent_transactions: list[TransactionRead] = Field(default_factory=list)
