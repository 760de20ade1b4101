"""Business summary for the dashboard."""

from datetime import date, datetime
from decimal import Decimal

from shopledger.core.logging import get_logger
from shopledger.core.validators import in_date_range
from shopledger.models.report_schemas import BusinessSummary
from shopledger.models.transaction_schemas import TransactionRead
from shopledger.store.base import DocumentStore

logger = get_logger(__name__)

ZERO = Decimal("0")
RECENT_TRANSACTIONS = 10


def _recency_key(transaction: TransactionRead) -> tuple[bool, datetime]:
    # Undated transactions sort after every dated one
    return (transaction.date is not None, transaction.date or datetime.min)


async def build_summary(
    store: DocumentStore,
    start: date | None = None,
    end: date | None = None,
    low_stock_threshold: Decimal = Decimal("10"),
) -> BusinessSummary:
    """
    Totals across the shop.

    Revenue sums order totals dated inside [start, end]. Debt and pending
    totals are the cached balances as stored, not re-derived.
    """
    orders = await store.orders.get_all()
    suppliers = await store.suppliers.get_all()
    customers = await store.customers.get_all()
    inventory = await store.inventory.get_all()
    transactions = await store.transactions.get_all()

    revenue = sum(
        (order.total for order in orders if in_date_range(order.date, start, end)),
        ZERO,
    )
    out_of_stock = [item for item in inventory if item.is_negative]
    low_stock = [
        item for item in inventory if not item.is_negative and item.quantity < low_stock_threshold
    ]
    dated = [t for t in transactions if in_date_range(t.date, start, end)]
    recent = sorted(dated, key=_recency_key, reverse=True)[:RECENT_TRANSACTIONS]

    summary = BusinessSummary(
        from_date=start,
        to_date=end,
        total_revenue=revenue,
        total_supplier_debt=sum((supplier.debt for supplier in suppliers), ZERO),
        total_customer_pending=sum((customer.pending_amount for customer in customers), ZERO),
        total_orders=len(orders),
        total_customers=len(customers),
        total_suppliers=len(suppliers),
        total_inventory_items=len(inventory),
        low_stock_count=len(low_stock),
        out_of_stock_count=len(out_of_stock),
        low_stock_items=low_stock,
        out_of_stock_items=out_of_stock,
        recent_transactions=recent,
    )

    logger.info(
        "report.summary_built",
        from_date=str(start) if start else None,
        to_date=str(end) if end else None,
        total_revenue=str(revenue),
        low_stock_count=len(low_stock),
        out_of_stock_count=len(out_of_stock),
    )
    return summary
