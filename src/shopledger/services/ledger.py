"""Ledger projection: what each cached balance should be, derived from history.

Pure functions over in-memory record lists. No store access, no logging, no
mutation of the inputs.
"""

from collections.abc import Iterable
from decimal import Decimal

from shopledger.models.customer_schemas import CustomerRead
from shopledger.models.enums import EntityType, TransactionType
from shopledger.models.order_schemas import OrderRead
from shopledger.models.supplier_schemas import SupplierRead
from shopledger.models.transaction_schemas import TransactionRead

ZERO = Decimal("0")


def floor_balance(value: Decimal) -> Decimal:
    """Stored balances never go below zero; an overpayment is held as 0."""
    return max(ZERO, value)


def project_customer_balances(
    customers: Iterable[CustomerRead],
    orders: Iterable[OrderRead],
    transactions: Iterable[TransactionRead],
) -> dict[str, Decimal]:
    """
    Pending amount per known customer id.

    Unpaid order totals minus receipts. Orders and receipts pointing at
    unknown customers are skipped. Values can be negative; flooring happens
    only where a balance is compared or written back.
    """
    balances = {customer.id: ZERO for customer in customers}

    for order in orders:
        if not order.is_paid and order.customer_id in balances:
            balances[order.customer_id] += order.total

    for transaction in transactions:
        if (
            transaction.entity_type == EntityType.CUSTOMER.value
            and transaction.type == TransactionType.RECEIPT.value
            and transaction.entity_id in balances
        ):
            balances[transaction.entity_id] -= transaction.amount

    return balances


def project_supplier_balances(
    suppliers: Iterable[SupplierRead],
    transactions: Iterable[TransactionRead],
) -> dict[str, Decimal]:
    """
    Debt per known supplier id: expenses minus payments.

    Other transaction types against a supplier are ignored.
    """
    balances = {supplier.id: ZERO for supplier in suppliers}

    for transaction in transactions:
        if transaction.entity_type != EntityType.SUPPLIER.value:
            continue
        if transaction.entity_id not in balances:
            continue
        if transaction.type == TransactionType.EXPENSE.value:
            balances[transaction.entity_id] += transaction.amount
        elif transaction.type == TransactionType.PAYMENT.value:
            balances[transaction.entity_id] -= transaction.amount

    return balances
