"""Referential integrity checks the store itself does not enforce."""

from collections.abc import Iterable, Sequence
from typing import Protocol

from shopledger.models.customer_schemas import CustomerRead
from shopledger.models.enums import EntityType
from shopledger.models.order_schemas import OrderRead
from shopledger.models.supplier_schemas import SupplierRead
from shopledger.models.transaction_schemas import TransactionRead


class HasId(Protocol):
    id: str


def find_orphaned_orders(
    customers: Iterable[CustomerRead], orders: Iterable[OrderRead]
) -> list[OrderRead]:
    """Orders whose customer_id matches no customer, in input order."""
    known = {customer.id for customer in customers}
    return [order for order in orders if order.customer_id not in known]


def find_orphaned_transactions(
    customers: Iterable[CustomerRead],
    suppliers: Iterable[SupplierRead],
    transactions: Iterable[TransactionRead],
) -> list[TransactionRead]:
    """
    Customer or supplier transactions pointing at an unknown entity.

    Transactions with any other entity_type are not checked.
    """
    known = {
        EntityType.CUSTOMER.value: {customer.id for customer in customers},
        EntityType.SUPPLIER.value: {supplier.id for supplier in suppliers},
    }
    return [
        transaction
        for transaction in transactions
        if transaction.entity_type in known
        and transaction.entity_id not in known[transaction.entity_type]
    ]


def find_duplicate_ids(records: Sequence[HasId]) -> list[str]:
    """
    Every id occurrence after its first.

    ["A", "B", "A", "A"] gives ["A", "A"]: one entry per repeat, not per
    duplicated id.
    """
    seen: set[str] = set()
    duplicates = []
    for record in records:
        if record.id in seen:
            duplicates.append(record.id)
        else:
            seen.add(record.id)
    return duplicates
