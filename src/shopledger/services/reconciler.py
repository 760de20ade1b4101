"""Balance reconciliation: compare cached balances against their history.

The Bookkeeper adjusts Customer.pending_amount and Supplier.debt at write
time, but those adjustments are separate store round trips with no
transaction around them, so they drift. The Reconciler re-derives every
balance from orders and transactions, reports the drift together with
integrity defects, and can overwrite the stored balances.

Concurrency: validate() reads the four collections in four separate,
non-atomic calls, so a report can already be stale when it is returned.
fix_discrepancies() writes the balances it computed from that report. A
payment or order recorded between the read and the write is overwritten with
the stale value. Do not run fixes while the shop is taking orders or
recording payments.
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Protocol

from shopledger.core.errors import ConfirmationRequiredError
from shopledger.core.logging import get_logger
from shopledger.models.customer_schemas import CustomerRead
from shopledger.models.enums import EntityType, TransactionType
from shopledger.models.order_schemas import OrderRead
from shopledger.models.reconciliation_schemas import (
    BalanceCorrection,
    BalanceDiscrepancy,
    BalanceReport,
    DiscrepancySet,
    DuplicateIds,
    FixResult,
    PurgeResult,
    ReportSummary,
)
from shopledger.models.supplier_schemas import SupplierRead
from shopledger.models.transaction_schemas import TransactionRead
from shopledger.services.integrity import (
    find_duplicate_ids,
    find_orphaned_orders,
    find_orphaned_transactions,
)
from shopledger.services.ledger import (
    floor_balance,
    project_customer_balances,
    project_supplier_balances,
)
from shopledger.store.base import DocumentStore

logger = get_logger(__name__)

# Fixed: absorbs rounding noise from float-era documents
TOLERANCE = Decimal("0.01")
ZERO = Decimal("0")


class NamedRecord(Protocol):
    id: str
    name: str


def find_discrepancies(
    records: Iterable[NamedRecord],
    calculated: Mapping[str, Decimal],
    actual: Mapping[str, Decimal],
) -> list[BalanceDiscrepancy]:
    """Records whose stored balance is off from the floored projection by more than 0.01."""
    discrepancies = []
    for record in records:
        calculated_balance = calculated.get(record.id, ZERO)
        # difference is measured against the floored value, not the raw projection
        expected = floor_balance(calculated_balance)
        actual_balance = actual.get(record.id, ZERO)
        difference = actual_balance - expected
        if abs(difference) > TOLERANCE:
            discrepancies.append(
                BalanceDiscrepancy(
                    id=record.id,
                    name=record.name,
                    calculated=calculated_balance,
                    expected=expected,
                    actual=actual_balance,
                    difference=difference,
                )
            )
    return discrepancies


class Reconciler:
    """
    Validates and corrects cached balances for one store.

    Args:
        store: Document store to read from and write corrections to
        currency_symbol: Prefix for amounts in error messages
    """

    def __init__(self, store: DocumentStore, currency_symbol: str = "₹"):
        self.store = store
        self.currency_symbol = currency_symbol

    async def validate(self) -> BalanceReport:
        """Build a full BalanceReport. Reads only; safe to repeat."""
        customers = await self.store.customers.get_all()
        suppliers = await self.store.suppliers.get_all()
        orders = await self.store.orders.get_all()
        transactions = await self.store.transactions.get_all()

        logger.info(
            "reconciliation.loaded",
            customers=len(customers),
            suppliers=len(suppliers),
            orders=len(orders),
            transactions=len(transactions),
        )

        calculated_customers = project_customer_balances(customers, orders, transactions)
        calculated_suppliers = project_supplier_balances(suppliers, transactions)
        actual_customers = {customer.id: customer.pending_amount for customer in customers}
        actual_suppliers = {supplier.id: supplier.debt for supplier in suppliers}

        customer_discrepancies = find_discrepancies(
            customers, calculated_customers, actual_customers
        )
        supplier_discrepancies = find_discrepancies(
            suppliers, calculated_suppliers, actual_suppliers
        )

        self._log_detailed_findings(
            customers,
            suppliers,
            orders,
            transactions,
            calculated_customers,
            calculated_suppliers,
        )

        errors: list[str] = []
        for disc in customer_discrepancies:
            errors.append(
                f"Customer {disc.name} ({disc.id}): Expected balance {self._money(disc.expected)}, "
                f"actual {self._money(disc.actual)}, difference {self._money(disc.difference)}"
            )
        for disc in supplier_discrepancies:
            errors.append(
                f"Supplier {disc.name} ({disc.id}): Expected debt {self._money(disc.expected)}, "
                f"actual {self._money(disc.actual)}, difference {self._money(disc.difference)}"
            )

        orphaned_orders = find_orphaned_orders(customers, orders)
        for order in orphaned_orders:
            errors.append(
                f"Orphaned order {order.id}: references non-existent customer {order.customer_id}"
            )

        orphaned_transactions = find_orphaned_transactions(customers, suppliers, transactions)
        for transaction in orphaned_transactions:
            errors.append(
                f"Orphaned transaction {transaction.id}: references non-existent "
                f"{transaction.entity_type} {transaction.entity_id}"
            )

        duplicates = DuplicateIds(
            customers=find_duplicate_ids(customers),
            suppliers=find_duplicate_ids(suppliers),
            orders=find_duplicate_ids(orders),
            transactions=find_duplicate_ids(transactions),
        )
        for label, ids in (
            ("customer", duplicates.customers),
            ("supplier", duplicates.suppliers),
            ("order", duplicates.orders),
            ("transaction", duplicates.transactions),
        ):
            errors.extend(f"Duplicate {label} ID found: {duplicate_id}" for duplicate_id in ids)

        report = BalanceReport(
            is_valid=not errors,
            errors=errors,
            warnings=[],
            summary=ReportSummary(
                total_customers=len(customers),
                total_suppliers=len(suppliers),
                total_orders=len(orders),
                total_transactions=len(transactions),
                calculated_customer_balances=calculated_customers,
                calculated_supplier_balances=calculated_suppliers,
                actual_customer_balances=actual_customers,
                actual_supplier_balances=actual_suppliers,
                discrepancies=DiscrepancySet(
                    customers=customer_discrepancies,
                    suppliers=supplier_discrepancies,
                ),
                orphaned_orders=[order.id for order in orphaned_orders],
                orphaned_transactions=[transaction.id for transaction in orphaned_transactions],
                duplicate_ids=duplicates,
            ),
        )

        logger.info(
            "reconciliation.validated",
            is_valid=report.is_valid,
            error_count=len(errors),
            customer_discrepancies=len(customer_discrepancies),
            supplier_discrepancies=len(supplier_discrepancies),
            orphaned_orders=len(orphaned_orders),
            orphaned_transactions=len(orphaned_transactions),
        )
        return report

    async def fix_discrepancies(self) -> FixResult:
        """
        Overwrite every discrepant stored balance with its floored projection.

        Writes go out one at a time with no rollback; if one fails the
        exception propagates and the corrections already written stay. Never
        deletes anything, orphans included.
        """
        report = await self.validate()
        result = FixResult(report=report)

        for disc in report.summary.discrepancies.customers:
            corrected = floor_balance(disc.calculated)
            updated = await self.store.customers.update(disc.id, {"pending_amount": corrected})
            if updated is None:
                logger.warning("reconciliation.fix_target_missing", entity="customer", entity_id=disc.id)
                continue
            logger.info(
                "reconciliation.customer_fixed",
                customer_id=disc.id,
                previous=str(disc.actual),
                corrected=str(corrected),
            )
            result.customers.append(
                BalanceCorrection(id=disc.id, name=disc.name, previous=disc.actual, corrected=corrected)
            )

        for disc in report.summary.discrepancies.suppliers:
            corrected = floor_balance(disc.calculated)
            updated = await self.store.suppliers.update(disc.id, {"debt": corrected})
            if updated is None:
                logger.warning("reconciliation.fix_target_missing", entity="supplier", entity_id=disc.id)
                continue
            logger.info(
                "reconciliation.supplier_fixed",
                supplier_id=disc.id,
                previous=str(disc.actual),
                corrected=str(corrected),
            )
            result.suppliers.append(
                BalanceCorrection(id=disc.id, name=disc.name, previous=disc.actual, corrected=corrected)
            )

        logger.info("reconciliation.fixed", total_fixed=result.total_fixed)
        return result

    async def purge_orphans(self, confirm: bool = False) -> PurgeResult:
        """
        Permanently delete orphaned orders and transactions.

        Data is lost for good, so nothing is read or written unless confirm
        is True. Balances are not touched; run a validation afterwards.
        """
        if not confirm:
            raise ConfirmationRequiredError("purge_orphans")

        report = await self.validate()
        result = PurgeResult()

        # dict.fromkeys: an id duplicated within the orphans is deleted once
        for order_id in dict.fromkeys(report.summary.orphaned_orders):
            if await self.store.orders.delete(order_id):
                logger.warning("reconciliation.orphan_deleted", collection="orders", record_id=order_id)
                result.deleted_orders.append(order_id)

        for transaction_id in dict.fromkeys(report.summary.orphaned_transactions):
            if await self.store.transactions.delete(transaction_id):
                logger.warning(
                    "reconciliation.orphan_deleted",
                    collection="transactions",
                    record_id=transaction_id,
                )
                result.deleted_transactions.append(transaction_id)

        logger.info(
            "reconciliation.orphans_purged",
            deleted_orders=len(result.deleted_orders),
            deleted_transactions=len(result.deleted_transactions),
        )
        return result

    def _money(self, value: Decimal) -> str:
        return f"{self.currency_symbol}{value:.2f}"

    def _log_detailed_findings(
        self,
        customers: list[CustomerRead],
        suppliers: list[SupplierRead],
        orders: list[OrderRead],
        transactions: list[TransactionRead],
        calculated_customers: dict[str, Decimal],
        calculated_suppliers: dict[str, Decimal],
    ) -> None:
        """Per-entity breakdown at debug level, for tracing where a balance came from."""
        for customer in customers:
            customer_orders = [order for order in orders if order.customer_id == customer.id]
            unpaid = [order for order in customer_orders if not order.is_paid]
            receipts = [
                t
                for t in transactions
                if t.entity_type == EntityType.CUSTOMER.value
                and t.entity_id == customer.id
                and t.type == TransactionType.RECEIPT.value
            ]
            logger.debug(
                "reconciliation.customer_analysis",
                customer_id=customer.id,
                customer_name=customer.name,
                total_orders=len(customer_orders),
                unpaid_orders=len(unpaid),
                unpaid_amount=str(sum((order.total for order in unpaid), ZERO)),
                receipts=len(receipts),
                receipts_amount=str(sum((t.amount for t in receipts), ZERO)),
                calculated=str(calculated_customers.get(customer.id, ZERO)),
                actual=str(customer.pending_amount),
            )

        for supplier in suppliers:
            supplier_transactions = [
                t
                for t in transactions
                if t.entity_type == EntityType.SUPPLIER.value and t.entity_id == supplier.id
            ]
            expenses = [t for t in supplier_transactions if t.type == TransactionType.EXPENSE.value]
            payments = [t for t in supplier_transactions if t.type == TransactionType.PAYMENT.value]
            logger.debug(
                "reconciliation.supplier_analysis",
                supplier_id=supplier.id,
                supplier_name=supplier.name,
                total_transactions=len(supplier_transactions),
                expenses=len(expenses),
                expenses_amount=str(sum((t.amount for t in expenses), ZERO)),
                payments=len(payments),
                payments_amount=str(sum((t.amount for t in payments), ZERO)),
                calculated=str(calculated_suppliers.get(supplier.id, ZERO)),
                actual=str(supplier.debt),
            )

        totals = {}
        for kind in TransactionType:
            matching = [t for t in transactions if t.type == kind.value]
            totals[f"{kind.value}_count"] = len(matching)
            totals[f"{kind.value}_amount"] = str(sum((t.amount for t in matching), ZERO))
        logger.debug("reconciliation.transaction_summary", **totals)
