"""Tests for balance validation, correction and orphan purging."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from shopledger.core.errors import ConfirmationRequiredError, DatabaseError
from shopledger.services.reconciler import Reconciler
from shopledger.store.memory import MemoryStore
from tests.factories import (
    CustomerFactory,
    OrderFactory,
    SupplierFactory,
    TransactionFactory,
)


class TestValidateScenarios:
    """End-to-end validation over a seeded store."""

    async def test_matching_customer_balance_is_valid(self, memory_store: MemoryStore):
        """One unpaid order of 500 and a stored balance of 500."""
        c1 = await CustomerFactory.create(memory_store, name="C1", pending_amount=Decimal("500"))
        await OrderFactory.create(memory_store, customer_id=c1.id, total=Decimal("500"))

        report = await Reconciler(memory_store).validate()

        assert report.is_valid is True
        assert report.errors == []
        assert report.summary.discrepancies.customers == []
        assert report.summary.calculated_customer_balances[c1.id] == Decimal("500")

    async def test_stale_customer_balance_is_reported_and_fixed(self, memory_store: MemoryStore):
        """Unpaid order of 1000, receipt of 300, stored balance still 1000."""
        c2 = await CustomerFactory.create(memory_store, name="C2", pending_amount=Decimal("1000"))
        await OrderFactory.create(memory_store, customer_id=c2.id, total=Decimal("1000"))
        await TransactionFactory.create(memory_store, entity_id=c2.id, amount=Decimal("300"))

        reconciler = Reconciler(memory_store)
        report = await reconciler.validate()

        assert report.is_valid is False
        [disc] = report.summary.discrepancies.customers
        assert disc.id == c2.id
        assert disc.calculated == Decimal("700")
        assert disc.actual == Decimal("1000")
        assert disc.difference == Decimal("300")
        assert report.errors == [
            f"Customer C2 ({c2.id}): Expected balance ₹700.00, actual ₹1000.00, difference ₹300.00"
        ]

        result = await reconciler.fix_discrepancies()

        assert result.total_fixed == 1
        assert (await memory_store.customers.get_by_id(c2.id)).pending_amount == Decimal("700")

    async def test_settled_supplier_is_valid(self, memory_store: MemoryStore):
        """Expenses of 2000 fully paid, stored debt 0."""
        s1 = await SupplierFactory.create(memory_store, name="S1")
        for amount in ("1200", "800"):
            await TransactionFactory.create(
                memory_store, entity_id=s1.id, entity_type="supplier", type="expense", amount=Decimal(amount)
            )
        for amount in ("1500", "500"):
            await TransactionFactory.create(
                memory_store, entity_id=s1.id, entity_type="supplier", type="payment", amount=Decimal(amount)
            )

        report = await Reconciler(memory_store).validate()

        assert report.is_valid is True
        assert report.summary.calculated_supplier_balances[s1.id] == Decimal("0")

    async def test_order_for_missing_customer_is_one_orphan_error(self, memory_store: MemoryStore):
        order = await OrderFactory.create(memory_store, customer_id="ghost")

        report = await Reconciler(memory_store).validate()

        assert report.is_valid is False
        assert report.errors == [
            f"Orphaned order {order.id}: references non-existent customer ghost"
        ]
        assert report.summary.orphaned_orders == [order.id]
        assert "ghost" not in report.summary.calculated_customer_balances


class TestValidateTolerance:
    """Differences up to 0.01 are rounding noise."""

    async def test_difference_of_exactly_one_paisa_not_reported(self, memory_store: MemoryStore):
        c = await CustomerFactory.create(memory_store, pending_amount=Decimal("100.01"))
        await OrderFactory.create(memory_store, customer_id=c.id, total=Decimal("100.00"))

        report = await Reconciler(memory_store).validate()

        assert report.is_valid is True

    async def test_difference_just_over_tolerance_reported(self, memory_store: MemoryStore):
        memory_store.seed("customers", [{"id": "c1", "name": "Hotel", "pending_amount": "100.011"}])
        memory_store.seed("orders", [{"id": "o1", "customer_id": "c1", "total": 100, "status": "pending"}])

        report = await Reconciler(memory_store).validate()

        assert report.is_valid is False
        assert report.summary.discrepancies.customers[0].difference == Decimal("0.011")

    async def test_float_totals_compare_exactly(self, memory_store: MemoryStore):
        """0.1 + 0.2 stored as floats still matches a stored 0.3."""
        memory_store.seed("customers", [{"id": "c1", "name": "Hotel", "pending_amount": 0.3}])
        memory_store.seed(
            "orders",
            [
                {"id": "o1", "customer_id": "c1", "total": 0.1},
                {"id": "o2", "customer_id": "c1", "total": 0.2},
            ],
        )

        report = await Reconciler(memory_store).validate()

        assert report.is_valid is True


class TestValidateFlooring:
    """Overpayments floor the expected balance at zero."""

    async def test_overpaid_customer_with_zero_balance_is_valid(self, memory_store: MemoryStore):
        c = await CustomerFactory.create(memory_store, pending_amount=Decimal("0"))
        await OrderFactory.create(memory_store, customer_id=c.id, total=Decimal("100"))
        await TransactionFactory.create(memory_store, entity_id=c.id, amount=Decimal("300"))

        report = await Reconciler(memory_store).validate()

        assert report.is_valid is True
        assert report.summary.calculated_customer_balances[c.id] == Decimal("-200")

    async def test_overpaid_customer_with_stale_balance(self, memory_store: MemoryStore):
        c = await CustomerFactory.create(memory_store, name="Mess", pending_amount=Decimal("50"))
        await TransactionFactory.create(memory_store, entity_id=c.id, amount=Decimal("80"))

        reconciler = Reconciler(memory_store)
        report = await reconciler.validate()
        [disc] = report.summary.discrepancies.customers

        assert disc.calculated == Decimal("-80")
        assert disc.expected == Decimal("0")
        assert disc.difference == Decimal("50")

        await reconciler.fix_discrepancies()
        assert (await memory_store.customers.get_by_id(c.id)).pending_amount == Decimal("0")

    async def test_overpaid_supplier_fixed_to_zero(self, memory_store: MemoryStore):
        s = await SupplierFactory.create(memory_store, name="Farm", debt=Decimal("100"))
        await TransactionFactory.create(
            memory_store, entity_id=s.id, entity_type="supplier", type="payment", amount=Decimal("40")
        )

        reconciler = Reconciler(memory_store)
        report = await reconciler.validate()

        assert report.errors == [
            f"Supplier Farm ({s.id}): Expected debt ₹0.00, actual ₹100.00, difference ₹100.00"
        ]

        result = await reconciler.fix_discrepancies()

        assert [c.corrected for c in result.suppliers] == [Decimal("0")]
        assert (await memory_store.suppliers.get_by_id(s.id)).debt == Decimal("0")


class TestValidateIntegrity:
    """Duplicates, orphans and error ordering."""

    async def test_repeated_customer_id_reported_per_repeat(self, memory_store: MemoryStore):
        memory_store.seed(
            "customers",
            [
                {"id": "A", "name": "One"},
                {"id": "B", "name": "Two"},
                {"id": "A", "name": "Three"},
                {"id": "A", "name": "Four"},
            ],
        )

        report = await Reconciler(memory_store).validate()

        assert report.errors.count("Duplicate customer ID found: A") == 2
        assert report.summary.duplicate_ids.customers == ["A", "A"]

    async def test_orphaned_transactions(self, memory_store: MemoryStore):
        t = await TransactionFactory.create(
            memory_store, entity_id="gone", entity_type="supplier", type="payment"
        )

        report = await Reconciler(memory_store).validate()

        assert report.errors == [
            f"Orphaned transaction {t.id}: references non-existent supplier gone"
        ]

    async def test_error_order(self, memory_store: MemoryStore):
        memory_store.seed("customers", [{"id": "c1", "name": "Hotel", "pending_amount": 10}])
        memory_store.seed("suppliers", [{"id": "s1", "name": "Farm", "debt": 10}])
        memory_store.seed("orders", [{"id": "o1", "customer_id": "x", "total": 5}] * 2)
        memory_store.seed(
            "transactions",
            [{"id": "t1", "entity_id": "y", "entity_type": "customer", "type": "receipt", "amount": 5}],
        )

        report = await Reconciler(memory_store).validate()

        assert [error.split(" ")[0] for error in report.errors] == [
            "Customer",
            "Supplier",
            "Orphaned",
            "Orphaned",
            "Orphaned",
            "Duplicate",
        ]
        assert report.errors[-1] == "Duplicate order ID found: o1"

    async def test_malformed_documents_do_not_abort(self, memory_store: MemoryStore):
        memory_store.seed("customers", [{"id": "c1", "name": "Hotel", "pending_amount": None}])
        memory_store.seed(
            "orders",
            [
                {"id": "o1", "customer_id": "c1", "total": "n/a", "status": None, "date": "garbage"},
                {"id": "o2", "customer_id": "c1", "total": "25.5", "status": "PAID"},
            ],
        )

        report = await Reconciler(memory_store).validate()

        assert report.is_valid is True
        assert report.summary.calculated_customer_balances["c1"] == Decimal("0")

    async def test_null_references_and_names_are_reported_not_raised(self, memory_store: MemoryStore):
        memory_store.seed(
            "customers",
            [
                {"id": "c1", "name": None, "pending_amount": 0},
                {"id": "c2", "name": "Lakshmi", "contact": 9876543210, "pending_amount": 0},
            ],
        )
        memory_store.seed(
            "orders",
            [
                {"id": "o1", "customer_id": None, "total": 5},
                {"id": 42, "customer_id": "c2", "total": 10, "status": "paid"},
            ],
        )
        memory_store.seed(
            "transactions",
            [{"id": "t1", "entity_id": None, "entity_type": "customer", "type": "receipt", "amount": 3}],
        )

        report = await Reconciler(memory_store).validate()

        assert report.errors == [
            "Orphaned order o1: references non-existent customer ",
            "Orphaned transaction t1: references non-existent customer ",
        ]
        assert report.summary.orphaned_orders == ["o1"]
        assert report.summary.total_orders == 2
        customers = {c.id: c for c in await memory_store.customers.get_all()}
        assert customers["c1"].name == ""
        assert customers["c2"].contact == "9876543210"

    async def test_custom_currency_symbol(self, memory_store: MemoryStore):
        c = await CustomerFactory.create(memory_store, name="Hotel", pending_amount=Decimal("5"))

        report = await Reconciler(memory_store, currency_symbol="Rs.").validate()

        assert report.errors == [
            f"Customer Hotel ({c.id}): Expected balance Rs.0.00, actual Rs.5.00, difference Rs.5.00"
        ]


class TestValidateProperties:
    """Repeatability and closure."""

    async def _messy_store(self, store: MemoryStore) -> None:
        c1 = await CustomerFactory.create(store, name="Hotel A", pending_amount=Decimal("999"))
        c2 = await CustomerFactory.create(store, name="Hotel B", pending_amount=Decimal("0"))
        s1 = await SupplierFactory.create(store, name="Farm", debt=Decimal("12.5"))
        await OrderFactory.create(store, customer_id=c1.id, total=Decimal("400"))
        await OrderFactory.create(store, customer_id=c2.id, total=Decimal("250.75"))
        await OrderFactory.create(store, customer_id=c2.id, total=Decimal("90"), status="paid")
        await TransactionFactory.create(store, entity_id=c1.id, amount=Decimal("100"))
        await TransactionFactory.create(
            store, entity_id=s1.id, entity_type="supplier", type="expense", amount=Decimal("3000")
        )
        await OrderFactory.create(store, customer_id="ghost")

    async def test_validate_is_idempotent(self, memory_store: MemoryStore):
        await self._messy_store(memory_store)
        reconciler = Reconciler(memory_store)

        first = await reconciler.validate()
        second = await reconciler.validate()

        assert first == second

    async def test_no_discrepancies_after_fix(self, memory_store: MemoryStore):
        await self._messy_store(memory_store)
        reconciler = Reconciler(memory_store)

        result = await reconciler.fix_discrepancies()
        after = await reconciler.validate()

        assert result.total_fixed == 3
        assert after.summary.discrepancies.customers == []
        assert after.summary.discrepancies.suppliers == []
        # Orphans are reported, never silently removed
        assert len(after.summary.orphaned_orders) == 1
        assert after.is_valid is False

    async def test_fix_on_clean_store_changes_nothing(self, memory_store: MemoryStore):
        c = await CustomerFactory.create(memory_store, pending_amount=Decimal("10"))
        await OrderFactory.create(memory_store, customer_id=c.id, total=Decimal("10"))
        before = memory_store.customers.raw()

        result = await Reconciler(memory_store).fix_discrepancies()

        assert result.total_fixed == 0
        assert memory_store.customers.raw() == before


class TestPurgeOrphans:
    """Orphan deletion is a separate, confirmed operation."""

    async def test_requires_confirmation(self, memory_store: MemoryStore):
        await OrderFactory.create(memory_store, customer_id="ghost")
        memory_store.orders.get_all = AsyncMock()

        with pytest.raises(ConfirmationRequiredError) as exc_info:
            await Reconciler(memory_store).purge_orphans()

        assert exc_info.value.status_code == 400
        memory_store.orders.get_all.assert_not_awaited()

    async def test_deletes_orphans_only(self, memory_store: MemoryStore):
        c = await CustomerFactory.create(memory_store)
        kept_order = await OrderFactory.create(memory_store, customer_id=c.id)
        orphan_order = await OrderFactory.create(memory_store, customer_id="ghost")
        kept_txn = await TransactionFactory.create(memory_store, entity_id=c.id)
        orphan_txn = await TransactionFactory.create(
            memory_store, entity_id="gone", entity_type="supplier", type="expense"
        )

        result = await Reconciler(memory_store).purge_orphans(confirm=True)

        assert result.deleted_orders == [orphan_order.id]
        assert result.deleted_transactions == [orphan_txn.id]
        assert [o.id for o in await memory_store.orders.get_all()] == [kept_order.id]
        assert [t.id for t in await memory_store.transactions.get_all()] == [kept_txn.id]

    async def test_fix_never_deletes(self, memory_store: MemoryStore):
        await OrderFactory.create(memory_store, customer_id="ghost")

        await Reconciler(memory_store).fix_discrepancies()

        assert len(await memory_store.orders.get_all()) == 1


class TestStoreFailures:
    """Store errors abort the run instead of producing a partial report."""

    async def test_read_failure_propagates(self, memory_store: MemoryStore):
        memory_store.transactions.get_all = AsyncMock(side_effect=DatabaseError("transactions.get_all failed"))

        with pytest.raises(DatabaseError):
            await Reconciler(memory_store).validate()

    async def test_write_failure_keeps_earlier_corrections(self, memory_store: MemoryStore):
        memory_store.seed(
            "customers",
            [
                {"id": "c1", "name": "First", "pending_amount": 10},
                {"id": "c2", "name": "Second", "pending_amount": 20},
            ],
        )
        original_update = memory_store.customers.update
        calls = []

        async def failing_update(record_id, data):
            calls.append(record_id)
            if record_id == "c2":
                raise DatabaseError("customers.update failed")
            return await original_update(record_id, data)

        memory_store.customers.update = failing_update

        with pytest.raises(DatabaseError):
            await Reconciler(memory_store).fix_discrepancies()

        assert calls == ["c1", "c2"]
        assert (await memory_store.customers.get_by_id("c1")).pending_amount == Decimal("0")
        assert (await memory_store.customers.get_by_id("c2")).pending_amount == Decimal("20")
