"""Tests for the SQLAlchemy document store."""

from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.errors import DatabaseError
from shopledger.models.customer_schemas import CustomerCreate
from shopledger.models.enums import ItemType, OrderStatus
from shopledger.models.order_schemas import OrderCreate, OrderItemCreate
from shopledger.services.bookkeeping import Bookkeeper
from shopledger.services.reconciler import Reconciler
from shopledger.store.sql import SqlStore
from tests.factories import CustomerFactory, OrderFactory, SupplierFactory, TransactionFactory


class TestSqlCollection:
    """CRUD against SQLite."""

    async def test_create_and_get(self, sql_store: SqlStore):
        customer = await sql_store.customers.create(CustomerCreate(name="Hotel Aryaas", contact="98400 11111"))

        fetched = await sql_store.customers.get_by_id(customer.id)

        assert fetched.name == "Hotel Aryaas"
        assert fetched.pending_amount == Decimal("0")
        assert fetched.created_at is not None

    async def test_update_and_delete(self, sql_store: SqlStore):
        supplier = await SupplierFactory.create(sql_store, debt=Decimal("10"))

        updated = await sql_store.suppliers.update(supplier.id, {"debt": Decimal("25.50")})
        assert updated.debt == Decimal("25.50")

        assert await sql_store.suppliers.delete(supplier.id) is True
        assert await sql_store.suppliers.get_by_id(supplier.id) is None
        assert await sql_store.suppliers.delete(supplier.id) is False

    async def test_unknown_ids(self, sql_store: SqlStore):
        assert await sql_store.orders.get_by_id("missing") is None
        assert await sql_store.orders.update("missing", {"status": "paid"}) is None

    async def test_order_items_round_trip_through_json(self, sql_store: SqlStore):
        customer = await CustomerFactory.create(sql_store)

        order = await Bookkeeper(sql_store).create_order(
            OrderCreate(
                customer_id=customer.id,
                items=[OrderItemCreate(type=ItemType.LEG_PIECE, quantity=Decimal("1.5"), rate=Decimal("220"))],
            )
        )

        [item] = (await sql_store.orders.get_by_id(order.id)).items
        assert item.type == "leg-piece"
        assert item.quantity == Decimal("1.5")
        assert item.rate == Decimal("220")

    async def test_get_all_orders_by_date(self, sql_store: SqlStore):
        customer = await CustomerFactory.create(sql_store)
        late = await OrderFactory.create(sql_store, customer_id=customer.id, date=datetime(2024, 6, 2))
        early = await OrderFactory.create(sql_store, customer_id=customer.id, date=datetime(2024, 6, 1))

        assert [o.id for o in await sql_store.orders.get_all()] == [early.id, late.id]

    async def test_unmapped_fields_dropped(self, sql_store: SqlStore):
        customer = await sql_store.customers.create({"name": "Hotel", "type": "hotel", "nickname": "H"})
        assert customer.name == "Hotel"

    async def test_sqlalchemy_errors_become_database_errors(self):
        session = AsyncMock(spec=AsyncSession)
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(DatabaseError) as exc_info:
            await SqlStore(session).customers.get_all()

        assert exc_info.value.details == {"collection": "customers", "operation": "get_all"}


class TestReconcileOverSql:
    """The reconciler works the same over SQL."""

    async def test_validate_and_fix(self, sql_store: SqlStore):
        customer = await CustomerFactory.create(sql_store, name="Hotel", pending_amount=Decimal("1000"))
        await OrderFactory.create(sql_store, customer_id=customer.id, total=Decimal("1000"))
        await OrderFactory.create(sql_store, customer_id=customer.id, total=Decimal("80"), status=OrderStatus.PAID.value)
        await TransactionFactory.create(sql_store, entity_id=customer.id, amount=Decimal("300"))
        await OrderFactory.create(sql_store, customer_id="ghost")

        reconciler = Reconciler(sql_store)
        report = await reconciler.validate()

        assert [d.calculated for d in report.summary.discrepancies.customers] == [Decimal("700")]
        assert len(report.summary.orphaned_orders) == 1

        await reconciler.fix_discrepancies()
        assert (await sql_store.customers.get_by_id(customer.id)).pending_amount == Decimal("700")

        purged = await reconciler.purge_orphans(confirm=True)
        assert len(purged.deleted_orders) == 1
        assert (await reconciler.validate()).is_valid is True
