"""Tests for the REST API over an in-memory store."""

from decimal import Decimal

from httpx import AsyncClient

from tests.factories import CustomerFactory, InventoryFactory, OrderFactory, SupplierFactory


class TestCustomerEndpoints:
    """Customer CRUD and payments."""

    async def test_create_and_list(self, client: AsyncClient):
        response = await client.post("/customers", json={"name": "Hotel Saravana", "type": "hotel"})

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Hotel Saravana"
        assert Decimal(body["pending_amount"]) == Decimal("0")

        listed = await client.get("/customers")
        assert [c["id"] for c in listed.json()] == [body["id"]]

    async def test_invalid_name_rejected(self, client: AsyncClient):
        response = await client.post("/customers", json={"name": "<b>bad</b>"})
        assert response.status_code == 422

    async def test_get_unknown_customer(self, client: AsyncClient):
        response = await client.get("/customers/missing")

        assert response.status_code == 404
        assert response.json() == {
            "code": "NOT_FOUND",
            "message": "Customer with ID missing not found",
            "details": {"resource": "Customer", "resource_id": "missing"},
        }

    async def test_partial_update(self, client: AsyncClient):
        customer = await CustomerFactory.create(client.store, contact="98400 11111")

        response = await client.put(f"/customers/{customer.id}", json={"name": "Hotel Renamed"})

        assert response.status_code == 200
        assert response.json()["name"] == "Hotel Renamed"
        assert response.json()["contact"] == "98400 11111"

    async def test_delete(self, client: AsyncClient):
        customer = await CustomerFactory.create(client.store)

        assert (await client.delete(f"/customers/{customer.id}")).status_code == 204
        assert (await client.delete(f"/customers/{customer.id}")).status_code == 404

    async def test_payment(self, client: AsyncClient):
        customer = await CustomerFactory.create(client.store, name="Hotel", pending_amount=Decimal("500"))

        response = await client.post(f"/customers/{customer.id}/payment", json={"amount": "200"})

        assert response.status_code == 201
        assert response.json()["type"] == "receipt"
        assert response.json()["description"] == "Payment from customer: Hotel"
        assert (await client.store.customers.get_by_id(customer.id)).pending_amount == Decimal("300")

    async def test_zero_payment_rejected(self, client: AsyncClient):
        customer = await CustomerFactory.create(client.store)

        response = await client.post(f"/customers/{customer.id}/payment", json={"amount": "0"})

        assert response.status_code == 422


class TestSupplierEndpoints:
    """Supplier CRUD, payments and stock purchases."""

    async def test_create_supplier(self, client: AsyncClient):
        response = await client.post("/suppliers", json={"name": "Sri Murugan Poultry", "debt": "150.00"})

        assert response.status_code == 201
        assert Decimal(response.json()["debt"]) == Decimal("150.00")

    async def test_payment_and_stock(self, client: AsyncClient):
        supplier = await SupplierFactory.create(client.store, debt=Decimal("100"))

        stock = await client.post(
            f"/suppliers/{supplier.id}/stock",
            json={"type": "chicken", "quantity": "10", "rate": "150"},
        )
        payment = await client.post(f"/suppliers/{supplier.id}/payment", json={"amount": "600"})

        assert stock.status_code == 201
        assert stock.json()["type"] == "expense"
        assert payment.status_code == 201
        assert (await client.store.suppliers.get_by_id(supplier.id)).debt == Decimal("1000")
        [item] = await client.store.inventory.get_all()
        assert item.quantity == Decimal("10")

    async def test_stock_for_unknown_supplier(self, client: AsyncClient):
        response = await client.post(
            "/suppliers/missing/stock",
            json={"type": "chicken", "quantity": "1", "rate": "150"},
        )
        assert response.status_code == 404
        assert await client.store.inventory.get_all() == []


class TestInventoryEndpoints:
    """Inventory CRUD."""

    async def test_crud(self, client: AsyncClient):
        created = await client.post("/inventory", json={"type": "goat", "quantity": "12", "rate": "650"})
        item_id = created.json()["id"]

        updated = await client.put(f"/inventory/{item_id}", json={"quantity": "-2"})

        assert created.status_code == 201
        assert Decimal(updated.json()["quantity"]) == Decimal("-2")
        assert (await client.delete(f"/inventory/{item_id}")).status_code == 204
        assert (await client.get(f"/inventory/{item_id}")).status_code == 404

    async def test_unknown_item_type_rejected(self, client: AsyncClient):
        response = await client.post("/inventory", json={"type": "fish", "quantity": "1"})
        assert response.status_code == 422


class TestOrderEndpoints:
    """Orders move customer balances."""

    async def test_create_pay_and_filter(self, client: AsyncClient):
        customer = await CustomerFactory.create(client.store)
        other = await CustomerFactory.create(client.store, name="Other")
        await OrderFactory.create(client.store, customer_id=other.id)
        await InventoryFactory.create(client.store, type="boneless", quantity=Decimal("5"))

        created = await client.post(
            "/orders",
            json={
                "customer_id": customer.id,
                "items": [{"type": "boneless", "quantity": "2", "rate": "320"}],
            },
        )
        order_id = created.json()["id"]

        assert created.status_code == 201
        assert Decimal(created.json()["total"]) == Decimal("640")
        assert (await client.store.customers.get_by_id(customer.id)).pending_amount == Decimal("640")

        paid = await client.put(f"/orders/{order_id}", json={"status": "paid"})
        assert paid.json()["status"] == "paid"
        assert (await client.store.customers.get_by_id(customer.id)).pending_amount == Decimal("0")

        filtered = await client.get("/orders", params={"customer_id": customer.id})
        assert [o["id"] for o in filtered.json()] == [order_id]

    async def test_order_needs_items(self, client: AsyncClient):
        customer = await CustomerFactory.create(client.store)

        response = await client.post("/orders", json={"customer_id": customer.id, "items": []})

        assert response.status_code == 422

    async def test_order_for_unknown_customer(self, client: AsyncClient):
        response = await client.post(
            "/orders",
            json={"customer_id": "ghost", "items": [{"type": "chicken", "quantity": "1", "rate": "180"}]},
        )
        assert response.status_code == 404

    async def test_delete_order(self, client: AsyncClient):
        customer = await CustomerFactory.create(client.store)
        order = await OrderFactory.create(client.store, customer_id=customer.id)

        assert (await client.delete(f"/orders/{order.id}")).status_code == 204
        assert (await client.get(f"/orders/{order.id}")).status_code == 404


class TestTransactionEndpoints:
    """Ledger entries."""

    async def test_record_and_filter(self, client: AsyncClient):
        supplier = await SupplierFactory.create(client.store)

        created = await client.post(
            "/transactions",
            json={
                "entity_id": supplier.id,
                "entity_type": "supplier",
                "type": "expense",
                "amount": "900",
                "description": "Weekly <i>stock</i>",
            },
        )

        assert created.status_code == 201
        assert created.json()["description"] == "Weekly stock"
        assert (await client.store.suppliers.get_by_id(supplier.id)).debt == Decimal("900")

        filtered = await client.get("/transactions", params={"entity_id": supplier.id})
        assert len(filtered.json()) == 1
        assert (await client.get("/transactions", params={"entity_id": "nobody"})).json() == []

        fetched = await client.get(f"/transactions/{created.json()['id']}")
        assert fetched.status_code == 200


class TestReconciliationEndpoints:
    """Report, fix and purge over HTTP."""

    async def test_report_fix_purge(self, client: AsyncClient):
        customer = await CustomerFactory.create(client.store, name="Hotel", pending_amount=Decimal("999"))
        await OrderFactory.create(client.store, customer_id=customer.id, total=Decimal("400"))
        await OrderFactory.create(client.store, customer_id="ghost")

        report = await client.get("/reconciliation/report")
        assert report.status_code == 200
        assert report.json()["is_valid"] is False
        assert len(report.json()["errors"]) == 2

        fixed = await client.post("/reconciliation/fix")
        assert fixed.json()["total_fixed"] == 1
        assert (await client.store.customers.get_by_id(customer.id)).pending_amount == Decimal("400")

        refused = await client.post("/reconciliation/orphans/purge")
        assert refused.status_code == 400
        assert refused.json()["code"] == "CONFIRMATION_REQUIRED"
        assert len(await client.store.orders.get_all()) == 2

        purged = await client.post("/reconciliation/orphans/purge", params={"confirm": "true"})
        assert purged.status_code == 200
        assert len(purged.json()["deleted_orders"]) == 1

        assert (await client.get("/reconciliation/report")).json()["is_valid"] is True
