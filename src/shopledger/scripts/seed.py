"""Seed script for shopledger demo data."""

import asyncio
import random
import sys
from decimal import Decimal

from shopledger.core.db import AsyncSessionLocal
from shopledger.core.errors import AppError
from shopledger.core.logging import get_logger
from shopledger.models import (
    CustomerCreate,
    CustomerRead,
    CustomerType,
    ItemType,
    OrderCreate,
    OrderItemCreate,
    OrderStatus,
    SupplierCreate,
    SupplierRead,
)
from shopledger.services.bookkeeping import Bookkeeper
from shopledger.store.base import DocumentStore
from shopledger.store.sql import SqlStore

logger = get_logger(__name__)

CUSTOMERS = [
    ("Hotel Saravana", CustomerType.HOTEL, "9840012345"),
    ("Annapoorna Mess", CustomerType.HOTEL, "9840023456"),
    ("Ravi Kumar", CustomerType.RANDOM, None),
    ("Lakshmi", CustomerType.RANDOM, "9840034567"),
]

SUPPLIERS = [
    ("Sri Murugan Poultry", "9840045678"),
    ("Karthik Goat Farm", "9840056789"),
]

# (type, opening stock kg, rate per kg)
STOCK = [
    (ItemType.CHICKEN, Decimal("40"), Decimal("180")),
    (ItemType.GOAT, Decimal("15"), Decimal("650")),
    (ItemType.BONELESS, Decimal("8"), Decimal("320")),
    (ItemType.LEG_PIECE, Decimal("12"), Decimal("220")),
]


async def seed_customers(store: DocumentStore) -> list[CustomerRead]:
    existing = await store.customers.get_all()
    if existing:
        print("ℹ️  Customers already exist, skipping...")
        return existing

    customers = []
    for name, customer_type, contact in CUSTOMERS:
        customers.append(
            await store.customers.create(
                CustomerCreate(name=name, type=customer_type, contact=contact)
            )
        )
    print(f"✅ Created {len(customers)} customers")
    return customers


async def seed_suppliers(store: DocumentStore) -> list[SupplierRead]:
    existing = await store.suppliers.get_all()
    if existing:
        print("ℹ️  Suppliers already exist, skipping...")
        return existing

    suppliers = []
    for name, contact in SUPPLIERS:
        suppliers.append(await store.suppliers.create(SupplierCreate(name=name, contact=contact)))
    print(f"✅ Created {len(suppliers)} suppliers")
    return suppliers


async def seed_stock(bookkeeper: Bookkeeper, suppliers: list[SupplierRead]) -> int:
    if await bookkeeper.store.inventory.get_all():
        print("ℹ️  Inventory already exists, skipping...")
        return 0

    for item_type, quantity, rate in STOCK:
        supplier = random.choice(suppliers)
        await bookkeeper.record_stock_purchase(supplier.id, item_type, quantity, rate)
    print(f"✅ Stocked {len(STOCK)} item types")
    return len(STOCK)


async def seed_orders(bookkeeper: Bookkeeper, customers: list[CustomerRead]) -> int:
    if await bookkeeper.store.orders.get_all():
        print("ℹ️  Orders already exist, skipping...")
        return 0

    count = 0
    for customer in customers:
        for _ in range(random.randint(1, 3)):
            item_type, _, rate = random.choice(STOCK)
            quantity = Decimal(random.randint(1, 6))
            status = random.choice([OrderStatus.PENDING, OrderStatus.PAID])
            await bookkeeper.create_order(
                OrderCreate(
                    customer_id=customer.id,
                    items=[OrderItemCreate(type=item_type, quantity=quantity, rate=rate)],
                    status=status,
                )
            )
            count += 1
    print(f"✅ Created {count} orders")
    return count


async def seed(store: DocumentStore) -> dict[str, int]:
    """Populate a store with a small demo shop. Collections that already hold data are skipped."""
    bookkeeper = Bookkeeper(store)
    customers = await seed_customers(store)
    suppliers = await seed_suppliers(store)
    stocked = await seed_stock(bookkeeper, suppliers)
    orders = await seed_orders(bookkeeper, customers)

    hotel = next((c for c in customers if c.type == CustomerType.HOTEL.value), None)
    if orders and hotel is not None:
        refreshed = await store.customers.get_by_id(hotel.id)
        if refreshed and refreshed.pending_amount > 0:
            await bookkeeper.record_customer_payment(
                hotel.id, min(refreshed.pending_amount, Decimal("500"))
            )

    return {
        "customers": len(customers),
        "suppliers": len(suppliers),
        "stocked": stocked,
        "orders": orders,
    }


async def main():
    """Run seed script."""
    print("🌱 Starting shopledger seed script...\n")

    async with AsyncSessionLocal() as db:
        counts = await seed(SqlStore(db))

    print("\n🎉 Seed complete!")
    print(f"   👥 Customers: {counts['customers']}")
    print(f"   🚚 Suppliers: {counts['suppliers']}")
    print(f"   📦 Item types stocked: {counts['stocked']}")
    print(f"   🧾 Orders: {counts['orders']}")


def cli() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\n\n❌ Cancelled\n")
        sys.exit(1)
    except AppError as e:
        logger.error("seed.failed", code=e.code, error=e.message)
        print(f"\n❌ Error: {e.message}\n")
        sys.exit(1)


if __name__ == "__main__":
    cli()
