"""Write-time balance bookkeeping for orders, payments and stock purchases.

Each step below is its own store call. There is no transaction spanning the
record write and the balance adjustment, so a failure in between leaves the
cached balance out of step with the history. The Reconciler exists to find
and repair exactly that.
"""

from decimal import Decimal

from shopledger.core.errors import NotFoundError
from shopledger.core.logging import get_logger
from shopledger.models.customer_schemas import CustomerRead
from shopledger.models.enums import EntityType, ItemType, OrderStatus, TransactionType
from shopledger.models.inventory_schemas import InventoryRead
from shopledger.models.order_schemas import OrderCreate, OrderRead, OrderUpdate
from shopledger.models.supplier_schemas import SupplierRead
from shopledger.models.transaction_schemas import TransactionCreate, TransactionRead
from shopledger.services.ledger import floor_balance
from shopledger.store.base import DocumentStore
from shopledger.utils.datetime import now_utc, to_utc_naive

logger = get_logger(__name__)


class Bookkeeper:
    """Records orders and ledger entries and keeps cached balances in step."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def create_order(self, data: OrderCreate) -> OrderRead:
        customer = await self._require_customer(data.customer_id)

        document = data.model_dump(mode="python")
        document["total"] = data.total if data.total is not None else data.items_total()
        document["date"] = to_utc_naive(data.date) if data.date else now_utc()
        if data.type is None:
            document["type"] = customer.type

        order = await self.store.orders.create(document)

        for item in data.items:
            await self._adjust_stock(item.type, -item.quantity)

        if order.status == OrderStatus.PENDING:
            await self._set_pending(customer, customer.pending_amount + order.total)

        logger.info(
            "order.created",
            order_id=order.id,
            customer_id=customer.id,
            total=str(order.total),
            status=order.status.value,
        )
        return order

    async def update_order(self, order_id: str, data: OrderUpdate) -> OrderRead:
        existing = await self.store.orders.get_by_id(order_id)
        if existing is None:
            raise NotFoundError("Order", order_id)

        changes = data.model_dump(exclude_unset=True)
        if "date" in changes and changes["date"] is not None:
            changes["date"] = to_utc_naive(changes["date"])

        updated = await self.store.orders.update(order_id, changes)
        if updated is None:
            raise NotFoundError("Order", order_id)

        if existing.status != updated.status:
            customer = await self.store.customers.get_by_id(existing.customer_id)
            if customer is None:
                logger.warning(
                    "order.customer_missing",
                    order_id=order_id,
                    customer_id=existing.customer_id,
                )
            elif updated.status == OrderStatus.PAID:
                await self._set_pending(customer, floor_balance(customer.pending_amount - existing.total))
            else:
                await self._set_pending(customer, customer.pending_amount + updated.total)

            logger.info(
                "order.status_changed",
                order_id=order_id,
                old_status=existing.status.value,
                new_status=updated.status.value,
            )

        logger.info("order.updated", order_id=order_id, fields_changed=sorted(changes))
        return updated

    async def delete_order(self, order_id: str) -> None:
        """Remove the order. Balances and stock are left as they are."""
        if not await self.store.orders.delete(order_id):
            raise NotFoundError("Order", order_id)
        logger.info("order.deleted", order_id=order_id)

    async def record_transaction(self, data: TransactionCreate) -> TransactionRead:
        if data.entity_type == EntityType.CUSTOMER:
            entity = await self._require_customer(data.entity_id)
        else:
            entity = await self._require_supplier(data.entity_id)

        document = data.model_dump()
        document["date"] = to_utc_naive(data.date) if data.date else now_utc()
        transaction = await self.store.transactions.create(document)

        if data.entity_type == EntityType.CUSTOMER and data.type == TransactionType.RECEIPT:
            await self._set_pending(entity, floor_balance(entity.pending_amount - data.amount))
        elif data.entity_type == EntityType.SUPPLIER and data.type == TransactionType.PAYMENT:
            await self._set_debt(entity, floor_balance(entity.debt - data.amount))
        elif data.entity_type == EntityType.SUPPLIER and data.type == TransactionType.EXPENSE:
            await self._set_debt(entity, entity.debt + data.amount)
        else:
            logger.info(
                "transaction.no_balance_effect",
                entity_type=data.entity_type.value,
                type=data.type.value,
            )

        logger.info(
            "transaction.recorded",
            transaction_id=transaction.id,
            entity_type=data.entity_type.value,
            entity_id=data.entity_id,
            type=data.type.value,
            amount=str(data.amount),
        )
        return transaction

    async def record_customer_payment(
        self, customer_id: str, amount: Decimal, description: str | None = None
    ) -> TransactionRead:
        customer = await self._require_customer(customer_id)
        return await self.record_transaction(
            TransactionCreate(
                entity_id=customer.id,
                entity_type=EntityType.CUSTOMER,
                type=TransactionType.RECEIPT,
                amount=amount,
                description=description or f"Payment from customer: {customer.name}",
            )
        )

    async def record_supplier_payment(
        self, supplier_id: str, amount: Decimal, description: str | None = None
    ) -> TransactionRead:
        supplier = await self._require_supplier(supplier_id)
        return await self.record_transaction(
            TransactionCreate(
                entity_id=supplier.id,
                entity_type=EntityType.SUPPLIER,
                type=TransactionType.PAYMENT,
                amount=amount,
                description=description or f"Payment to supplier: {supplier.name}",
            )
        )

    async def record_stock_purchase(
        self,
        supplier_id: str,
        item_type: ItemType,
        quantity: Decimal,
        rate: Decimal,
    ) -> TransactionRead:
        """Stock bought on credit: inventory goes up, and so does the supplier's debt."""
        supplier = await self._require_supplier(supplier_id)

        item = await self._find_stock(item_type)
        if item is None:
            await self.store.inventory.create(
                {"type": item_type.value, "quantity": quantity, "rate": rate}
            )
        else:
            await self.store.inventory.update(
                item.id, {"quantity": item.quantity + quantity, "rate": rate}
            )

        return await self.record_transaction(
            TransactionCreate(
                entity_id=supplier.id,
                entity_type=EntityType.SUPPLIER,
                type=TransactionType.EXPENSE,
                amount=quantity * rate,
                description=f"Stock purchase: {quantity} kg {item_type.label} @ {rate}/kg",
            )
        )

    async def _require_customer(self, customer_id: str) -> CustomerRead:
        customer = await self.store.customers.get_by_id(customer_id)
        if customer is None:
            raise NotFoundError("Customer", customer_id)
        return customer

    async def _require_supplier(self, supplier_id: str) -> SupplierRead:
        supplier = await self.store.suppliers.get_by_id(supplier_id)
        if supplier is None:
            raise NotFoundError("Supplier", supplier_id)
        return supplier

    async def _find_stock(self, item_type: ItemType | str) -> InventoryRead | None:
        value = item_type.value if isinstance(item_type, ItemType) else item_type
        for item in await self.store.inventory.get_all():
            if item.type == value:
                return item
        return None

    async def _adjust_stock(self, item_type: ItemType, delta: Decimal) -> None:
        item = await self._find_stock(item_type)
        if item is None:
            logger.warning("inventory.item_missing", item_type=item_type.value)
            return
        quantity = item.quantity + delta
        await self.store.inventory.update(item.id, {"quantity": quantity})
        if quantity < 0:
            logger.warning(
                "inventory.oversold",
                item_id=item.id,
                item_type=item.type,
                quantity=str(quantity),
            )

    async def _set_pending(self, customer: CustomerRead, amount: Decimal) -> None:
        await self.store.customers.update(customer.id, {"pending_amount": amount})
        logger.debug(
            "customer.balance_updated",
            customer_id=customer.id,
            previous=str(customer.pending_amount),
            pending_amount=str(amount),
        )

    async def _set_debt(self, supplier: SupplierRead, amount: Decimal) -> None:
        await self.store.suppliers.update(supplier.id, {"debt": amount})
        logger.debug(
            "supplier.balance_updated",
            supplier_id=supplier.id,
            previous=str(supplier.debt),
            debt=str(amount),
        )
