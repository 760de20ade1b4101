"""Domain models package."""

from shopledger.models.enums import (
    CollectionName,
    CustomerType,
    EntityType,
    ItemType,
    OrderStatus,
    TransactionType,
)
from shopledger.models.customer import Customer
from shopledger.models.customer_schemas import CustomerCreate, CustomerRead, CustomerUpdate
from shopledger.models.inventory import InventoryItem
from shopledger.models.inventory_schemas import InventoryCreate, InventoryRead, InventoryUpdate
from shopledger.models.order import Order
from shopledger.models.order_schemas import (
    OrderCreate,
    OrderItemCreate,
    OrderItemRead,
    OrderRead,
    OrderUpdate,
)
from shopledger.models.supplier import Supplier
from shopledger.models.supplier_schemas import SupplierCreate, SupplierRead, SupplierUpdate
from shopledger.models.transaction import Transaction
from shopledger.models.transaction_schemas import (
    PaymentCreate,
    StockPurchaseCreate,
    TransactionCreate,
    TransactionRead,
)

__all__ = [
    "CollectionName",
    "Customer",
    "CustomerCreate",
    "CustomerRead",
    "CustomerType",
    "CustomerUpdate",
    "EntityType",
    "InventoryCreate",
    "InventoryItem",
    "InventoryRead",
    "InventoryUpdate",
    "ItemType",
    "Order",
    "OrderCreate",
    "OrderItemCreate",
    "OrderItemRead",
    "OrderRead",
    "OrderStatus",
    "OrderUpdate",
    "PaymentCreate",
    "StockPurchaseCreate",
    "Supplier",
    "SupplierCreate",
    "SupplierRead",
    "SupplierUpdate",
    "Transaction",
    "TransactionCreate",
    "TransactionRead",
    "TransactionType",
]
