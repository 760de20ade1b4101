"""
Enums for domain models.
Enums provide type safety and clarity. Validation for categorical fields.
"""

import enum


class CustomerType(str, enum.Enum):
    """Hotels buy on credit regularly; random customers are walk-ins."""

    HOTEL = "hotel"
    RANDOM = "random"


class OrderStatus(str, enum.Enum):
    """Order payment state. Transitions both ways."""

    PENDING = "pending"
    PAID = "paid"


class EntityType(str, enum.Enum):
    """Which ledger a transaction belongs to."""

    CUSTOMER = "customer"
    SUPPLIER = "supplier"


class TransactionType(str, enum.Enum):
    """
    Ledger entry kind.

    receipt: money received from a customer (lowers pending_amount)
    payment: money paid to a supplier (lowers debt)
    expense: stock bought on credit from a supplier (raises debt)
    """

    PAYMENT = "payment"
    RECEIPT = "receipt"
    EXPENSE = "expense"


class ItemType(str, enum.Enum):
    """Meat categories sold by the shop."""

    CHICKEN = "chicken"
    EERAL = "eeral"
    LEG_PIECE = "leg-piece"
    GOAT = "goat"
    KADAI = "kadai"
    BEEF = "beef"
    KODAL = "kodal"
    CHOPS = "chops"
    BONELESS = "boneless"
    ORDER = "order"

    @property
    def label(self) -> str:
        return self.value.replace("-", " ").title()


class CollectionName(str, enum.Enum):
    """Store collection names."""

    CUSTOMERS = "customers"
    SUPPLIERS = "suppliers"
    INVENTORY = "inventory"
    ORDERS = "orders"
    TRANSACTIONS = "transactions"
