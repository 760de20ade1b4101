"""Document store interface.

A store is a handle onto five collections. Each collection speaks plain
CRUD by id and returns validated pydantic records, so everything above the
store can assume well-formed input. Nothing here enforces references between
collections: orders and transactions may point at ids that no longer exist.
"""

import enum
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from shopledger.core.errors import DatabaseError
from shopledger.models.customer_schemas import CustomerRead
from shopledger.models.enums import CollectionName
from shopledger.models.inventory_schemas import InventoryRead
from shopledger.models.order_schemas import OrderRead
from shopledger.models.supplier_schemas import SupplierRead
from shopledger.models.transaction_schemas import TransactionRead

RecordT = TypeVar("RecordT", bound=BaseModel)

RECORD_MODELS: dict[CollectionName, type[BaseModel]] = {
    CollectionName.CUSTOMERS: CustomerRead,
    CollectionName.SUPPLIERS: SupplierRead,
    CollectionName.INVENTORY: InventoryRead,
    CollectionName.ORDERS: OrderRead,
    CollectionName.TRANSACTIONS: TransactionRead,
}


def to_document(data: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
    """Plain dict for storage: models dumped, enums replaced by their values.

    Pass an already dumped dict (``exclude_unset=True``) for partial updates.
    """
    if isinstance(data, BaseModel):
        data = data.model_dump()
    return {key: _plain(value) for key, value in data.items()}


def _plain(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, BaseModel):
        return to_document(value.model_dump())
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


class Collection(ABC, Generic[RecordT]):
    """CRUD over one collection."""

    def __init__(self, name: CollectionName, record_model: type[RecordT]):
        self.name = name
        self.record_model = record_model

    def to_record(self, source: Any) -> RecordT:
        """Validate a stored document or ORM row into the collection's record model."""
        try:
            return self.record_model.model_validate(source)
        except PydanticValidationError as exc:
            raise DatabaseError(
                f"Malformed {self.name.value} record",
                details={"collection": self.name.value, "errors": exc.errors(include_url=False)},
            ) from exc

    @abstractmethod
    async def get_all(self) -> list[RecordT]:
        """Every record, in a stable order."""

    @abstractmethod
    async def get_by_id(self, record_id: str) -> RecordT | None:
        """First record with this id, or None."""

    @abstractmethod
    async def create(self, data: BaseModel | Mapping[str, Any]) -> RecordT:
        """Insert a record under a freshly generated id."""

    @abstractmethod
    async def update(self, record_id: str, data: BaseModel | Mapping[str, Any]) -> RecordT | None:
        """Merge fields into the record. None when the id is unknown."""

    @abstractmethod
    async def delete(self, record_id: str) -> bool:
        """Remove the record. False when the id is unknown."""


class DocumentStore(ABC):
    """Handle onto the shop's collections. Injected into services, never global."""

    customers: Collection[CustomerRead]
    suppliers: Collection[SupplierRead]
    inventory: Collection[InventoryRead]
    orders: Collection[OrderRead]
    transactions: Collection[TransactionRead]

    def collection(self, name: CollectionName) -> Collection:
        return getattr(self, name.value)
