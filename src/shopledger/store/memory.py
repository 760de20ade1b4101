"""In-memory document store.

Documents are kept raw, exactly as written or seeded, and validated on every
read. Nothing stops two documents from sharing an id, which is how duplicate
ids reach the reconciler in tests.
"""

import copy
import uuid
from collections.abc import Callable, Iterable, Mapping
from decimal import Decimal
from typing import Any

from pydantic import BaseModel

from shopledger.core.validators import coerce_text
from shopledger.models.enums import CollectionName, OrderStatus
from shopledger.store.base import RECORD_MODELS, Collection, DocumentStore, RecordT, to_document
from shopledger.utils.datetime import now_utc

ZERO = Decimal("0.00")

# Fields filled in on create when the caller leaves them out
_CREATE_DEFAULTS: dict[CollectionName, Callable[[], dict[str, Any]]] = {
    CollectionName.CUSTOMERS: lambda: {"pending_amount": ZERO, "created_at": now_utc()},
    CollectionName.SUPPLIERS: lambda: {"debt": ZERO, "created_at": now_utc()},
    CollectionName.INVENTORY: lambda: {"quantity": ZERO, "rate": ZERO, "updated_at": now_utc()},
    CollectionName.ORDERS: lambda: {"items": [], "status": OrderStatus.PENDING.value, "date": now_utc()},
    CollectionName.TRANSACTIONS: lambda: {"date": now_utc()},
}


class MemoryCollection(Collection[RecordT]):
    """List-backed collection of raw dict documents."""

    def __init__(self, name: CollectionName, record_model: type[RecordT]):
        super().__init__(name, record_model)
        self._docs: list[dict[str, Any]] = []

    async def get_all(self) -> list[RecordT]:
        return [self.to_record(doc) for doc in self._docs]

    async def get_by_id(self, record_id: str) -> RecordT | None:
        doc = self._find(record_id)
        return self.to_record(doc) if doc is not None else None

    async def create(self, data: BaseModel | Mapping[str, Any]) -> RecordT:
        values = {key: value for key, value in to_document(data).items() if value is not None}
        doc = {**_CREATE_DEFAULTS[self.name](), **values, "id": str(uuid.uuid4())}
        self._docs.append(doc)
        return self.to_record(copy.deepcopy(doc))

    async def update(self, record_id: str, data: BaseModel | Mapping[str, Any]) -> RecordT | None:
        doc = self._find(record_id)
        if doc is None:
            return None
        changes = to_document(data)
        changes.pop("id", None)
        doc.update(changes)
        if self.name == CollectionName.INVENTORY:
            doc["updated_at"] = now_utc()
        return self.to_record(copy.deepcopy(doc))

    async def delete(self, record_id: str) -> bool:
        # Every document carrying the id goes, duplicates included
        before = len(self._docs)
        self._docs = [doc for doc in self._docs if coerce_text(doc.get("id")) != record_id]
        return len(self._docs) < before

    def seed(self, docs: Iterable[Mapping[str, Any]]) -> None:
        """Insert raw documents as-is: no id generation, no defaults, no validation."""
        for doc in docs:
            self._docs.append(copy.deepcopy(dict(doc)))

    def raw(self) -> list[dict[str, Any]]:
        """Copies of the stored documents."""
        return copy.deepcopy(self._docs)

    def _find(self, record_id: str) -> dict[str, Any] | None:
        for doc in self._docs:
            if coerce_text(doc.get("id")) == record_id:
                return doc
        return None


class MemoryStore(DocumentStore):
    """Process-local store for tests, demos and the seed script."""

    def __init__(self) -> None:
        self.customers = MemoryCollection(CollectionName.CUSTOMERS, RECORD_MODELS[CollectionName.CUSTOMERS])
        self.suppliers = MemoryCollection(CollectionName.SUPPLIERS, RECORD_MODELS[CollectionName.SUPPLIERS])
        self.inventory = MemoryCollection(CollectionName.INVENTORY, RECORD_MODELS[CollectionName.INVENTORY])
        self.orders = MemoryCollection(CollectionName.ORDERS, RECORD_MODELS[CollectionName.ORDERS])
        self.transactions = MemoryCollection(
            CollectionName.TRANSACTIONS, RECORD_MODELS[CollectionName.TRANSACTIONS]
        )

    def seed(self, name: CollectionName | str, docs: Iterable[Mapping[str, Any]]) -> None:
        self.collection(CollectionName(name)).seed(docs)
