"""SQLAlchemy-backed document store.

Each collection maps onto one table. Every mutation commits on its own, so a
sequence of writes is never atomic: a failure halfway leaves the earlier
writes in place.
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from pydantic import BaseModel
from sqlalchemy import JSON, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.db import Base
from shopledger.core.errors import DatabaseError
from shopledger.core.logging import get_logger
from shopledger.models.customer import Customer
from shopledger.models.enums import CollectionName
from shopledger.models.inventory import InventoryItem
from shopledger.models.order import Order
from shopledger.models.supplier import Supplier
from shopledger.models.transaction import Transaction
from shopledger.store.base import RECORD_MODELS, Collection, DocumentStore, RecordT, to_document

logger = get_logger(__name__)


def _json_safe(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Mapping):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    return value


class SqlCollection(Collection[RecordT]):
    """One table behind the collection interface."""

    def __init__(
        self,
        session: AsyncSession,
        name: CollectionName,
        orm_model: type[Base],
        record_model: type[RecordT],
        order_by: tuple,
    ):
        super().__init__(name, record_model)
        self.session = session
        self.orm_model = orm_model
        self.order_by = order_by
        self._columns = orm_model.__table__.columns

    async def get_all(self) -> list[RecordT]:
        try:
            result = await self.session.execute(select(self.orm_model).order_by(*self.order_by))
        except SQLAlchemyError as exc:
            raise self._wrap(exc, "get_all") from exc
        return [self.to_record(row) for row in result.scalars().all()]

    async def get_by_id(self, record_id: str) -> RecordT | None:
        row = await self._get(record_id)
        return self.to_record(row) if row is not None else None

    async def create(self, data: BaseModel | Mapping[str, Any]) -> RecordT:
        # None means "not given" on create, so column defaults apply
        values = {key: value for key, value in self._values(data).items() if value is not None}
        values.pop("id", None)
        row = self.orm_model(**values)
        try:
            self.session.add(row)
            await self.session.commit()
            await self.session.refresh(row)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise self._wrap(exc, "create") from exc
        return self.to_record(row)

    async def update(self, record_id: str, data: BaseModel | Mapping[str, Any]) -> RecordT | None:
        row = await self._get(record_id)
        if row is None:
            return None
        values = self._values(data)
        values.pop("id", None)
        for key, value in values.items():
            setattr(row, key, value)
        try:
            await self.session.commit()
            await self.session.refresh(row)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise self._wrap(exc, "update") from exc
        return self.to_record(row)

    async def delete(self, record_id: str) -> bool:
        row = await self._get(record_id)
        if row is None:
            return False
        try:
            await self.session.delete(row)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise self._wrap(exc, "delete") from exc
        return True

    async def _get(self, record_id: str):
        try:
            return await self.session.get(self.orm_model, record_id)
        except SQLAlchemyError as exc:
            raise self._wrap(exc, "get_by_id") from exc

    def _values(self, data: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
        """Keep only mapped columns; JSON columns get JSON-safe values."""
        values = {}
        for key, value in to_document(data).items():
            if key not in self._columns:
                continue
            if isinstance(self._columns[key].type, JSON):
                value = _json_safe(value)
            values[key] = value
        return values

    def _wrap(self, exc: SQLAlchemyError, operation: str) -> DatabaseError:
        logger.error(
            "store.operation_failed",
            collection=self.name.value,
            operation=operation,
            error=str(exc),
        )
        return DatabaseError(
            f"{self.name.value}.{operation} failed",
            details={"collection": self.name.value, "operation": operation},
        )


class SqlStore(DocumentStore):
    """Store over an AsyncSession. The caller owns the session's lifetime."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.customers = SqlCollection(
            session,
            CollectionName.CUSTOMERS,
            Customer,
            RECORD_MODELS[CollectionName.CUSTOMERS],
            order_by=(Customer.created_at, Customer.id),
        )
        self.suppliers = SqlCollection(
            session,
            CollectionName.SUPPLIERS,
            Supplier,
            RECORD_MODELS[CollectionName.SUPPLIERS],
            order_by=(Supplier.created_at, Supplier.id),
        )
        self.inventory = SqlCollection(
            session,
            CollectionName.INVENTORY,
            InventoryItem,
            RECORD_MODELS[CollectionName.INVENTORY],
            order_by=(InventoryItem.type, InventoryItem.id),
        )
        self.orders = SqlCollection(
            session,
            CollectionName.ORDERS,
            Order,
            RECORD_MODELS[CollectionName.ORDERS],
            order_by=(Order.date, Order.id),
        )
        self.transactions = SqlCollection(
            session,
            CollectionName.TRANSACTIONS,
            Transaction,
            RECORD_MODELS[CollectionName.TRANSACTIONS],
            order_by=(Transaction.date, Transaction.id),
        )
