"""Order database model."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.core.db import Base
from shopledger.utils.datetime import now_utc


class Order(Base):
    """
    A sale to a customer.

    Attributes:
        customer_id: Customer reference (no foreign key, orders can outlive it)
        items: Line items as JSON: [{"type", "quantity", "rate", "details"}]
        total: Stored order total; kept redundantly and may drift from the items
        status: pending or paid
        type: Customer type at the time of the order
        date: When the order was taken
    """

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    customer_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        index=True,
    )

    items: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    total: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        index=True,
    )

    type: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
    )

    date: Mapped[datetime | None] = mapped_column(
        nullable=True,
        default=now_utc,
        index=True,
    )

    def __repr__(self) -> str:
        return (
            f"<Order(id={self.id}, customer_id={self.customer_id}, "
            f"total={self.total}, status={self.status})>"
        )
