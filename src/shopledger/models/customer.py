"""Customer database model."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.core.db import Base
from shopledger.utils.datetime import now_utc


class Customer(Base):
    """
    A hotel or walk-in customer buying on credit.

    pending_amount is a cached running balance: the Bookkeeper adjusts it on
    every order and receipt, and the Reconciler re-derives it from history.
    Orders and transactions point at customers by id only, so deleting a
    customer leaves them orphaned.
    """

    __tablename__ = "customers"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        index=True,
    )

    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )

    contact: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    pending_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
    )

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc,
    )

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, name={self.name}, pending_amount={self.pending_amount})>"
