"""Inventory database model."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.core.db import Base
from shopledger.utils.datetime import now_utc


class InventoryItem(Base):
    """
    Stock on hand for one meat category.

    quantity is in kg and is allowed to go negative when orders are taken
    before stock arrives.
    """

    __tablename__ = "inventory"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    type: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        index=True,
    )

    quantity: Mapped[Decimal] = mapped_column(
        Numeric(12, 3),
        nullable=False,
        default=Decimal("0"),
    )

    # Price per kg, changes daily
    rate: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc,
        onupdate=now_utc,
    )

    def __repr__(self) -> str:
        return f"<InventoryItem(id={self.id}, type={self.type}, quantity={self.quantity})>"
