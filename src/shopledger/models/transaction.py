"""Transaction database model."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.core.db import Base
from shopledger.utils.datetime import now_utc


class Transaction(Base):
    """
    A ledger entry against a customer or a supplier.

    Logically immutable once written. entity_id has no foreign key; which
    table it points at depends on entity_type.
    """

    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    entity_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        index=True,
    )

    entity_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )

    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        index=True,
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )

    date: Mapped[datetime | None] = mapped_column(
        nullable=True,
        default=now_utc,
        index=True,
    )

    description: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<Transaction(id={self.id}, entity_type={self.entity_type}, "
            f"entity_id={self.entity_id}, type={self.type}, amount={self.amount})>"
        )
