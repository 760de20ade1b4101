"""Pydantic schemas for Order API and store records."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shopledger.core.validators import (
    coerce_amount,
    coerce_date,
    coerce_optional_text,
    coerce_order_status,
    coerce_text,
    sanitize_html,
    validate_currency,
)
from shopledger.models.enums import CustomerType, ItemType, OrderStatus


class OrderItemCreate(BaseModel):
    """One line of a new order."""

    type: ItemType
    quantity: Decimal = Field(..., description="Quantity in kg")
    rate: Decimal = Field(..., ge=0, description="Price per kg")
    details: str | None = Field(None, max_length=500)

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: Decimal) -> Decimal:
        if v == 0:
            raise ValueError("Quantity cannot be zero")
        return v

    @field_validator("rate")
    @classmethod
    def validate_rate(cls, v: Decimal) -> Decimal:
        return validate_currency(v)

    @field_validator("details")
    @classmethod
    def validate_details(cls, v: str | None) -> str | None:
        return sanitize_html(v)

    @property
    def amount(self) -> Decimal:
        return self.quantity * self.rate


class OrderCreate(BaseModel):
    """Schema for creating a new order. total defaults to the line-item sum."""

    customer_id: str = Field(..., min_length=1, max_length=36)
    items: list[OrderItemCreate] = Field(..., min_length=1)
    total: Decimal | None = Field(None, ge=0)
    status: OrderStatus = OrderStatus.PENDING
    type: CustomerType | None = None
    date: datetime | None = None

    @field_validator("total")
    @classmethod
    def validate_total(cls, v: Decimal | None) -> Decimal | None:
        if v is None:
            return None
        return validate_currency(v)

    def items_total(self) -> Decimal:
        return sum((item.amount for item in self.items), Decimal("0"))


class OrderUpdate(BaseModel):
    """Schema for updating an order (partial update allowed)."""

    items: list[OrderItemCreate] | None = Field(None, min_length=1)
    total: Decimal | None = Field(None, ge=0)
    status: OrderStatus | None = None
    date: datetime | None = None

    @field_validator("total")
    @classmethod
    def validate_total(cls, v: Decimal | None) -> Decimal | None:
        if v is None:
            return None
        return validate_currency(v)


class OrderItemRead(BaseModel):
    """A stored order line. Malformed numbers read as 0."""

    type: str = ""
    quantity: Decimal = Decimal("0")
    rate: Decimal = Decimal("0")
    details: str | None = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("type", mode="before")
    @classmethod
    def read_type(cls, v: object) -> str:
        return coerce_text(v)

    @field_validator("details", mode="before")
    @classmethod
    def read_details(cls, v: object) -> str | None:
        return coerce_optional_text(v)

    @field_validator("quantity", "rate", mode="before")
    @classmethod
    def read_numbers(cls, v: object) -> Decimal:
        return coerce_amount(v)


class OrderRead(BaseModel):
    """
    An order record as read back from a store.

    Missing or non-numeric totals read as 0, missing or unknown status reads
    as pending and an unreadable date reads as None.
    """

    id: str
    customer_id: str = ""
    items: list[OrderItemRead] = Field(default_factory=list)
    total: Decimal = Decimal("0")
    status: OrderStatus = OrderStatus.PENDING
    type: str | None = None
    date: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("id", "customer_id", mode="before")
    @classmethod
    def read_references(cls, v: object) -> str:
        return coerce_text(v)

    @field_validator("type", mode="before")
    @classmethod
    def read_type(cls, v: object) -> str | None:
        return coerce_optional_text(v)

    @field_validator("items", mode="before")
    @classmethod
    def read_items(cls, v: object) -> list:
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, (dict, BaseModel))]

    @field_validator("total", mode="before")
    @classmethod
    def read_total(cls, v: object) -> Decimal:
        return coerce_amount(v)

    @field_validator("status", mode="before")
    @classmethod
    def read_status(cls, v: object) -> OrderStatus:
        return coerce_order_status(v)

    @field_validator("date", mode="before")
    @classmethod
    def read_date(cls, v: object) -> datetime | None:
        return coerce_date(v)

    @property
    def is_paid(self) -> bool:
        return self.status == OrderStatus.PAID

    @property
    def items_total(self) -> Decimal:
        """Sum of quantity x rate over the lines; may differ from the stored total."""
        return sum((item.quantity * item.rate for item in self.items), Decimal("0"))
