"""Pydantic schemas for Customer API and store records."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shopledger.core.validators import (
    coerce_amount,
    coerce_date,
    coerce_optional_text,
    coerce_text,
    validate_currency,
    validate_name,
    validate_phone,
)
from shopledger.models.enums import CustomerType


class CustomerCreate(BaseModel):
    """Schema for creating a new customer."""

    name: str = Field(..., min_length=1, max_length=200)
    type: CustomerType = CustomerType.RANDOM
    contact: str | None = Field(None, max_length=100)
    pending_amount: Decimal = Field(Decimal("0.00"), ge=0)

    @field_validator("name")
    @classmethod
    def validate_customer_name(cls, v: str) -> str:
        return validate_name(v, field_name="Customer name")

    @field_validator("contact")
    @classmethod
    def validate_contact(cls, v: str | None) -> str | None:
        return validate_phone(v)

    @field_validator("pending_amount")
    @classmethod
    def validate_pending_amount(cls, v: Decimal) -> Decimal:
        return validate_currency(v)


class CustomerUpdate(BaseModel):
    """Schema for updating a customer (partial update allowed).

    pending_amount is editable here for manual corrections; routine changes
    go through orders and payments.
    """

    name: str | None = Field(None, min_length=1, max_length=200)
    type: CustomerType | None = None
    contact: str | None = Field(None, max_length=100)
    pending_amount: Decimal | None = Field(None, ge=0)

    @field_validator("name")
    @classmethod
    def validate_customer_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return validate_name(v, field_name="Customer name")

    @field_validator("contact")
    @classmethod
    def validate_contact(cls, v: str | None) -> str | None:
        return validate_phone(v)

    @field_validator("pending_amount")
    @classmethod
    def validate_pending_amount(cls, v: Decimal | None) -> Decimal | None:
        if v is None:
            return None
        return validate_currency(v)


class CustomerRead(BaseModel):
    """A customer record as read back from a store."""

    id: str
    name: str = ""
    type: str = CustomerType.RANDOM.value
    contact: str | None = None
    pending_amount: Decimal = Decimal("0")
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("id", "name", mode="before")
    @classmethod
    def read_text(cls, v: object) -> str:
        return coerce_text(v)

    @field_validator("type", mode="before")
    @classmethod
    def read_type(cls, v: object) -> str:
        return coerce_text(v).lower() or CustomerType.RANDOM.value

    @field_validator("contact", mode="before")
    @classmethod
    def read_contact(cls, v: object) -> str | None:
        return coerce_optional_text(v)

    @field_validator("pending_amount", mode="before")
    @classmethod
    def read_pending_amount(cls, v: object) -> Decimal:
        return coerce_amount(v)

    @field_validator("created_at", mode="before")
    @classmethod
    def read_created_at(cls, v: object) -> datetime | None:
        return coerce_date(v)
