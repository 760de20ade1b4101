"""Pydantic schemas for Supplier API and store records."""

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


class SupplierCreate(BaseModel):
    """Schema for creating a new supplier."""

    name: str = Field(..., min_length=1, max_length=200)
    contact: str | None = Field(None, max_length=100)
    debt: Decimal = Field(Decimal("0.00"), ge=0)

    @field_validator("name")
    @classmethod
    def validate_supplier_name(cls, v: str) -> str:
        return validate_name(v, field_name="Supplier name")

    @field_validator("contact")
    @classmethod
    def validate_contact(cls, v: str | None) -> str | None:
        return validate_phone(v)

    @field_validator("debt")
    @classmethod
    def validate_debt(cls, v: Decimal) -> Decimal:
        return validate_currency(v)


class SupplierUpdate(BaseModel):
    """Schema for updating a supplier (partial update allowed)."""

    name: str | None = Field(None, min_length=1, max_length=200)
    contact: str | None = Field(None, max_length=100)
    debt: Decimal | None = Field(None, ge=0)

    @field_validator("name")
    @classmethod
    def validate_supplier_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return validate_name(v, field_name="Supplier name")

    @field_validator("contact")
    @classmethod
    def validate_contact(cls, v: str | None) -> str | None:
        return validate_phone(v)

    @field_validator("debt")
    @classmethod
    def validate_debt(cls, v: Decimal | None) -> Decimal | None:
        if v is None:
            return None
        return validate_currency(v)


class SupplierRead(BaseModel):
    """A supplier record as read back from a store."""

    id: str
    name: str = ""
    contact: str | None = None
    debt: Decimal = Decimal("0")
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("id", "name", mode="before")
    @classmethod
    def read_text(cls, v: object) -> str:
        return coerce_text(v)

    @field_validator("contact", mode="before")
    @classmethod
    def read_contact(cls, v: object) -> str | None:
        return coerce_optional_text(v)

    @field_validator("debt", mode="before")
    @classmethod
    def read_debt(cls, v: object) -> Decimal:
        return coerce_amount(v)

    @field_validator("created_at", mode="before")
    @classmethod
    def read_created_at(cls, v: object) -> datetime | None:
        return coerce_date(v)
