"""Pydantic schemas for Transaction API and store records."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shopledger.core.validators import (
    coerce_amount,
    coerce_date,
    coerce_optional_text,
    coerce_text,
    sanitize_html,
    validate_positive_amount,
)
from shopledger.models.enums import EntityType, ItemType, TransactionType


class TransactionCreate(BaseModel):
    """Schema for recording a ledger entry."""

    entity_id: str = Field(..., min_length=1, max_length=36)
    entity_type: EntityType
    type: TransactionType
    amount: Decimal = Field(..., gt=0)
    date: datetime | None = None
    description: str | None = Field(None, max_length=500)

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        return validate_positive_amount(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return sanitize_html(v)


class PaymentCreate(BaseModel):
    """Body of the customer and supplier /payment endpoints."""

    amount: Decimal = Field(..., gt=0)
    description: str | None = Field(None, max_length=500)

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        return validate_positive_amount(v, field_name="Payment amount")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return sanitize_html(v)


class StockPurchaseCreate(BaseModel):
    """Body of the supplier /stock endpoint: stock bought on credit."""

    type: ItemType
    quantity: Decimal = Field(..., gt=0, description="Quantity in kg")
    rate: Decimal = Field(..., gt=0, description="Price per kg")

    @property
    def amount(self) -> Decimal:
        return self.quantity * self.rate


class TransactionRead(BaseModel):
    """
    A transaction record as read back from a store.

    entity_type and type stay plain strings so unknown values are carried
    through and ignored by the projector instead of failing validation.
    """

    id: str
    entity_id: str = ""
    entity_type: str = ""
    type: str = ""
    amount: Decimal = Decimal("0")
    date: datetime | None = None
    description: str | None = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("id", "entity_id", mode="before")
    @classmethod
    def read_references(cls, v: object) -> str:
        return coerce_text(v)

    @field_validator("description", mode="before")
    @classmethod
    def read_description(cls, v: object) -> str | None:
        return coerce_optional_text(v)

    @field_validator("amount", mode="before")
    @classmethod
    def read_amount(cls, v: object) -> Decimal:
        return coerce_amount(v)

    @field_validator("date", mode="before")
    @classmethod
    def read_date(cls, v: object) -> datetime | None:
        return coerce_date(v)

    @field_validator("entity_type", "type", mode="before")
    @classmethod
    def read_tags(cls, v: object) -> str:
        if v is None:
            return ""
        return str(v.value if hasattr(v, "value") else v).strip().lower()
