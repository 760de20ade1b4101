"""Pydantic schemas for Inventory API and store records."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shopledger.core.validators import coerce_amount, coerce_date, coerce_text, validate_currency
from shopledger.models.enums import ItemType


class InventoryCreate(BaseModel):
    """Schema for creating an inventory line."""

    type: ItemType
    quantity: Decimal = Field(Decimal("0"), description="Stock in kg")
    rate: Decimal = Field(Decimal("0.00"), ge=0, description="Price per kg")

    @field_validator("rate")
    @classmethod
    def validate_rate(cls, v: Decimal) -> Decimal:
        return validate_currency(v)


class InventoryUpdate(BaseModel):
    """Schema for updating an inventory line. Quantity may be set negative."""

    type: ItemType | None = None
    quantity: Decimal | None = None
    rate: Decimal | None = Field(None, ge=0)

    @field_validator("rate")
    @classmethod
    def validate_rate(cls, v: Decimal | None) -> Decimal | None:
        if v is None:
            return None
        return validate_currency(v)


class InventoryRead(BaseModel):
    """An inventory record as read back from a store."""

    id: str
    type: str
    quantity: Decimal = Decimal("0")
    rate: Decimal = Decimal("0")
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("id", "type", mode="before")
    @classmethod
    def read_text(cls, v: object) -> str:
        return coerce_text(v)

    @field_validator("quantity", "rate", mode="before")
    @classmethod
    def read_numbers(cls, v: object) -> Decimal:
        return coerce_amount(v)

    @field_validator("updated_at", mode="before")
    @classmethod
    def read_updated_at(cls, v: object) -> datetime | None:
        return coerce_date(v)

    @property
    def is_negative(self) -> bool:
        """Oversold: more was sold than was ever stocked."""
        return self.quantity < 0
