"""Purchase models."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator


class PurchasePayload(BaseModel):
    """Fields supplied when recording a purchase."""

    date: str
    product: str
    quantity: int = Field(ge=0, strict=True)
    price: int = Field(ge=0, strict=True)

    @field_validator("quantity", "price", mode="before")
    @classmethod
    def unwrap_decimal(cls, value: Any) -> Any:
        """DynamoDB hands numbers back as Decimal; integral ones become int."""
        if isinstance(value, Decimal) and value == value.to_integral_value():
            return int(value)
        return value


class Purchase(PurchasePayload):
    """Stored purchase record."""

    id: str
