from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from retailpos.app.models.inventory import INT_COLUMN_MAX


# ─── Request ──────────────────────────────────────────────────────────────────


class SaleItemIn(BaseModel):
    product_id: UUID
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_in_range(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Quantity must be greater than zero")
        if v > INT_COLUMN_MAX:
            raise ValueError(f"Quantity cannot exceed {INT_COLUMN_MAX}")
        return v


class SaleRequest(BaseModel):
    # A missing or empty cart is reported by the sale service as EmptyCart
    items: list[SaleItemIn] = []
    customer_id: UUID | None = None


# ─── Response ─────────────────────────────────────────────────────────────────


class SaleCreatedOut(BaseModel):
    message: str = "Sale completed successfully!"
    sale_id: UUID
    total_amount: Decimal
    discount: Decimal
    final_amount: Decimal


class SaleLineOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: UUID
    quantity: int
    price: Decimal


class SaleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sale_date: datetime
    user_id: UUID
    customer_id: UUID | None
    total_amount: Decimal
    discount: Decimal
    final_amount: Decimal
    items: list[SaleLineOut]
