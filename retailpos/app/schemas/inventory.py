from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class ProductCreate(BaseModel):
    name: str
    description: str | None = None
    price: Decimal
    stock: int
    sku: str | None = None
    is_refundable: bool = False


class ProductUpdate(BaseModel):
    """Every field optional; only the ones sent are changed."""

    name: str | None = None
    description: str | None = None
    price: Decimal | None = None
    stock: int | None = None
    sku: str | None = None
    is_refundable: bool | None = None


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    price: Decimal
    stock: int
    sku: str | None
    is_refundable: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
