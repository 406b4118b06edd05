"""Product catalog service.

Mutations are audit-logged and flushed but NOT committed; the endpoint
commits. Validation failures raise before anything is written.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from retailpos.app.core.errors import InvalidInput, NotFound
from retailpos.app.models.customer import SaleItem
from retailpos.app.models.inventory import INT_COLUMN_MAX, Product
from retailpos.app.services.audit import log_action
from retailpos.app.services.pricing import MAX_AMOUNT, to_cents
from retailpos.app.services.records import (
    clean_optional,
    ensure_unique,
    ensure_unreferenced,
    flush_or_conflict,
    require_name,
)

_UPDATABLE_FIELDS = ("name", "description", "price", "stock", "sku", "is_refundable")


def _check_price(value: Any) -> Decimal:
    try:
        price = Decimal(str(value)) if value is not None else None
    except InvalidOperation:
        price = None
    if price is None or not price.is_finite() or price <= 0:
        raise InvalidInput("price", "Price must be a positive number")
    if price >= MAX_AMOUNT:
        raise InvalidInput("price", f"Price must be less than {MAX_AMOUNT:,.0f}")
    if to_cents(price) != price:
        raise InvalidInput("price", "Price cannot have more than 2 decimal places")
    return to_cents(price)


def _check_stock(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidInput("stock", "Stock must be a non-negative integer")
    if value > INT_COLUMN_MAX:
        raise InvalidInput("stock", f"Stock cannot exceed {INT_COLUMN_MAX}")
    return value


def _snapshot(product: Product) -> dict[str, Any]:
    return {
        "name": product.name,
        "price": str(product.price),
        "stock": product.stock,
        "sku": product.sku,
        "is_refundable": product.is_refundable,
    }


def list_products(db: Session) -> list[Product]:
    return db.query(Product).order_by(Product.name).all()


def get_product(db: Session, product_id: UUID) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFound("Product", product_id)
    return product


def create_product(
    db: Session,
    *,
    name: Any,
    price: Any,
    stock: Any,
    description: str | None = None,
    sku: str | None = None,
    is_refundable: bool = False,
    admin_id: UUID | None = None,
) -> Product:
    """Validate and insert a product. Raises InvalidInput or Conflict."""
    product = Product(
        name=require_name(name),
        description=clean_optional(description),
        price=_check_price(price),
        stock=_check_stock(stock),
        sku=clean_optional(sku),
        is_refundable=bool(is_refundable),
    )
    ensure_unique(db, Product.sku, product.sku)

    db.add(product)
    flush_or_conflict(db, "SKU already exists", field="sku")

    log_action(
        db,
        user_id=admin_id,
        action="PRODUCT_CREATED",
        resource_type="products",
        resource_id=str(product.id),
        changes=_snapshot(product),
    )
    return product


def update_product(
    db: Session,
    product_id: UUID,
    changes: dict[str, Any],
    *,
    admin_id: UUID | None = None,
) -> Product:
    """Apply a partial update. Fields absent from *changes* are left alone."""
    product = get_product(db, product_id)

    values: dict[str, Any] = {}
    for field, value in changes.items():
        if field not in _UPDATABLE_FIELDS:
            continue
        if field == "name":
            values[field] = require_name(value)
        elif field == "price":
            values[field] = _check_price(value)
        elif field == "stock":
            values[field] = _check_stock(value)
        elif field == "is_refundable":
            if value is None:
                raise InvalidInput(field, "is_refundable must be true or false")
            values[field] = bool(value)
        else:
            values[field] = clean_optional(value)

    if "sku" in values:
        ensure_unique(db, Product.sku, values["sku"], exclude_id=product.id)

    for field, value in values.items():
        setattr(product, field, value)
    flush_or_conflict(db, "SKU already exists for another product", field="sku")

    if values:
        log_action(
            db,
            user_id=admin_id,
            action="PRODUCT_UPDATED",
            resource_type="products",
            resource_id=str(product.id),
            changes=_snapshot(product),
        )
    return product


def delete_product(db: Session, product_id: UUID, *, admin_id: UUID | None = None) -> None:
    product = get_product(db, product_id)
    ensure_unreferenced(
        db,
        SaleItem.product_id,
        product.id,
        entity="Product",
        message="Cannot delete product that is part of existing sales.",
    )
    db.delete(product)
    flush_or_conflict(
        db, "Cannot delete product that is part of existing sales.", entity="Product"
    )
    log_action(
        db,
        user_id=admin_id,
        action="PRODUCT_DELETED",
        resource_type="products",
        resource_id=str(product_id),
        changes={"name": product.name},
    )
