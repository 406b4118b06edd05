from __future__ import annotations

import logging
from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.orm import Session, selectinload

from retailpos.app.core.config import settings
from retailpos.app.core.errors import (
    EmptyCart,
    InsufficientStock,
    InvalidInput,
    NotFound,
    TransientStoreFailure,
)
from retailpos.app.models.customer import Customer, Sale, SaleItem
from retailpos.app.models.inventory import INT_COLUMN_MAX, Product
from retailpos.app.schemas.pos import SaleItemIn
from retailpos.app.services.audit import log_action
from retailpos.app.services.concurrency import TRANSIENT_ERRORS, run_with_retry
from retailpos.app.services.pricing import MAX_AMOUNT, CartLine, price_cart

logger = logging.getLogger(__name__)


def _resolve_customer(
    db: Session, customer_id: UUID | None, reject_unknown: bool
) -> tuple[UUID | None, bool]:
    """Return (customer id to store, membership flag)."""
    if customer_id is None:
        return None, False
    customer = db.get(Customer, customer_id, populate_existing=True)
    if customer is None:
        if reject_unknown:
            raise NotFound("Customer", customer_id)
        logger.warning("Unknown customer %s; recording walk-in sale", customer_id)
        return None, False
    return customer.id, customer.is_member


def _reserve_lines(
    db: Session, items: Sequence[SaleItemIn]
) -> tuple[list[CartLine], dict[UUID, Product]]:
    """Check availability line by line, in input order.

    Repeated products are checked against what the earlier lines left over.
    """
    lines: list[CartLine] = []
    products: dict[UUID, Product] = {}
    remaining: dict[UUID, int] = {}
    for item in items:
        product = products.get(item.product_id)
        if product is None:
            product = db.get(Product, item.product_id, populate_existing=True)
            if product is None:
                raise NotFound("Product", item.product_id)
            products[product.id] = product
            remaining[product.id] = product.stock

        available = remaining[product.id]
        if item.quantity > available:
            raise InsufficientStock(product.id, product.name, available, item.quantity)
        remaining[product.id] = available - item.quantity

        lines.append(
            CartLine(
                product_id=product.id,
                quantity=item.quantity,
                unit_price=product.price,
                refund_eligible=product.is_refundable,
            )
        )
    return lines, products


def _decrement_stock(db: Session, product: Product, quantity: int) -> None:
    """Compare-and-decrement: only succeeds while enough stock is still on the row."""
    result = db.execute(
        update(Product)
        .where(Product.id == product.id, Product.stock >= quantity)
        .values(stock=Product.stock - quantity)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 1:
        return
    current = db.query(Product.stock).filter(Product.id == product.id).scalar()
    if current is None:
        raise NotFound("Product", product.id)
    raise InsufficientStock(product.id, product.name, current, quantity)


def _commit_once(
    db: Session,
    *,
    cashier_id: UUID,
    items: Sequence[SaleItemIn],
    customer_id: UUID | None,
    reject_unknown_customer: bool,
    ip_address: str | None,
) -> Sale:
    try:
        stored_customer_id, is_member = _resolve_customer(
            db, customer_id, reject_unknown_customer
        )
        lines, products = _reserve_lines(db, items)
        breakdown = price_cart(lines, is_member)
        if breakdown.total >= MAX_AMOUNT:
            raise InvalidInput("items", "Sale total is too large to record")

        requested: dict[UUID, int] = {}
        for line in lines:
            requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity
        for product_id, quantity in requested.items():
            _decrement_stock(db, products[product_id], quantity)

        sale = Sale(
            user_id=cashier_id,
            customer_id=stored_customer_id,
            total_amount=breakdown.total,
            discount=breakdown.discount,
            final_amount=breakdown.final,
            items=[
                SaleItem(
                    product_id=line.product_id,
                    position=position,
                    quantity=line.quantity,
                    price=line.unit_price,
                )
                for position, line in enumerate(lines)
            ],
        )
        db.add(sale)
        db.flush()

        log_action(
            db,
            user_id=cashier_id,
            action="SALE_COMMITTED",
            resource_type="sales",
            resource_id=str(sale.id),
            ip_address=ip_address,
            changes={
                "total_amount": str(breakdown.total),
                "discount": str(breakdown.discount),
                "final_amount": str(breakdown.final),
                "items": len(lines),
            },
        )
        db.commit()
    except TRANSIENT_ERRORS:
        raise
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Sale %s committed by %s: total=%s discount=%s final=%s",
        sale.id,
        cashier_id,
        breakdown.total,
        breakdown.discount,
        breakdown.final,
    )
    return sale


def commit_sale(
    db: Session,
    *,
    cashier_id: UUID,
    items: Sequence[SaleItemIn],
    customer_id: UUID | None = None,
    reject_unknown_customer: bool | None = None,
    max_attempts: int | None = None,
    backoff_base: float | None = None,
    ip_address: str | None = None,
) -> Sale:
    """Validate a cart, price it and persist the sale with its stock decrements.

    Everything happens in one transaction that this function commits: either
    the sale, its lines and every decrement are stored, or nothing is.
    Business rejections (EmptyCart, NotFound, InsufficientStock) are raised
    without side effects. Lock timeouts and deadlocks are retried up to
    *max_attempts* times, then surface as TransientStoreFailure.
    """
    if not items:
        raise EmptyCart()
    for item in items:
        if item.quantity <= 0:
            raise InvalidInput("quantity", "Quantity must be greater than zero")
        if item.quantity > INT_COLUMN_MAX:
            raise InvalidInput("quantity", f"Quantity cannot exceed {INT_COLUMN_MAX}")

    if reject_unknown_customer is None:
        reject_unknown_customer = settings.REJECT_UNKNOWN_CUSTOMER

    try:
        return run_with_retry(
            db,
            lambda: _commit_once(
                db,
                cashier_id=cashier_id,
                items=items,
                customer_id=customer_id,
                reject_unknown_customer=reject_unknown_customer,
                ip_address=ip_address,
            ),
            attempts=max_attempts or settings.SALE_COMMIT_MAX_ATTEMPTS,
            backoff_base=(
                settings.SALE_COMMIT_RETRY_BACKOFF_SECONDS
                if backoff_base is None
                else backoff_base
            ),
        )
    except TRANSIENT_ERRORS as exc:
        logger.error("Sale commit by %s failed after retries: %s", cashier_id, exc)
        raise TransientStoreFailure(
            "The sale could not be saved right now. Please submit it again."
        ) from exc


def get_sale(db: Session, sale_id: UUID) -> Sale:
    sale = (
        db.query(Sale)
        .options(selectinload(Sale.items))
        .filter(Sale.id == sale_id)
        .first()
    )
    if sale is None:
        raise NotFound("Sale", sale_id)
    return sale
