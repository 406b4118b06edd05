"""Service layer for the sales report."""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

from sqlalchemy.orm import Session, joinedload, selectinload

from retailpos.app.core.errors import InvalidInput
from retailpos.app.models.customer import Sale, SaleItem

ZERO = Decimal("0.00")


def _start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min, tzinfo=timezone.utc)


def sales_report(
    db: Session,
    start_date: date | None = None,
    end_date: date | None = None,
) -> dict[str, object]:
    """Sales within an inclusive day range, newest first, plus summary totals.

    Either bound may be omitted. Revenue is the sum of final amounts; no
    profit figure is computed because products carry no cost price.
    """
    if start_date and end_date and start_date > end_date:
        raise InvalidInput("start_date", "start_date must not be after end_date")

    query = db.query(Sale).options(
        joinedload(Sale.user),
        joinedload(Sale.customer),
        selectinload(Sale.items).joinedload(SaleItem.product),
    )
    if start_date:
        query = query.filter(Sale.sale_date >= _start_of_day(start_date))
    if end_date:
        query = query.filter(Sale.sale_date < _start_of_day(end_date + timedelta(days=1)))
    sales = query.order_by(Sale.sale_date.desc()).all()

    rows: list[dict[str, object]] = []
    total_revenue = ZERO
    total_discount = ZERO
    for sale in sales:
        total_revenue += sale.final_amount
        total_discount += sale.discount
        rows.append({
            "id": sale.id,
            "sale_date": sale.sale_date,
            "cashier": sale.user.username,
            "customer_name": sale.customer.name if sale.customer else None,
            "customer_is_member": sale.customer.is_member if sale.customer else None,
            "total_amount": str(sale.total_amount),
            "discount": str(sale.discount),
            "final_amount": str(sale.final_amount),
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product.name,
                    "quantity": item.quantity,
                    "unit_price": str(item.price),
                    "line_total": str(item.price * item.quantity),
                }
                for item in sale.items
            ],
        })

    return {
        "sales": rows,
        "summary": {
            "total_sales_count": len(rows),
            "total_revenue": str(total_revenue),
            "total_discount_given": str(total_discount),
        },
    }
