"""Cart pricing: line subtotals, member discount, final amount.

Pure functions only. Amounts are ``Decimal`` values quantized to the cent,
the same scale the sales tables store, so computed and persisted figures
agree exactly.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
MEMBER_DISCOUNT_RATE = Decimal("0.02")
# Numeric(12, 2) keeps ten integer digits
MAX_AMOUNT = Decimal("1e10")


@dataclass(frozen=True)
class CartLine:
    product_id: UUID
    quantity: int
    unit_price: Decimal
    refund_eligible: bool

    @property
    def subtotal(self) -> Decimal:
        return to_cents(self.unit_price * self.quantity)


@dataclass(frozen=True)
class PriceBreakdown:
    total: Decimal
    discount: Decimal
    final: Decimal


def to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def line_discount(line: CartLine, customer_is_member: bool) -> Decimal:
    """2% of the line subtotal for members buying refund-eligible products."""
    if not (customer_is_member and line.refund_eligible):
        return ZERO
    return to_cents(line.subtotal * MEMBER_DISCOUNT_RATE)


def price_cart(lines: Iterable[CartLine], customer_is_member: bool) -> PriceBreakdown:
    total = ZERO
    discount = ZERO
    for line in lines:
        total += line.subtotal
        discount += line_discount(line, customer_is_member)
    return PriceBreakdown(total=total, discount=discount, final=total - discount)
