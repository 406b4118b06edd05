"""Tests for the pure cart pricing calculator."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from uuid import uuid4

import pytest

from retailpos.app.services.pricing import (
    MEMBER_DISCOUNT_RATE,
    CartLine,
    line_discount,
    price_cart,
)

D = Decimal


def _line(price: str, qty: int, refundable: bool = True) -> CartLine:
    return CartLine(product_id=uuid4(), quantity=qty, unit_price=D(price), refund_eligible=refundable)


class TestScenarios:
    def test_walk_in_pays_full_price(self) -> None:
        result = price_cart([_line("10.00", 2)], customer_is_member=False)
        assert result.total == D("20.00")
        assert result.discount == D("0.00")
        assert result.final == D("20.00")

    def test_member_gets_two_percent_on_refundable_line(self) -> None:
        result = price_cart([_line("10.00", 2)], customer_is_member=True)
        assert result.discount == D("0.40")
        assert result.final == D("19.60")

    def test_member_gets_nothing_on_non_refundable_line(self) -> None:
        result = price_cart([_line("10.00", 2, refundable=False)], customer_is_member=True)
        assert result.discount == D("0.00")
        assert result.final == D("20.00")

    def test_discount_is_per_line_not_storewide(self) -> None:
        lines = [_line("10.00", 2), _line("50.00", 1, refundable=False)]
        result = price_cart(lines, customer_is_member=True)
        assert result.total == D("70.00")
        assert result.discount == D("0.40")
        assert result.final == D("69.60")

    def test_line_discount_rounds_to_cent(self) -> None:
        # 2% of 0.99 is 0.0198 -> 0.02
        assert line_discount(_line("0.99", 1), customer_is_member=True) == D("0.02")

    def test_half_cent_rounds_up(self) -> None:
        # 2% of 0.25 is 0.005
        assert line_discount(_line("0.25", 1), customer_is_member=True) == D("0.01")

    def test_empty_cart_prices_to_zero(self) -> None:
        result = price_cart([], customer_is_member=True)
        assert (result.total, result.discount, result.final) == (D("0.00"), D("0.00"), D("0.00"))


CARTS = [
    [("10.00", 2, True)],
    [("4.99", 3, False), ("19.95", 1, True)],
    [("0.01", 1, True), ("0.50", 7, True), ("123.45", 2, False)],
    [("999.99", 100, True), ("1.10", 3, True)],
]


class TestProperties:
    @pytest.mark.parametrize("cart", CARTS)
    @pytest.mark.parametrize("is_member", [True, False])
    def test_final_is_total_minus_discount(self, cart: list, is_member: bool) -> None:
        lines = [_line(p, q, r) for p, q, r in cart]
        result = price_cart(lines, customer_is_member=is_member)

        assert result.final == result.total - result.discount
        assert D("0") <= result.discount <= result.total
        assert result.total == sum((line.unit_price * line.quantity for line in lines), D("0"))
        for amount in (result.total, result.discount, result.final):
            assert amount == amount.quantize(D("0.01"))

    @pytest.mark.parametrize("cart", CARTS)
    def test_discount_only_when_member_and_refundable(self, cart: list) -> None:
        for price, qty, refundable in cart:
            line = _line(price, qty, refundable)
            assert line_discount(line, customer_is_member=False) == D("0")
            expected = (
                (line.unit_price * qty * MEMBER_DISCOUNT_RATE).quantize(D("0.01"), ROUND_HALF_UP)
                if refundable
                else D("0")
            )
            assert line_discount(line, customer_is_member=True) == expected
