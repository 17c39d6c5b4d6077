"""Tests for the pricing engine."""

import pytest
from ordering.config import StorefrontSettings
from ordering.order.pricing import (
    PriceLine,
    compute_subtotal,
    delivery_fee_for,
    price_order,
    to_minor_units,
)


def _line(unit_price, quantity=1, name="Fresh Boiled Milk (500 ml)"):
    return PriceLine(product_id=None, name=name, quantity=quantity, unit_price=unit_price)


class TestSubtotal:
    def test_sums_quantity_times_price(self):
        assert compute_subtotal([_line(52, 2), _line(7, 1)]) == 111.0

    def test_line_total(self):
        assert _line(17, 3).line_total == 51.0

    def test_rounds_to_two_decimals(self):
        assert compute_subtotal([_line(0.1, 3)]) == 0.3


class TestDeliveryFee:
    def test_free_at_threshold(self):
        assert delivery_fee_for(100.0) == 0.0

    def test_charged_below_threshold(self):
        assert delivery_fee_for(99.99) == 30.0

    def test_threshold_and_fee_come_from_settings(self):
        settings = StorefrontSettings(free_delivery_threshold=250.0, delivery_fee=40.0)
        assert delivery_fee_for(200.0, settings) == 40.0
        assert delivery_fee_for(250.0, settings) == 0.0


class TestPriceOrder:
    def test_two_half_litres_ship_free(self):
        pricing = price_order([_line(52, 2)])
        assert pricing.subtotal == 104.0
        assert pricing.delivery_fee == 0.0
        assert pricing.total == 104.0

    def test_small_order_pays_delivery(self):
        pricing = price_order([_line(17, 1)])
        assert pricing.total == 47.0

    def test_discount_reduces_total(self):
        pricing = price_order([_line(100, 2)], coupon_discount=20.0)
        assert pricing.coupon_discount == 20.0
        assert pricing.total == 180.0

    def test_discount_clamped_so_total_never_negative(self):
        pricing = price_order([_line(17, 1)], coupon_discount=500.0)
        assert pricing.coupon_discount == 47.0
        assert pricing.total == 0.0

    def test_negative_discount_ignored(self):
        assert price_order([_line(52, 2)], coupon_discount=-5).total == 104.0

    @pytest.mark.parametrize(
        "lines, discount",
        [
            ([(17, 1)], 0.0),
            ([(52, 2), (7, 1)], 10.0),
            ([(402, 1)], 50.0),
            ([(8, 3)], 100.0),
            ([(92, 1), (10, 1)], 9.99),
        ],
    )
    def test_total_balances(self, lines, discount):
        pricing = price_order([_line(price, qty) for price, qty in lines], coupon_discount=discount)
        expected = round(pricing.subtotal + pricing.delivery_fee - pricing.coupon_discount, 2)
        assert pricing.total == expected
        assert pricing.total >= 0


def test_minor_units_are_paise():
    assert to_minor_units(104.0) == 10400
    assert to_minor_units(47.5) == 4750
