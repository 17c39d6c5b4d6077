"""Tests for Order aggregate placement and structure."""

import pytest
from ordering.order.events import OrderPlaced
from ordering.order.order import Order, OrderStatus, PaymentStatus
from ordering.order.pricing import PriceLine, price_order
from protean.exceptions import ValidationError

_ADDRESS = {"street": "12 MG Road", "city": "Bengaluru", "state": "Karnataka", "pincode": "560001"}
_CONTACT = {"name": "Asha Rao", "phone": "98765 43210", "email": " Asha@Example.com "}


def _lines():
    return [PriceLine(product_id="milk-500ml", name="Fresh Boiled Milk (500 ml)", quantity=2, unit_price=52.0)]


def _place(**overrides):
    lines = overrides.pop("lines", _lines())
    defaults = {
        "order_number": "GD000001",
        "customer_id": "cust-001",
        "lines": lines,
        "pricing": price_order(lines),
        "customer_type": "outsider",
        "delivery_address": _ADDRESS,
        "contact_info": _CONTACT,
        "payment_method": "cod",
    }
    defaults.update(overrides)
    return Order.place(**defaults)


class TestOrderPlacement:
    def test_starts_pending(self):
        order = _place()
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.PENDING.value

    def test_items_are_snapshots(self):
        order = _place()
        item = order.items[0]
        assert item.name == "Fresh Boiled Milk (500 ml)"
        assert item.quantity == 2
        assert item.unit_price == 52.0
        assert item.line_total == 104.0

    def test_pricing_is_recorded(self):
        order = _place()
        assert order.pricing.subtotal == 104.0
        assert order.pricing.delivery_fee == 0.0
        assert order.pricing.total == 104.0
        assert order.pricing.currency == "INR"

    def test_contact_is_normalized(self):
        order = _place()
        assert order.contact_info.phone == "9876543210"
        assert order.contact_info.email == "asha@example.com"

    def test_delivery_defaults(self):
        order = _place()
        assert order.delivery_slot == "morning"
        assert order.delivery_date == order.placed_at.date()

    def test_raises_order_placed(self):
        order = _place()
        event = order._events[-1]
        assert isinstance(event, OrderPlaced)
        assert event.order_number == "GD000001"
        assert event.total == 104.0

    def test_outsider_hostel_is_dropped(self):
        order = _place(hostel="Block C")
        assert order.hostel is None

    def test_college_order_keeps_hostel(self):
        order = _place(customer_type="college", hostel="Block C")
        assert order.hostel == "Block C"

    def test_college_order_requires_hostel(self):
        with pytest.raises(ValidationError) as exc:
            _place(customer_type="college")
        assert "hostel" in exc.value.messages

    def test_order_requires_items(self):
        with pytest.raises(ValidationError):
            _place(lines=[])

    def test_invalid_phone_rejected(self):
        with pytest.raises(ValidationError):
            _place(contact_info={**_CONTACT, "phone": "12345"})

    def test_free_online_order_is_paid_and_confirmed(self):
        lines = _lines()
        order = _place(lines=lines, pricing=price_order(lines, coupon_discount=104.0), payment_method="online")
        assert order.pricing.total == 0.0
        assert order.payment_status == PaymentStatus.PAID.value
        assert order.status == OrderStatus.CONFIRMED.value
        assert order.paid_at is not None

    def test_free_cod_order_still_waits_for_confirmation(self):
        lines = _lines()
        order = _place(lines=lines, pricing=price_order(lines, coupon_discount=104.0))
        assert order.payment_status == PaymentStatus.PENDING.value


class TestOrderSnapshot:
    def test_snapshot_shape(self):
        snapshot = _place().snapshot()
        assert snapshot["order_number"] == "GD000001"
        assert snapshot["pricing"]["total"] == 104.0
        assert snapshot["items"][0]["line_total"] == 104.0
        assert snapshot["delivery_address"]["pincode"] == "560001"
        assert snapshot["status"] == "pending"
