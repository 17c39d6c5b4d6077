"""Shared fixtures for the ordering tests."""

import json

import pytest
from ordering.coupon.seed import seed_coupons
from ordering.gateway import set_gateway
from ordering.gateway.fake_adapter import FakeGateway
from ordering.notifier import set_notifier
from ordering.notifier.fake_adapter import FakeNotifier
from ordering.order.placement import PlaceGuestOrder, PlaceOrder
from protean import current_domain


@pytest.fixture(autouse=True)
def coupons():
    """The storefront coupon catalogue, freshly seeded for each test."""
    return {coupon.code: coupon for coupon in seed_coupons()}


@pytest.fixture()
def gateway():
    fake = FakeGateway()
    set_gateway(fake)
    return fake


@pytest.fixture()
def notifier():
    fake = FakeNotifier()
    set_notifier(fake)
    return fake


@pytest.fixture()
def contact():
    return {"name": "Asha Rao", "phone": "9876543210", "email": "asha@example.com"}


@pytest.fixture()
def address():
    return {
        "street": "12 MG Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560001",
        "landmark": "Near the clock tower",
    }


@pytest.fixture()
def place_order(contact, address):
    """Place an authenticated order through the domain; returns the placement result."""

    def _place(customer_id="cust-001", items=None, **overrides):
        fields = {
            "customer_id": customer_id,
            "items": json.dumps(items or [{"product_id": "milk-500ml", "quantity": 2}]),
            "customer_type": "outsider",
            "delivery_address": json.dumps(address),
            "contact_info": json.dumps(contact),
            "payment_method": "cod",
        }
        fields.update(overrides)
        return current_domain.process(PlaceOrder(**fields), asynchronous=False)

    return _place


@pytest.fixture()
def place_guest_order(contact):
    """Place a guest order through the domain; returns the placement result."""

    def _place(items=None, contact_info=None, **overrides):
        fields = {
            "items": json.dumps(items or [{"name": "Fresh Boiled Milk (500 ml)", "quantity": 2, "price": 52}]),
            "customer_type": "college",
            "hostel": "Block C",
            "address": "Room 214, Block C Hostel",
            "contact_info": json.dumps(contact_info or contact),
            "payment_method": "online",
        }
        fields.update(overrides)
        return current_domain.process(PlaceGuestOrder(**fields), asynchronous=False)

    return _place
