"""Shared BDD fixtures and step definitions for checkout."""

import pytest
from ordering.order.order import Order
from protean import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def cart():
    return []


@pytest.fixture()
def error():
    """Container for the exception a When step captured."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a cart with {quantity:d} x "{product_id}"'))
@given(parsers.cfparse('the cart also has {quantity:d} x "{product_id}"'))
def _(cart, quantity, product_id):
    cart.append({"product_id": product_id, "quantity": quantity})


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
def _stored(placed):
    return current_domain.repository_for(Order).get(placed["order_id"])


@then(parsers.cfparse("the order subtotal is {amount:f}"))
def _(placed, amount):
    assert placed["pricing"]["subtotal"] == amount


@then(parsers.cfparse("the delivery fee is {amount:f}"))
def _(placed, amount):
    assert placed["pricing"]["delivery_fee"] == amount


@then(parsers.cfparse("the coupon discount is {amount:f}"))
def _(placed, amount):
    assert placed["pricing"]["coupon_discount"] == amount


@then(parsers.cfparse("the order total is {amount:f}"))
def _(placed, amount):
    assert placed["pricing"]["total"] == amount


@then(parsers.cfparse('the payment status is "{status}"'))
def _(placed, status):
    assert _stored(placed).payment_status == status


@then(parsers.cfparse('the order status is "{status}"'))
def _(placed, status):
    assert _stored(placed).status == status
