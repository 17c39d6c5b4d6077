"""API test client with a token table for a customer, a second customer and an admin."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api import admin_router, coupon_router, order_router, payment_router
from ordering.api.errors import register_exception_handlers
from ordering.auth import set_identity_provider
from ordering.auth.port import Principal
from ordering.auth.static_adapter import StaticTokenProvider


@pytest.fixture()
def client():
    set_identity_provider(
        StaticTokenProvider(
            {
                "customer-token": Principal(id="cust-api-001"),
                "other-token": Principal(id="cust-api-002"),
                "disabled-token": Principal(id="cust-api-003", is_active=False),
                "admin-token": Principal(id="admin-1", is_admin=True),
            }
        )
    )

    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(order_router)
    app.include_router(payment_router)
    app.include_router(coupon_router)
    app.include_router(admin_router)
    return TestClient(app)

@pytest.fixture()
def order_payload(contact, address):
    return {
        "items": [{"product_id": "milk-500ml", "quantity": 2}],
        "customer_type": "outsider",
        "delivery_address": address,
        "contact_info": contact,
        "payment_method": "cod",
    }

@pytest.fixture()
def create_order(client, order_payload):
    """POST /orders as the default customer and return the order body."""

    def _create(headers=None, **overrides):
        headers = headers or {"Authorization": "Bearer customer-token"}
        response = client.post("/orders", json={**order_payload, **overrides}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["order"]

    return _create
