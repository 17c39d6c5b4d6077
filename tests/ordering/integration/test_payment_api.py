"""Integration tests for payment and coupon endpoints."""

from ordering.config import StorefrontSettings, set_settings
from ordering.coupon.coupon import Coupon
from ordering.gateway import reset_gateway
from protean import current_domain

CUSTOMER = {"Authorization": "Bearer customer-token"}
OTHER_CUSTOMER = {"Authorization": "Bearer other-token"}

class TestCashOnDelivery:
    def test_confirm(self, client, create_order):
        order = create_order()
        response = client.post("/payments/cod/confirm", json={"order_id": order["order_id"]}, headers=CUSTOMER)

        assert response.status_code == 200
        assert response.json()["order"]["payment_status"] == "paid"
        assert response.json()["order"]["status"] == "confirmed"

    def test_other_customer_gets_not_found(self, client, create_order):
        order = create_order()
        response = client.post("/payments/cod/confirm", json={"order_id": order["order_id"]}, headers=OTHER_CUSTOMER)
        assert response.status_code == 404

    def test_second_confirmation_is_a_conflict(self, client, create_order):
        order = create_order()
        client.post("/payments/cod/confirm", json={"order_id": order["order_id"]}, headers=CUSTOMER)
        response = client.post("/payments/cod/confirm", json={"order_id": order["order_id"]}, headers=CUSTOMER)
        assert response.status_code == 409

class TestOnlinePayment:
    def test_gateway_key(self, client, gateway):
        response = client.get("/payments/key")
        assert response.status_code == 200
        assert response.json()["key_id"] == gateway.key_id

    def test_key_unavailable_in_production_without_credentials(self, client):
        set_settings(StorefrontSettings(environment="production"))
        reset_gateway()

        response = client.get("/payments/key")
        assert response.status_code == 503
        assert response.json()["success"] is False

    def test_create_gateway_order(self, client, create_order, gateway):
        order = create_order(payment_method="online")
        response = client.post("/payments/gateway-orders", json={"order_id": order["order_id"]})

        assert response.status_code == 201
        body = response.json()
        assert body["amount_minor"] == 10400
        assert body["gateway_order_id"].startswith("order_fake_")

    def test_gateway_down_is_503(self, client, create_order, gateway):
        order = create_order(payment_method="online")
        gateway.configure(available=False)

        response = client.post("/payments/gateway-orders", json={"order_id": order["order_id"]})
        assert response.status_code == 503

    def test_verify_payment(self, client, create_order, gateway):
        order = create_order(payment_method="online")
        gateway_order_id = client.post("/payments/gateway-orders", json={"order_id": order["order_id"]}).json()[
            "gateway_order_id"
        ]

        response = client.post(
            "/payments/verify",
            json={
                "order_id": order["order_id"],
                "gateway_order_id": gateway_order_id,
                "payment_id": "pay_api_001",
                "signature": gateway.sign(gateway_order_id, "pay_api_001"),
            },
        )
        assert response.status_code == 200
        assert response.json()["order"]["payment_status"] == "paid"

    def test_forged_signature_is_rejected(self, client, create_order, gateway):
        order = create_order(payment_method="online")
        gateway_order_id = client.post("/payments/gateway-orders", json={"order_id": order["order_id"]}).json()[
            "gateway_order_id"
        ]

        response = client.post(
            "/payments/verify",
            json={
                "order_id": order["order_id"],
                "gateway_order_id": gateway_order_id,
                "payment_id": "pay_api_001",
                "signature": "0" * 64,
            },
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Payment verification failed"

        current = client.get(f"/orders/{order['order_id']}", headers=CUSTOMER).json()["order"]
        assert current["payment_status"] == "pending"

class TestCouponValidation:
    def test_valid_coupon(self, client):
        response = client.post("/coupons/validate", json={"code": "welcome10", "order_amount": 200})

        assert response.status_code == 200
        body = response.json()
        assert body["valid"] is True
        assert body["code"] == "WELCOME10"
        assert body["discount_amount"] == 20.0

    def test_below_minimum(self, client):
        response = client.post("/coupons/validate", json={"code": "SAVE20", "order_amount": 17})

        assert response.status_code == 400
        body = response.json()
        assert body["valid"] is False
        assert body["message"] == "Minimum order amount of ₹100 required for this coupon"

    def test_unknown_code(self, client):
        response = client.post("/coupons/validate", json={"code": "FREEMILK", "order_amount": 200})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid coupon code"

    def test_validation_does_not_consume_a_use(self, client):
        client.post("/coupons/validate", json={"code": "WELCOME10", "order_amount": 200})
        client.post("/coupons/validate", json={"code": "WELCOME10", "order_amount": 200})

        assert current_domain.repository_for(Coupon).get("WELCOME10").used_count == 0
