"""Configurable fake payment gateway for development and testing.

Simulates the gateway without external calls. Signatures are real HMACs over
a known test secret, so tests can produce valid and forged receipts the same
way the hosted checkout would. The gateway can be switched to "unavailable"
to exercise the 503 path.
"""

from uuid import uuid4

from ordering.gateway.port import GatewayError, GatewayOrder, PaymentGateway
from ordering.gateway.signature import compute_signature, signature_matches

TEST_KEY_ID = "rzp_test_fake"
TEST_KEY_SECRET = "fake-gateway-secret"


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, secret: str = TEST_KEY_SECRET, key_id: str = TEST_KEY_ID) -> None:
        self.secret = secret
        self._key_id = key_id
        self.available: bool = True
        self.calls: list[dict] = []

    @property
    def key_id(self) -> str:
        return self._key_id

    def configure(self, available: bool) -> None:
        """Configure gateway behavior at runtime."""
        self.available = available

    def create_order(
        self,
        amount_minor: int,
        currency: str,
        receipt: str,
        notes: dict | None = None,
    ) -> GatewayOrder:
        self.calls.append(
            {
                "method": "create_order",
                "amount_minor": amount_minor,
                "currency": currency,
                "receipt": receipt,
                "notes": notes or {},
            }
        )
        if not self.available:
            raise GatewayError("Gateway unreachable")

        return GatewayOrder(
            gateway_order_id=f"order_fake_{uuid4().hex[:14]}",
            amount_minor=amount_minor,
            currency=currency,
            receipt=receipt,
        )

    def sign(self, gateway_order_id: str, payment_id: str) -> str:
        """Produce the signature the hosted checkout would hand back."""
        return compute_signature(self.secret, gateway_order_id, payment_id)

    def verify_signature(self, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        self.calls.append(
            {
                "method": "verify_signature",
                "gateway_order_id": gateway_order_id,
                "payment_id": payment_id,
            }
        )
        return signature_matches(self.secret, gateway_order_id, payment_id, signature)
