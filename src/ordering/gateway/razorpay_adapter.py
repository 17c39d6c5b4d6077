"""Razorpay gateway adapter.

Creates orders through the Razorpay Orders REST API (basic auth with the key
id and secret) and verifies checkout signatures locally with the key secret.
"""

import httpx
import structlog

from ordering.gateway.port import GatewayError, GatewayOrder, PaymentGateway
from ordering.gateway.signature import signature_matches

logger = structlog.get_logger(__name__)


class RazorpayGateway(PaymentGateway):
    """Production Razorpay adapter."""

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        api_url: str = "https://api.razorpay.com/v1",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._key_id = key_id
        self.key_secret = key_secret
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def key_id(self) -> str:
        return self._key_id

    def create_order(
        self,
        amount_minor: int,
        currency: str,
        receipt: str,
        notes: dict | None = None,
    ) -> GatewayOrder:
        payload = {
            "amount": amount_minor,
            "currency": currency,
            "receipt": receipt,
            "payment_capture": 1,
            "notes": notes or {},
        }
        try:
            with httpx.Client(
                auth=(self._key_id, self.key_secret),
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = client.post(f"{self.api_url}/orders", json=payload)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Razorpay order creation failed", receipt=receipt, error=str(exc))
            raise GatewayError(str(exc)) from exc

        try:
            body = response.json()
            return GatewayOrder(
                gateway_order_id=body["id"],
                amount_minor=int(body.get("amount", amount_minor)),
                currency=body.get("currency", currency),
                receipt=body.get("receipt", receipt),
            )
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.error("Unexpected Razorpay order response", receipt=receipt, body=response.text[:200])
            raise GatewayError(f"Unexpected gateway response: {exc!r}") from exc

    def verify_signature(self, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        return signature_matches(self.key_secret, gateway_order_id, payment_id, signature)
