"""Payment gateway port (abstract interface).

Defines the contract that gateway adapters implement so the payment
coordinator can switch between FakeGateway (dev/test) and RazorpayGateway
(production) without touching domain code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class GatewayOrder:
    """A collection intent registered with the gateway."""

    gateway_order_id: str
    amount_minor: int
    currency: str
    receipt: str


class GatewayError(Exception):
    """The gateway rejected a call or could not be reached."""


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @property
    @abstractmethod
    def key_id(self) -> str:
        """Public key handed to the checkout widget."""
        ...

    @abstractmethod
    def create_order(
        self,
        amount_minor: int,
        currency: str,
        receipt: str,
        notes: dict | None = None,
    ) -> GatewayOrder:
        """Register a collection intent for ``amount_minor`` (paise)."""
        ...

    @abstractmethod
    def verify_signature(
        self,
        gateway_order_id: str,
        payment_id: str,
        signature: str,
    ) -> bool:
        """Verify that a payment receipt is authentically from the gateway."""
        ...
