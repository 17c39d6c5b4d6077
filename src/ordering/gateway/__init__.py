"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- RazorpayGateway when RAZORPAY_KEY_ID / RAZORPAY_KEY_SECRET are configured
- FakeGateway for development and testing
- nothing in production without credentials (callers get a 503)
"""

from ordering.config import get_settings
from ordering.exceptions import ServiceUnavailableError
from ordering.gateway.fake_adapter import FakeGateway
from ordering.gateway.port import PaymentGateway
from ordering.gateway.razorpay_adapter import RazorpayGateway

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway.

    Raises:
        ServiceUnavailableError: production environment without gateway credentials.
    """
    global _current_gateway
    if _current_gateway is None:
        settings = get_settings()
        if settings.gateway_configured:
            _current_gateway = RazorpayGateway(
                key_id=settings.razorpay_key_id,
                key_secret=settings.razorpay_key_secret,
                api_url=settings.razorpay_api_url,
            )
        elif settings.environment == "production":
            raise ServiceUnavailableError()
        else:
            _current_gateway = FakeGateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
