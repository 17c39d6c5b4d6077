"""Ordering exceptions beyond the ones Protean already provides.

Input problems use ``protean.exceptions.ValidationError`` and missing records
use ``ObjectNotFoundError``, the same as the rest of the domain. The classes
here cover the remaining failure kinds the API maps to distinct HTTP codes.
"""

from protean.exceptions import ValidationError


class ConflictError(Exception):
    """The order exists but is in the wrong state for the requested operation."""

    def __init__(self, message: str, **context) -> None:
        super().__init__(message)
        self.message = message
        self.context = context


class InvalidTransitionError(ValidationError):
    """An order status change that the transition table does not allow."""

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__({"status": [f"Cannot transition from {current} to {target}"]})


class InvalidSignatureError(Exception):
    """A payment receipt whose HMAC does not match the gateway secret."""

    def __init__(self, order_id: str, gateway_order_id: str) -> None:
        super().__init__("Invalid payment signature")
        self.order_id = order_id
        self.gateway_order_id = gateway_order_id


class ServiceUnavailableError(Exception):
    """The payment gateway is not configured or could not be reached."""

    def __init__(self, message: str = "Payment service is not configured. Please contact administrator.") -> None:
        super().__init__(message)
        self.message = message
