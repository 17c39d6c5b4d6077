"""HMAC signatures proving a payment receipt came from the gateway."""

import hashlib
import hmac


def compute_signature(secret: str, gateway_order_id: str, payment_id: str) -> str:
    """Hex HMAC-SHA256 of ``"<gateway_order_id>|<payment_id>"`` keyed by the gateway secret."""
    message = f"{gateway_order_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def signature_matches(secret: str, gateway_order_id: str, payment_id: str, signature: str) -> bool:
    """Constant-time comparison of a client-supplied signature."""
    if not signature:
        return False
    expected = compute_signature(secret, gateway_order_id, payment_id)
    return hmac.compare_digest(expected, signature)
