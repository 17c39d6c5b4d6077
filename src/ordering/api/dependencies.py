"""Request authentication for the Ordering API."""

from fastapi import Header, HTTPException

from ordering.auth import get_identity_provider
from ordering.auth.port import AuthenticationError, Principal


def current_principal(authorization: str = Header(default="")) -> Principal:
    """Resolve ``Authorization: Bearer <token>`` through the identity provider."""
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Authentication required")

    try:
        return get_identity_provider().authenticate(token.strip())
    except AuthenticationError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc


def admin_principal(authorization: str = Header(default="")) -> Principal:
    principal = current_principal(authorization)
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return principal
