"""Token table identity provider.

Maps opaque bearer tokens to principals. Admin tokens from ``ADMIN_TOKENS``
are registered as admin principals.
"""

from ordering.auth.port import AuthenticationError, IdentityProvider, Principal


class StaticTokenProvider(IdentityProvider):
    def __init__(self, principals: dict[str, Principal] | None = None) -> None:
        self._principals: dict[str, Principal] = dict(principals or {})

    def register(self, token: str, principal: Principal) -> None:
        self._principals[token] = principal

    def authenticate(self, token: str) -> Principal:
        principal = self._principals.get(token or "")
        if principal is None:
            raise AuthenticationError("Invalid or expired token")
        if not principal.is_active:
            raise AuthenticationError("Account is inactive")
        return principal
