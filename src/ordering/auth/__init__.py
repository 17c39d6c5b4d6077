"""Identity provider factory with get/set/reset, seeded with admin tokens from settings."""

from ordering.auth.port import IdentityProvider, Principal
from ordering.auth.static_adapter import StaticTokenProvider
from ordering.config import get_settings

_current_provider: IdentityProvider | None = None


def get_identity_provider() -> IdentityProvider:
    global _current_provider
    if _current_provider is None:
        _current_provider = StaticTokenProvider(
            {token: Principal(id=f"admin-{index}", is_admin=True) for index, token in enumerate(get_settings().admin_tokens, 1)}
        )
    return _current_provider


def set_identity_provider(provider: IdentityProvider) -> None:
    """Override the active identity provider (useful for tests)."""
    global _current_provider
    _current_provider = provider


def reset_identity_provider() -> None:
    global _current_provider
    _current_provider = None
