"""Storefront settings read from the environment.

Protean's own configuration (providers, event store, brokers) stays with the
domain; these are the business knobs the ordering code consults: delivery
pricing, price tolerance for guest carts, order numbering and gateway keys.
"""

import os
from dataclasses import dataclass, field


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw not in (None, "") else default


def _csv_env(name: str) -> tuple[str, ...]:
    raw = os.getenv(name, "")
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class StorefrontSettings:
    free_delivery_threshold: float = 100.0
    delivery_fee: float = 30.0
    currency: str = "INR"
    price_tolerance: float = 0.01
    order_number_prefix: str = "GD"
    razorpay_key_id: str | None = None
    razorpay_key_secret: str | None = None
    razorpay_api_url: str = "https://api.razorpay.com/v1"
    admin_tokens: tuple[str, ...] = field(default_factory=tuple)
    environment: str = "development"

    @property
    def gateway_configured(self) -> bool:
        """True when real gateway credentials are present."""
        return bool(self.razorpay_key_id and self.razorpay_key_secret) and self.razorpay_key_id != "your-razorpay-key-id"

    @classmethod
    def from_env(cls) -> "StorefrontSettings":
        return cls(
            free_delivery_threshold=_float_env("FREE_DELIVERY_THRESHOLD", 100.0),
            delivery_fee=_float_env("DELIVERY_FEE", 30.0),
            currency=os.getenv("CURRENCY", "INR"),
            price_tolerance=_float_env("PRICE_TOLERANCE", 0.01),
            order_number_prefix=os.getenv("ORDER_NUMBER_PREFIX", "GD"),
            razorpay_key_id=os.getenv("RAZORPAY_KEY_ID") or None,
            razorpay_key_secret=os.getenv("RAZORPAY_KEY_SECRET") or None,
            razorpay_api_url=os.getenv("RAZORPAY_API_URL", "https://api.razorpay.com/v1"),
            admin_tokens=_csv_env("ADMIN_TOKENS"),
            environment=(os.getenv("PROTEAN_ENV") or "development").lower(),
        )


_current_settings: StorefrontSettings | None = None


def get_settings() -> StorefrontSettings:
    """Return the active settings, loading them from the environment once."""
    global _current_settings
    if _current_settings is None:
        _current_settings = StorefrontSettings.from_env()
    return _current_settings


def set_settings(settings: StorefrontSettings) -> None:
    """Override the active settings (useful for tests)."""
    global _current_settings
    _current_settings = settings


def reset_settings() -> None:
    """Drop overrides so the next read goes back to the environment."""
    global _current_settings
    _current_settings = None
