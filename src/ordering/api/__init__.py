"""Ordering API package."""

from ordering.api.routes import admin_router, coupon_router, order_router, payment_router

__all__ = ["admin_router", "coupon_router", "order_router", "payment_router"]
