"""Seed the storefront coupon catalogue."""

from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain

from ordering.coupon.coupon import Coupon, CouponType

logger = structlog.get_logger(__name__)

_VALID_FROM = datetime(2026, 1, 1, tzinfo=UTC)
_VALID_UNTIL = datetime(2027, 12, 31, 23, 59, 59, tzinfo=UTC)

SEED_COUPONS = [
    {
        "code": "WELCOME10",
        "coupon_type": CouponType.PERCENTAGE.value,
        "value": 10,
        "description": "10% off on your first order",
        "min_order_amount": 0,
        "max_discount": 50,
        "usage_limit": 1000,
    },
    {
        "code": "SAVE20",
        "coupon_type": CouponType.FIXED.value,
        "value": 20,
        "description": "₹20 off on orders above ₹100",
        "min_order_amount": 100,
        "max_discount": 20,
        "usage_limit": 500,
    },
    {
        "code": "MILK15",
        "coupon_type": CouponType.PERCENTAGE.value,
        "value": 15,
        "description": "15% off on milk orders",
        "min_order_amount": 0,
        "max_discount": 100,
        "usage_limit": 200,
    },
    {
        "code": "FIRST50",
        "coupon_type": CouponType.FIXED.value,
        "value": 50,
        "description": "₹50 off on orders above ₹200",
        "min_order_amount": 200,
        "max_discount": 50,
        "usage_limit": 100,
    },
    {
        "code": "STUDENT10",
        "coupon_type": CouponType.PERCENTAGE.value,
        "value": 10,
        "description": "10% off for students",
        "min_order_amount": 50,
        "max_discount": 30,
        "usage_limit": 1000,
    },
    {
        "code": "LILY",
        "coupon_type": CouponType.PERCENTAGE.value,
        "value": 100,
        "description": "Special 100% off",
        "min_order_amount": 0,
        "max_discount": 1000000,
        "usage_limit": 1000000,
    },
]


def seed_coupons() -> list[Coupon]:
    """Insert any seed coupon that is not stored yet. Existing usage counts are kept."""
    repo = current_domain.repository_for(Coupon)
    existing = {coupon.code for coupon in repo._dao.query.all().items}

    created = []
    for data in SEED_COUPONS:
        if data["code"] in existing:
            continue
        coupon = Coupon(valid_from=_VALID_FROM, valid_until=_VALID_UNTIL, **data)
        repo.add(coupon)
        created.append(coupon)

    if created:
        logger.info("Seeded coupons", codes=[c.code for c in created])
    return created
