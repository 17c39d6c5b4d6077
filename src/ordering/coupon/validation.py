"""Coupon validation as a read-only query, and claiming a use at checkout."""

from datetime import datetime

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from ordering.counters import get_counter_store
from ordering.coupon.coupon import Coupon, CouponEvaluation, normalize_code

logger = structlog.get_logger(__name__)


def usage_counter(code: str) -> str:
    return f"coupon:{normalize_code(code)}"


def find_coupon(code: str | None) -> Coupon | None:
    normalized = normalize_code(code)
    if not normalized:
        return None
    try:
        return current_domain.repository_for(Coupon).get(normalized)
    except ObjectNotFoundError:
        return None


def validate_coupon(code: str | None, order_amount: float, now: datetime | None = None) -> CouponEvaluation:
    """Evaluate ``code`` against ``order_amount`` without consuming a use.

    Unknown codes come back as ``valid=False`` with the storefront's
    "Invalid coupon code" reason rather than raising.
    """
    normalized = normalize_code(code)
    coupon = find_coupon(normalized)
    if coupon is None:
        logger.info("Unknown coupon code", code=normalized)
        return CouponEvaluation.rejected(normalized, "Invalid coupon code")

    live_count = get_counter_store().value(usage_counter(normalized), default=coupon.used_count)
    return coupon.evaluate(order_amount, now=now, used_count=live_count)


def claim_coupon_use(coupon: Coupon, order_number: str) -> None:
    """Take one use of ``coupon`` for ``order_number``, or fail when none are left.

    The usage counter is seeded from the coupon's recorded count the first
    time it is touched.
    """
    used_count = get_counter_store().increment_below(
        usage_counter(coupon.code),
        ceiling=coupon.usage_limit,
        start=coupon.used_count,
    )
    if used_count is None:
        logger.warning("Coupon usage limit reached at checkout", code=coupon.code, order_number=order_number)
        raise ValidationError({"coupon_code": ["This coupon has reached its usage limit"]})

    coupon.redeem(order_number, used_count)
    current_domain.repository_for(Coupon).add(coupon)
