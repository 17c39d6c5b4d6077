"""Coupon aggregate: seeded discount codes with a usage ceiling.

Coupons are reference data: the only field that changes after seeding is
``used_count``. Uses are claimed from the ``coupon:<CODE>`` counter in the
counter store, whose increment refuses to pass ``usage_limit``; the
aggregate records the claimed count and raises ``CouponRedeemed``.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering
from ordering.order.pricing import round_money


class CouponType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass(frozen=True)
class CouponEvaluation:
    """Outcome of checking a coupon against an order amount."""

    code: str
    valid: bool
    discount_amount: float = 0.0
    description: str | None = None
    reason: str | None = None

    @classmethod
    def rejected(cls, code: str, reason: str) -> "CouponEvaluation":
        return cls(code=code, valid=False, reason=reason)


def normalize_code(code: str | None) -> str:
    return (code or "").strip().upper()


@ordering.event(part_of="Coupon")
class CouponRedeemed:
    """A coupon use was consumed by an order."""

    __version__ = "v1"

    code = String(required=True)
    order_number = String(required=True)
    used_count = Integer(required=True)
    redeemed_at = DateTime(required=True)


@ordering.aggregate
class Coupon:
    code = String(identifier=True, max_length=50)
    coupon_type = String(choices=CouponType, required=True)
    value = Float(required=True, min_value=0.0)
    description = String(max_length=255)
    min_order_amount = Float(default=0.0)
    max_discount = Float(required=True, min_value=0.0)
    valid_from = DateTime(required=True)
    valid_until = DateTime(required=True)
    usage_limit = Integer(required=True, min_value=0)
    used_count = Integer(default=0)
    is_active = Boolean(default=True)

    @invariant.post
    def used_count_cannot_exceed_limit(self):
        if self.used_count is not None and self.used_count > self.usage_limit:
            raise ValidationError({"used_count": ["Coupon usage cannot exceed its limit"]})

    @invariant.post
    def validity_window_must_be_ordered(self):
        if self.valid_from and self.valid_until and self.valid_from > self.valid_until:
            raise ValidationError({"valid_until": ["Coupon validity must end after it starts"]})

    def discount_for(self, order_amount: float) -> float:
        """Discount this coupon grants on ``order_amount``, capped at the amount itself."""
        if CouponType(self.coupon_type) == CouponType.PERCENTAGE:
            raw = order_amount * self.value / 100
        else:
            raw = self.value
        return round_money(max(min(raw, self.max_discount, order_amount), 0.0))

    def evaluate(
        self,
        order_amount: float,
        now: datetime | None = None,
        used_count: int | None = None,
    ) -> CouponEvaluation:
        """Check eligibility in the order the storefront reports problems.

        ``used_count`` overrides the recorded usage with the live counter value.
        """
        now = now or datetime.now(UTC)
        used_count = self.used_count if used_count is None else max(self.used_count, used_count)

        if not self.is_active:
            return CouponEvaluation.rejected(self.code, "This coupon is no longer active")
        if now < _aware(self.valid_from):
            return CouponEvaluation.rejected(self.code, "This coupon is not yet valid")
        if now > _aware(self.valid_until):
            return CouponEvaluation.rejected(self.code, "This coupon has expired")
        if used_count >= self.usage_limit:
            return CouponEvaluation.rejected(self.code, "This coupon has reached its usage limit")
        if order_amount < self.min_order_amount:
            return CouponEvaluation.rejected(
                self.code,
                f"Minimum order amount of ₹{self.min_order_amount:g} required for this coupon",
            )

        return CouponEvaluation(
            code=self.code,
            valid=True,
            discount_amount=self.discount_for(order_amount),
            description=self.description,
        )

    def redeem(self, order_number: str, used_count: int) -> None:
        """Record a use claimed for ``order_number``.

        ``used_count`` is the usage counter's value after the claim. Claims can
        be recorded out of order, so the count never moves backwards.
        """
        if used_count > self.usage_limit:
            raise ValidationError({"coupon_code": ["This coupon has reached its usage limit"]})

        self.used_count = max(self.used_count, used_count)
        self.raise_(
            CouponRedeemed(
                code=self.code,
                order_number=order_number,
                used_count=self.used_count,
                redeemed_at=datetime.now(UTC),
            )
        )


def _aware(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment
