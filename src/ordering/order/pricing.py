"""Pricing engine: subtotal, delivery fee, discount clamp and total.

Pure functions over resolved line items. Amounts are INR major units rounded
to 2 decimals; conversion to paise happens only at the gateway call.
"""

from dataclasses import dataclass

from ordering.config import StorefrontSettings, get_settings


def round_money(amount: float) -> float:
    return round(float(amount), 2)


@dataclass(frozen=True)
class PriceLine:
    """A resolved line: catalogue price times quantity."""

    product_id: str | None
    name: str
    quantity: int
    unit_price: float

    @property
    def line_total(self) -> float:
        return round_money(self.quantity * self.unit_price)

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit_price": round_money(self.unit_price),
            "line_total": self.line_total,
        }


@dataclass(frozen=True)
class PricingBreakdown:
    subtotal: float
    delivery_fee: float
    coupon_discount: float
    total: float

    def to_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "delivery_fee": self.delivery_fee,
            "coupon_discount": self.coupon_discount,
            "total": self.total,
        }


def compute_subtotal(lines: list[PriceLine]) -> float:
    return round_money(sum(line.quantity * line.unit_price for line in lines))


def delivery_fee_for(subtotal: float, settings: StorefrontSettings | None = None) -> float:
    """Free delivery at or above the threshold, flat fee below it."""
    settings = settings or get_settings()
    if subtotal >= settings.free_delivery_threshold:
        return 0.0
    return round_money(settings.delivery_fee)


def price_order(
    lines: list[PriceLine],
    coupon_discount: float = 0.0,
    settings: StorefrontSettings | None = None,
) -> PricingBreakdown:
    """Price a set of resolved lines.

    ``coupon_discount`` is expected to be pre-capped by the coupon validator;
    it is clamped again to ``subtotal + delivery_fee`` so the total can never
    go negative.
    """
    subtotal = compute_subtotal(lines)
    delivery_fee = delivery_fee_for(subtotal, settings)
    gross = round_money(subtotal + delivery_fee)
    discount = round_money(min(max(coupon_discount, 0.0), gross))
    total = round_money(max(gross - discount, 0.0))

    return PricingBreakdown(
        subtotal=subtotal,
        delivery_fee=delivery_fee,
        coupon_discount=discount,
        total=total,
    )


def to_minor_units(amount: float) -> int:
    """INR rupees to paise."""
    return int(round(amount * 100))
