"""Order builder: turns a checkout request into a priced, persisted Order.

Both checkout paths meet here. The authenticated path references catalogue
products by id; the guest path names them the way the storefront cart shows
them. Either way the catalogue price is what gets charged.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date

import structlog
from protean.core.unit_of_work import UnitOfWork
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from ordering.catalogue import get_catalogue
from ordering.config import get_settings
from ordering.coupon.coupon import normalize_code
from ordering.coupon.validation import claim_coupon_use, find_coupon, validate_coupon
from ordering.customer.contact import contact_errors
from ordering.order.numbering import allocate_order_number
from ordering.order.order import CustomerType, DeliverySlot, Order, PaymentMethod
from ordering.order.pricing import PriceLine, compute_subtotal, price_order

logger = structlog.get_logger(__name__)


@dataclass
class CheckoutRequest:
    """Everything both checkout paths share once the lines are resolved."""

    customer_id: str
    lines: list[PriceLine]
    customer_type: str
    delivery_address: dict
    contact_info: dict
    payment_method: str
    hostel: str | None = None
    coupon_code: str | None = None
    delivery_date: date | None = None
    delivery_slot: str | None = None
    notes: str | None = None
    channel: str = field(default="authenticated")


# ---------------------------------------------------------------------------
# Line resolution
# ---------------------------------------------------------------------------
def _items(items) -> list[dict]:
    if not items:
        raise ValidationError({"items": ["Order must contain at least one item"]})
    if not isinstance(items, list):
        raise ValidationError({"items": ["Items must be a list"]})
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValidationError({"items": [f"Item {index + 1}: must be an object"]})
    return items


def _declared_price(raw, index: int) -> float | None:
    if raw is None:
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ValidationError({"items": [f"Item {index + 1}: price must be a number"]}) from None


def _quantity(raw, index: int) -> int:
    try:
        quantity = int(raw)
    except (TypeError, ValueError):
        quantity = 0
    if quantity < 1:
        raise ValidationError({"items": [f"Item {index + 1}: quantity must be at least 1"]})
    return quantity


def resolve_product_lines(items: list[dict]) -> list[PriceLine]:
    """Authenticated carts: every line names a catalogue product id."""
    catalogue = get_catalogue()
    lines = []
    for index, item in enumerate(_items(items)):
        product_id = item.get("product_id")
        product = catalogue.get(str(product_id)) if product_id else None
        if product is None:
            raise ObjectNotFoundError({"product_id": [f"Product {product_id} not found"]})
        if not product.is_available:
            raise ValidationError({"items": [f"{product.display_name} is currently unavailable"]})

        lines.append(
            PriceLine(
                product_id=product.id,
                name=product.display_name,
                quantity=_quantity(item.get("quantity"), index),
                unit_price=product.price,
            )
        )
    return lines


def resolve_guest_lines(items: list[dict]) -> list[PriceLine]:
    """Guest carts name products; each name must resolve to exactly one catalogue product.

    A declared price is only a cross-check: if it is further from the
    catalogue price than the configured tolerance the order is rejected.
    """
    catalogue = get_catalogue()
    tolerance = get_settings().price_tolerance
    lines = []
    for index, item in enumerate(_items(items)):
        name = str(item.get("name") or "").strip()
        matches = catalogue.find_by_name(name)
        if not matches:
            raise ValidationError({"items": [f"Unresolved item: {name or '(no name)'} is not in the catalogue"]})
        if len(matches) > 1:
            raise ValidationError({"items": [f"Unresolved item: {name} matches more than one product"]})

        product = matches[0]
        if not product.is_available:
            raise ValidationError({"items": [f"{product.display_name} is currently unavailable"]})

        declared = _declared_price(item.get("price"), index)
        if declared is not None and abs(declared - product.price) > tolerance:
            raise ValidationError(
                {"items": [f"Price for {product.display_name} has changed to ₹{product.price:g}"]}
            )

        lines.append(
            PriceLine(
                product_id=product.id,
                name=product.display_name,
                quantity=_quantity(item.get("quantity"), index),
                unit_price=product.price,
            )
        )
    return lines


# ---------------------------------------------------------------------------
# Shared placement
# ---------------------------------------------------------------------------
_placement_lock = threading.Lock()


@contextmanager
def placement_unit_of_work():
    """Unit of work for one checkout, committed while no other checkout in this process runs.

    The memory provider commits a whole-database snapshot; overlapping
    placements must not interleave. Uniqueness across processes comes from
    the counter store.
    """
    with _placement_lock, UnitOfWork():
        yield


def _validate_request(request: CheckoutRequest) -> None:
    errors = contact_errors(
        request.contact_info.get("name"),
        request.contact_info.get("phone"),
        request.contact_info.get("email"),
    )

    if request.customer_type not in {t.value for t in CustomerType}:
        errors["customer_type"] = ["Customer type must be college or outsider"]
    elif request.customer_type == CustomerType.COLLEGE.value and not (request.hostel or "").strip():
        errors["hostel"] = ["Hostel is required for college orders"]

    if request.payment_method not in {m.value for m in PaymentMethod}:
        errors["payment_method"] = ["Payment method must be cod or online"]
    if request.delivery_slot and request.delivery_slot not in {s.value for s in DeliverySlot}:
        errors["delivery_slot"] = ["Delivery slot must be morning or evening"]
    if not (request.delivery_address.get("street") or "").strip():
        errors["delivery_address"] = ["Delivery address is required"]

    if errors:
        raise ValidationError(errors)


def place_order(request: CheckoutRequest) -> Order:
    """Price, number, redeem the coupon and persist.

    Runs inside the caller's unit of work, normally ``placement_unit_of_work``.
    The order number and the coupon use are taken from the counter store the
    moment they are claimed; the coupon record and the order are committed
    together or not at all.
    """
    _validate_request(request)

    discount = 0.0
    coupon_code = normalize_code(request.coupon_code) or None
    if coupon_code:
        evaluation = validate_coupon(coupon_code, compute_subtotal(request.lines))
        if not evaluation.valid:
            raise ValidationError({"coupon_code": [evaluation.reason]})
        discount = evaluation.discount_amount

    settings = get_settings()
    pricing = price_order(request.lines, coupon_discount=discount, settings=settings)
    order_number = allocate_order_number()

    if coupon_code:
        claim_coupon_use(find_coupon(coupon_code), order_number)

    order = Order.place(
        order_number=order_number,
        customer_id=request.customer_id,
        lines=request.lines,
        pricing=pricing,
        customer_type=request.customer_type,
        delivery_address=request.delivery_address,
        contact_info=request.contact_info,
        payment_method=request.payment_method,
        hostel=request.hostel,
        coupon_code=coupon_code,
        currency=settings.currency,
        delivery_date=request.delivery_date,
        delivery_slot=request.delivery_slot,
        notes=request.notes,
    )
    current_domain.repository_for(Order).add(order)

    logger.info(
        "Order placed",
        order_id=str(order.id),
        order_number=order.order_number,
        channel=request.channel,
        payment_method=order.payment_method,
        total=order.pricing.total,
    )
    return order


def placement_result(order: Order) -> dict:
    return {
        "order_id": str(order.id),
        "order_number": order.order_number,
        "pricing": {
            "subtotal": order.pricing.subtotal,
            "delivery_fee": order.pricing.delivery_fee,
            "coupon_discount": order.pricing.coupon_discount,
            "total": order.pricing.total,
        },
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "status": order.status,
    }
