"""Order aggregate (CQRS): the core of the ordering domain.

An Order is priced once at placement and never repriced. After that only the
payment fields and the fulfilment status move, and both move forward only.

State Machine (6 states):
    PENDING → CONFIRMED → PREPARING → OUT_FOR_DELIVERY → DELIVERED
    CANCELLED (from PENDING, CONFIRMED, PREPARING)

Payment:
    PENDING → PAID (cash collected or gateway payment verified)
"""

import json
from datetime import UTC, date, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Date,
    DateTime,
    Float,
    HasMany,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.customer.contact import contact_errors, normalize_email, normalize_phone
from ordering.domain import ordering
from ordering.exceptions import ConflictError, InvalidTransitionError
from ordering.order.events import (
    GatewayOrderCreated,
    OrderCancelled,
    OrderDelivered,
    OrderPlaced,
    OrderStatusChanged,
    PaymentReceived,
)
from ordering.order.pricing import PriceLine, PricingBreakdown


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(Enum):
    COD = "cod"
    ONLINE = "online"


class CustomerType(Enum):
    COLLEGE = "college"
    OUTSIDER = "outsider"


class DeliverySlot(Enum):
    MORNING = "morning"
    EVENING = "evening"


class CancellationActor(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED},
    OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def allowed_transitions(status: str) -> set[str]:
    return {target.value for target in _VALID_TRANSITIONS[OrderStatus(status)]}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class DeliveryAddress:
    """Where the order goes. Guest checkouts store their free-text address in ``street``."""

    street = String(required=True, max_length=500)
    city = String(max_length=100)
    state = String(max_length=100)
    pincode = String(max_length=10)
    landmark = String(max_length=255)


@ordering.value_object(part_of="Order")
class ContactInfo:
    name = String(required=True, max_length=100)
    phone = String(required=True, max_length=20)
    email = String(required=True, max_length=254)

    @invariant.post
    def contact_must_be_reachable(self):
        errors = contact_errors(self.name, self.phone, self.email)
        if errors:
            raise ValidationError(errors)


@ordering.value_object(part_of="Order")
class OrderPricing:
    """Financial summary locked at placement: subtotal, delivery fee, coupon discount and total."""

    subtotal = Float(default=0.0, min_value=0.0)
    delivery_fee = Float(default=0.0, min_value=0.0)
    coupon_discount = Float(default=0.0, min_value=0.0)
    total = Float(default=0.0, min_value=0.0)
    currency = String(max_length=3, default="INR")

    @invariant.post
    def total_must_balance(self):
        expected = self.subtotal + self.delivery_fee - self.coupon_discount
        if abs(expected - self.total) > 0.005:
            raise ValidationError({"pricing": ["Total must equal subtotal plus delivery fee minus discount"]})
        if self.coupon_discount > self.subtotal + self.delivery_fee + 0.005:
            raise ValidationError({"pricing": ["Discount cannot exceed subtotal plus delivery fee"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A priced line snapshot. Never changes once the order is placed."""

    product_id = String(max_length=50)
    name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    line_total = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=20, unique=True)
    customer_id = String(required=True, max_length=50)
    items = HasMany(OrderItem)
    customer_type = String(choices=CustomerType, required=True)
    hostel = String(max_length=100)
    delivery_address = ValueObject(DeliveryAddress)
    contact_info = ValueObject(ContactInfo)
    pricing = ValueObject(OrderPricing)
    coupon_code = String(max_length=50)
    payment_method = String(choices=PaymentMethod, required=True)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    gateway_order_id = String(max_length=100)
    gateway_payment_id = String(max_length=100)
    gateway_signature = String(max_length=255)
    paid_at = DateTime()
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    delivery_date = Date()
    delivery_slot = String(choices=DeliverySlot, default=DeliverySlot.MORNING.value)
    notes = Text()
    delivered_at = DateTime()
    cancelled_at = DateTime()
    cancellation_reason = String(max_length=500)
    cancelled_by = String(choices=CancellationActor)
    placed_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def order_must_have_items(self):
        if not self.items:
            raise ValidationError({"items": ["Order must contain at least one item"]})

    @invariant.post
    def hostel_required_for_college_orders(self):
        if self.customer_type == CustomerType.COLLEGE.value and not self.hostel:
            raise ValidationError({"hostel": ["Hostel is required for college orders"]})
        if self.customer_type == CustomerType.OUTSIDER.value and self.hostel:
            raise ValidationError({"hostel": ["Hostel only applies to college orders"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number: str,
        customer_id: str,
        lines: list[PriceLine],
        pricing: PricingBreakdown,
        customer_type: str,
        delivery_address: dict,
        contact_info: dict,
        payment_method: str,
        hostel: str | None = None,
        coupon_code: str | None = None,
        currency: str = "INR",
        delivery_date: date | None = None,
        delivery_slot: str | None = None,
        notes: str | None = None,
    ):
        """Create a priced order.

        An online order whose total is zero has nothing to collect, so it is
        placed already paid and confirmed without touching the gateway.
        """
        now = datetime.now(UTC)

        if customer_type != CustomerType.COLLEGE.value:
            hostel = None

        paid_upfront = payment_method == PaymentMethod.ONLINE.value and pricing.total <= 0
        order = cls(
            order_number=order_number,
            customer_id=str(customer_id),
            items=[
                OrderItem(
                    product_id=line.product_id,
                    name=line.name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    line_total=line.line_total,
                )
                for line in lines
            ],
            customer_type=customer_type,
            hostel=hostel,
            delivery_address=DeliveryAddress(**delivery_address),
            contact_info=ContactInfo(
                name=(contact_info.get("name") or "").strip(),
                phone=normalize_phone(contact_info.get("phone")),
                email=normalize_email(contact_info.get("email")),
            ),
            pricing=OrderPricing(
                subtotal=pricing.subtotal,
                delivery_fee=pricing.delivery_fee,
                coupon_discount=pricing.coupon_discount,
                total=pricing.total,
                currency=currency,
            ),
            coupon_code=coupon_code,
            payment_method=payment_method,
            payment_status=PaymentStatus.PAID.value if paid_upfront else PaymentStatus.PENDING.value,
            paid_at=now if paid_upfront else None,
            status=OrderStatus.CONFIRMED.value if paid_upfront else OrderStatus.PENDING.value,
            delivery_date=delivery_date or now.date(),
            delivery_slot=delivery_slot or DeliverySlot.MORNING.value,
            notes=notes,
            placed_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=order.customer_id,
                customer_type=order.customer_type,
                items=json.dumps([line.to_dict() for line in lines]),
                contact_name=order.contact_info.name,
                contact_phone=order.contact_info.phone,
                contact_email=order.contact_info.email,
                subtotal=pricing.subtotal,
                delivery_fee=pricing.delivery_fee,
                coupon_discount=pricing.coupon_discount,
                total=pricing.total,
                coupon_code=coupon_code,
                payment_method=payment_method,
                payment_status=order.payment_status,
                status=order.status,
                delivery_date=order.delivery_date,
                delivery_slot=order.delivery_slot,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID.value

    def belongs_to(self, customer_id) -> bool:
        return str(self.customer_id) == str(customer_id)

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: OrderStatus):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransitionError(current.value, target_status.value)

    def _move_to(self, target_status: OrderStatus, changed_by: str, now: datetime):
        previous = self.status
        self.status = target_status.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                new_status=target_status.value,
                changed_by=changed_by,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def _assert_online_payment_pending(self):
        if self.payment_method != PaymentMethod.ONLINE.value:
            raise ConflictError("Order is not an online payment order", order_id=str(self.id))
        if self.payment_status != PaymentStatus.PENDING.value:
            raise ConflictError(
                f"Order payment is already {self.payment_status}",
                order_id=str(self.id),
            )
        if self.status == OrderStatus.CANCELLED.value:
            raise ConflictError("Order has been cancelled", order_id=str(self.id))

    def record_gateway_order(self, gateway_order_id: str, currency: str):
        """Remember the gateway order so payment retries reuse it."""
        self._assert_online_payment_pending()
        self.gateway_order_id = gateway_order_id
        self.updated_at = datetime.now(UTC)
        self.raise_(
            GatewayOrderCreated(
                order_id=str(self.id),
                gateway_order_id=gateway_order_id,
                amount=self.pricing.total,
                currency=currency,
            )
        )

    def _mark_paid(self, now: datetime, changed_by: str):
        self.payment_status = PaymentStatus.PAID.value
        self.paid_at = now
        self.updated_at = now
        if self.status == OrderStatus.PENDING.value:
            self._move_to(OrderStatus.CONFIRMED, changed_by, now)

    def confirm_cash_on_delivery(self):
        """Cash-on-delivery confirmation: payment becomes paid, a pending order becomes confirmed."""
        if self.payment_method != PaymentMethod.COD.value:
            raise ConflictError("Order is not a cash on delivery order", order_id=str(self.id))
        if self.payment_status != PaymentStatus.PENDING.value:
            raise ConflictError("Order has already been confirmed", order_id=str(self.id))
        if self.status == OrderStatus.CANCELLED.value:
            raise ConflictError("Order has been cancelled", order_id=str(self.id))

        now = datetime.now(UTC)
        self._mark_paid(now, changed_by=CancellationActor.CUSTOMER.value)
        self.raise_(
            PaymentReceived(
                order_id=str(self.id),
                order_number=self.order_number,
                payment_method=self.payment_method,
                amount=self.pricing.total,
                paid_at=now,
            )
        )

    def record_online_payment(self, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        """Record a verified gateway payment.

        Returns False when the same payment was already recorded, so a
        repeated verification leaves the order untouched. A different payment
        against an already paid order is a conflict.
        """
        if self.is_paid:
            if self.gateway_payment_id == payment_id and self.gateway_order_id == gateway_order_id:
                return False
            raise ConflictError(
                "Order has already been paid with a different payment",
                order_id=str(self.id),
                payment_id=payment_id,
            )

        self._assert_online_payment_pending()

        now = datetime.now(UTC)
        self.gateway_order_id = gateway_order_id
        self.gateway_payment_id = payment_id
        self.gateway_signature = signature
        self._mark_paid(now, changed_by="gateway")
        self.raise_(
            PaymentReceived(
                order_id=str(self.id),
                order_number=self.order_number,
                payment_method=self.payment_method,
                amount=self.pricing.total,
                gateway_order_id=gateway_order_id,
                gateway_payment_id=payment_id,
                paid_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Fulfilment lifecycle
    # -------------------------------------------------------------------
    def transition_to(self, target: str, changed_by: str = CancellationActor.ADMIN.value, reason: str | None = None):
        """Move the order to ``target``; cancellation goes through ``cancel``."""
        try:
            target_status = OrderStatus(target)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {target}"]}) from None

        if target_status == OrderStatus.CANCELLED:
            self.cancel(reason=reason, cancelled_by=changed_by)
            return

        self._assert_can_transition(target_status)
        now = datetime.now(UTC)
        self._move_to(target_status, changed_by, now)

        if target_status == OrderStatus.DELIVERED and self.delivered_at is None:
            self.delivered_at = now
            self.raise_(
                OrderDelivered(
                    order_id=str(self.id),
                    order_number=self.order_number,
                    delivered_at=now,
                )
            )

    def cancel(self, reason: str | None = None, cancelled_by: str = CancellationActor.CUSTOMER.value):
        """Cancel the order. Allowed until it leaves the kitchen."""
        self._assert_can_transition(OrderStatus.CANCELLED)

        now = datetime.now(UTC)
        previous = self.status
        self.status = OrderStatus.CANCELLED.value
        self.cancellation_reason = reason
        self.cancelled_by = cancelled_by
        self.cancelled_at = now
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                reason=reason,
                cancelled_by=cancelled_by,
                cancelled_at=now,
            )
        )

    def annotate(self, notes: str):
        """Replace the admin notes on the order."""
        self.notes = notes
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------
    def snapshot(self) -> dict:
        """Plain-dict view of the order for API responses."""
        address = self.delivery_address
        contact = self.contact_info
        return {
            "order_id": str(self.id),
            "order_number": self.order_number,
            "customer_id": self.customer_id,
            "customer_type": self.customer_type,
            "hostel": self.hostel,
            "items": [
                {
                    "product_id": item.product_id,
                    "name": item.name,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "line_total": item.line_total,
                }
                for item in self.items
            ],
            "delivery_address": {
                "street": address.street,
                "city": address.city,
                "state": address.state,
                "pincode": address.pincode,
                "landmark": address.landmark,
            }
            if address
            else None,
            "contact_info": {"name": contact.name, "phone": contact.phone, "email": contact.email} if contact else None,
            "pricing": {
                "subtotal": self.pricing.subtotal,
                "delivery_fee": self.pricing.delivery_fee,
                "coupon_discount": self.pricing.coupon_discount,
                "total": self.pricing.total,
                "currency": self.pricing.currency,
            },
            "coupon_code": self.coupon_code,
            "payment_method": self.payment_method,
            "payment_status": self.payment_status,
            "gateway_order_id": self.gateway_order_id,
            "gateway_payment_id": self.gateway_payment_id,
            "paid_at": _iso(self.paid_at),
            "status": self.status,
            "delivery_date": _iso(self.delivery_date),
            "delivery_slot": self.delivery_slot,
            "notes": self.notes,
            "delivered_at": _iso(self.delivered_at),
            "cancelled_at": _iso(self.cancelled_at),
            "cancellation_reason": self.cancellation_reason,
            "cancelled_by": self.cancelled_by,
            "placed_at": _iso(self.placed_at),
            "updated_at": _iso(self.updated_at),
        }


def _iso(value):
    return value.isoformat() if value is not None else None
