"""Domain events for the Order aggregate.

Events are versioned, immutable facts raised alongside each state change.
They are dispatched after the unit of work commits; the notification handler
subscribes to ``OrderPlaced``.
"""

from protean.fields import Date, DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A new order was accepted, priced and persisted."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    customer_type = String(required=True)
    items = Text(required=True)  # JSON: list of line dicts
    contact_name = String()
    contact_phone = String()
    contact_email = String()
    subtotal = Float(required=True)
    delivery_fee = Float(required=True)
    coupon_discount = Float(default=0.0)
    total = Float(required=True)
    coupon_code = String()
    payment_method = String(required=True)
    payment_status = String(required=True)
    status = String(required=True)
    delivery_date = Date()
    delivery_slot = String()
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class GatewayOrderCreated:
    """A collection intent was registered with the payment gateway."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    gateway_order_id = String(required=True)
    amount = Float(required=True)
    currency = String(required=True)


@ordering.event(part_of="Order")
class PaymentReceived:
    """Payment was confirmed, either cash on delivery or a verified gateway payment."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    order_number = String(required=True)
    payment_method = String(required=True)
    amount = Float(required=True)
    gateway_order_id = String()
    gateway_payment_id = String()
    paid_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """The order moved along the fulfilment state machine."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_by = String()
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDelivered:
    __version__ = "v1"

    order_id = Identifier(required=True)
    order_number = String(required=True)
    delivered_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled by the customer or an administrator."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    reason = String()
    cancelled_by = String(required=True)
    cancelled_at = DateTime(required=True)
