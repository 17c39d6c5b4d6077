"""Order placement notifications.

Delivery of the message belongs to the notification collaborator. A failure
there must never undo or fail the order, so errors are logged and dropped.
"""

import json

import structlog
from protean.utils.mixins import handle

from ordering.domain import ordering
from ordering.notifier import get_notifier
from ordering.order.events import OrderPlaced
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


def order_summary(event: OrderPlaced) -> dict:
    return {
        "order_id": str(event.order_id),
        "order_number": event.order_number,
        "customer_name": event.contact_name,
        "customer_email": event.contact_email,
        "customer_phone": event.contact_phone,
        "items": json.loads(event.items),
        "total": event.total,
        "payment_method": event.payment_method,
        "delivery_date": event.delivery_date.isoformat() if event.delivery_date else None,
        "delivery_slot": event.delivery_slot,
    }


def notify_order_placed(event: OrderPlaced) -> bool:
    """Hand the order summary to the notifier. Returns False when delivery failed."""
    try:
        get_notifier().order_placed(order_summary(event))
    except Exception:
        logger.exception(
            "Order notification failed",
            order_id=str(event.order_id),
            order_number=event.order_number,
        )
        return False

    logger.info("Order notification sent", order_number=event.order_number)
    return True


@ordering.event_handler(part_of=Order)
class OrderNotificationHandler:
    """Sends the order confirmation once an order is placed."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        notify_order_placed(event)
