"""Gateway order creation: command and handler.

Registers a collection intent with the payment gateway for an online order.
The amount always comes from the stored order; the gateway sees it in paise
with the order number as receipt.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier
from protean.utils.globals import current_domain

from ordering.config import get_settings
from ordering.domain import ordering
from ordering.exceptions import ConflictError, ServiceUnavailableError
from ordering.gateway import get_gateway
from ordering.gateway.port import GatewayError
from ordering.order.order import Order, OrderStatus, PaymentMethod, PaymentStatus
from ordering.order.pricing import to_minor_units

logger = structlog.get_logger(__name__)


def gateway_public_key() -> str:
    """Key id the checkout widget needs. Raises ServiceUnavailableError without a gateway."""
    return get_gateway().key_id


@ordering.command(part_of="Order")
class CreateGatewayOrder:
    order_id = Identifier(required=True)
    amount = Float()  # Optional; must match the order total when given


@ordering.command_handler(part_of=Order)
class CreateGatewayOrderHandler:
    @handle(CreateGatewayOrder)
    def create_gateway_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if order.payment_method != PaymentMethod.ONLINE.value:
            raise ConflictError("Order is not an online payment order", order_id=str(order.id))
        if order.payment_status != PaymentStatus.PENDING.value:
            raise ConflictError(f"Order payment is already {order.payment_status}", order_id=str(order.id))
        if order.status == OrderStatus.CANCELLED.value:
            raise ConflictError("Order has been cancelled", order_id=str(order.id))

        total = order.pricing.total
        if command.amount is not None and abs(command.amount - total) > get_settings().price_tolerance:
            raise ValidationError({"amount": [f"Amount does not match the order total of ₹{total:g}"]})

        gateway = get_gateway()
        currency = order.pricing.currency or get_settings().currency
        result = {
            "order_id": str(order.id),
            "amount": total,
            "amount_minor": to_minor_units(total),
            "currency": currency,
            "key_id": gateway.key_id,
        }

        if order.gateway_order_id:
            logger.info(
                "Reusing gateway order",
                order_id=str(order.id),
                gateway_order_id=order.gateway_order_id,
            )
            return {**result, "gateway_order_id": order.gateway_order_id}

        try:
            gateway_order = gateway.create_order(
                amount_minor=to_minor_units(total),
                currency=currency,
                receipt=order.order_number,
                notes={"order_id": str(order.id), "order_number": order.order_number},
            )
        except GatewayError as exc:
            logger.error("Gateway order creation failed", order_id=str(order.id), error=str(exc))
            raise ServiceUnavailableError("Payment service is temporarily unavailable. Please try again.") from exc

        order.record_gateway_order(gateway_order.gateway_order_id, currency)
        repo.add(order)

        logger.info(
            "Gateway order created",
            order_id=str(order.id),
            gateway_order_id=gateway_order.gateway_order_id,
            amount_minor=gateway_order.amount_minor,
        )
        return {**result, "gateway_order_id": gateway_order.gateway_order_id}
