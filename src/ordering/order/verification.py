"""Online payment verification: command and handler.

The signature is checked before anything is loaded or written, so a forged
receipt never changes state. Verifying the same payment again is a no-op.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.exceptions import InvalidSignatureError
from ordering.gateway import get_gateway
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class VerifyPayment:
    order_id = Identifier(required=True)
    gateway_order_id = String(required=True, max_length=100)
    payment_id = String(required=True, max_length=100)
    signature = String(required=True, max_length=255)


@ordering.command_handler(part_of=Order)
class VerifyPaymentHandler:
    @handle(VerifyPayment)
    def verify_payment(self, command):
        gateway = get_gateway()
        if not gateway.verify_signature(command.gateway_order_id, command.payment_id, command.signature):
            logger.warning(
                "Payment signature mismatch",
                order_id=str(command.order_id),
                gateway_order_id=command.gateway_order_id,
                payment_id=command.payment_id,
            )
            raise InvalidSignatureError(str(command.order_id), command.gateway_order_id)

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if order.gateway_order_id != command.gateway_order_id:
            raise ObjectNotFoundError({"gateway_order_id": ["No order matches this gateway order"]})

        if order.record_online_payment(command.gateway_order_id, command.payment_id, command.signature):
            repo.add(order)
            logger.info(
                "Online payment verified",
                order_id=str(order.id),
                order_number=order.order_number,
                payment_id=command.payment_id,
            )
        else:
            logger.info("Payment already recorded", order_id=str(order.id), payment_id=command.payment_id)

        return order.snapshot()
