"""Cash-on-delivery confirmation: command and handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class ConfirmCashOnDelivery:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class ConfirmCashOnDeliveryHandler:
    @handle(ConfirmCashOnDelivery)
    def confirm_cash_on_delivery(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        # Another customer's order is reported as missing, not forbidden.
        if not order.belongs_to(command.customer_id):
            raise ObjectNotFoundError({"order_id": ["Order not found"]})

        order.confirm_cash_on_delivery()
        repo.add(order)

        logger.info("Cash on delivery confirmed", order_id=str(order.id), order_number=order.order_number)
        return order.snapshot()
