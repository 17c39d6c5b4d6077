"""Customer cancellation: command and handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import CancellationActor, Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    reason = String(max_length=500)


@ordering.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if not order.belongs_to(command.customer_id):
            raise ObjectNotFoundError({"order_id": ["Order not found"]})

        order.cancel(
            reason=command.reason or "Cancelled by customer",
            cancelled_by=CancellationActor.CUSTOMER.value,
        )
        repo.add(order)

        logger.info("Order cancelled by customer", order_id=str(order.id), order_number=order.order_number)
        return order.snapshot()
