"""Admin status updates: single and bulk commands and handler."""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.exceptions import ConflictError
from ordering.order.order import CancellationActor, Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(max_length=30)
    notes = Text()
    cancellation_reason = String(max_length=500)


@ordering.command(part_of="Order")
class BulkUpdateOrders:
    order_ids = Text(required=True)  # JSON: list of order ids
    status = String(max_length=30)
    notes = Text()
    cancellation_reason = String(max_length=500)


def _apply(order: Order, status, notes, cancellation_reason) -> None:
    if status:
        order.transition_to(status, changed_by=CancellationActor.ADMIN.value, reason=cancellation_reason)
    if notes is not None:
        order.annotate(notes)


def _require_change(command) -> None:
    if not command.status and command.notes is None:
        raise ValidationError({"status": ["Provide a status or notes to update"]})


@ordering.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        _require_change(command)

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.status
        _apply(order, command.status, command.notes, command.cancellation_reason)
        repo.add(order)

        logger.info(
            "Order updated",
            order_id=str(order.id),
            order_number=order.order_number,
            previous_status=previous,
            status=order.status,
        )
        return order.snapshot()

    @handle(BulkUpdateOrders)
    def bulk_update_orders(self, command):
        """Apply the same change to many orders.

        Each order goes through the same legality check as a single update;
        orders that cannot make the move are reported in ``failures`` and left
        untouched while the rest are saved.
        """
        _require_change(command)

        order_ids = json.loads(command.order_ids) if isinstance(command.order_ids, str) else command.order_ids
        if not order_ids:
            raise ValidationError({"order_ids": ["At least one order id is required"]})

        repo = current_domain.repository_for(Order)
        matched, modified, failures = 0, 0, []
        for order_id in dict.fromkeys(str(oid) for oid in order_ids):
            try:
                order = repo.get(order_id)
            except ObjectNotFoundError:
                failures.append({"order_id": order_id, "reason": "Order not found"})
                continue

            matched += 1
            try:
                _apply(order, command.status, command.notes, command.cancellation_reason)
            except (ValidationError, ConflictError) as exc:
                failures.append({"order_id": order_id, "reason": _reason(exc)})
                continue

            repo.add(order)
            modified += 1

        logger.info(
            "Bulk order update",
            status=command.status,
            matched_count=matched,
            modified_count=modified,
            failed_count=len(failures),
        )
        return {"matched_count": matched, "modified_count": modified, "failures": failures}


def _reason(exc: Exception) -> str:
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        return "; ".join(str(message) for values in messages.values() for message in values)
    return str(exc)
