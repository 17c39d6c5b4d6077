"""Application tests for admin status updates, bulk updates and customer cancellation."""

import json

import pytest
from ordering.exceptions import InvalidTransitionError
from ordering.order.cancellation import CancelOrder
from ordering.order.order import Order
from ordering.order.status import BulkUpdateOrders, UpdateOrderStatus
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _update(order_id, **kwargs):
    return current_domain.process(UpdateOrderStatus(order_id=order_id, **kwargs), asynchronous=False)


def _bulk(order_ids, **kwargs):
    return current_domain.process(BulkUpdateOrders(order_ids=json.dumps(order_ids), **kwargs), asynchronous=False)


class TestAdminStatusUpdate:
    def test_walks_the_lifecycle(self, place_order):
        order_id = place_order()["order_id"]
        for status in ("confirmed", "preparing", "out_for_delivery", "delivered"):
            snapshot = _update(order_id, status=status)
        assert snapshot["status"] == "delivered"
        assert snapshot["delivered_at"] is not None

    def test_skipping_a_step_is_rejected(self, place_order):
        order_id = place_order()["order_id"]
        with pytest.raises(InvalidTransitionError) as exc:
            _update(order_id, status="delivered")
        assert exc.value.messages == {"status": ["Cannot transition from pending to delivered"]}
        assert current_domain.repository_for(Order).get(order_id).status == "pending"

    def test_admin_cancellation(self, place_order):
        order_id = place_order()["order_id"]
        snapshot = _update(order_id, status="cancelled", cancellation_reason="Out of stock")
        assert snapshot["status"] == "cancelled"
        assert snapshot["cancelled_by"] == "admin"
        assert snapshot["cancellation_reason"] == "Out of stock"

    def test_notes_only(self, place_order):
        order_id = place_order()["order_id"]
        snapshot = _update(order_id, notes="Call before delivery")
        assert snapshot["notes"] == "Call before delivery"
        assert snapshot["status"] == "pending"

    def test_nothing_to_change(self, place_order):
        order_id = place_order()["order_id"]
        with pytest.raises(ValidationError):
            _update(order_id)

    def test_unknown_status(self, place_order):
        order_id = place_order()["order_id"]
        with pytest.raises(ValidationError):
            _update(order_id, status="shipped")

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            _update("missing-order", status="confirmed")


class TestBulkUpdate:
    def test_moves_every_eligible_order(self, place_order):
        ids = [place_order()["order_id"] for _ in range(3)]
        result = _bulk(ids, status="confirmed")

        assert result == {"matched_count": 3, "modified_count": 3, "failures": []}
        repo = current_domain.repository_for(Order)
        assert {repo.get(order_id).status for order_id in ids} == {"confirmed"}

    def test_ineligible_orders_are_reported(self, place_order):
        ready = place_order()["order_id"]
        stuck = place_order()["order_id"]
        _update(ready, status="confirmed")

        result = _bulk([ready, stuck], status="preparing")

        assert result["matched_count"] == 2
        assert result["modified_count"] == 1
        assert result["failures"] == [
            {"order_id": stuck, "reason": "Cannot transition from pending to preparing"},
        ]
        assert current_domain.repository_for(Order).get(stuck).status == "pending"

    def test_missing_orders_are_reported(self, place_order):
        order_id = place_order()["order_id"]
        result = _bulk([order_id, "missing-order"], status="confirmed")

        assert result["matched_count"] == 1
        assert result["modified_count"] == 1
        assert result["failures"] == [{"order_id": "missing-order", "reason": "Order not found"}]

    def test_duplicate_ids_count_once(self, place_order):
        order_id = place_order()["order_id"]
        result = _bulk([order_id, order_id], status="confirmed")
        assert result["matched_count"] == 1

    def test_empty_id_list(self):
        with pytest.raises(ValidationError):
            _bulk([], status="confirmed")


class TestCustomerCancellation:
    def _cancel(self, order_id, customer_id="cust-001", reason=None):
        return current_domain.process(
            CancelOrder(order_id=order_id, customer_id=customer_id, reason=reason),
            asynchronous=False,
        )

    def test_pending_order_can_be_cancelled(self, place_order):
        order_id = place_order()["order_id"]
        snapshot = self._cancel(order_id)
        assert snapshot["status"] == "cancelled"
        assert snapshot["cancelled_by"] == "customer"
        assert snapshot["cancellation_reason"] == "Cancelled by customer"

    def test_reason_is_recorded(self, place_order):
        order_id = place_order()["order_id"]
        assert self._cancel(order_id, reason="Ordered twice")["cancellation_reason"] == "Ordered twice"

    def test_out_for_delivery_cannot_be_cancelled(self, place_order):
        order_id = place_order()["order_id"]
        for status in ("confirmed", "preparing", "out_for_delivery"):
            _update(order_id, status=status)

        with pytest.raises(InvalidTransitionError):
            self._cancel(order_id)

    def test_cancelled_is_terminal(self, place_order):
        order_id = place_order()["order_id"]
        self._cancel(order_id)
        with pytest.raises(InvalidTransitionError):
            self._cancel(order_id)

    def test_other_customer_sees_not_found(self, place_order):
        order_id = place_order()["order_id"]
        with pytest.raises(ObjectNotFoundError):
            self._cancel(order_id, customer_id="cust-999")
