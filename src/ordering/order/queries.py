"""Read-side helpers for customer and admin order views."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.order.order import Order
from ordering.order.repository import OrderFilters, OrderPage


def list_customer_orders(customer_id: str) -> list[Order]:
    return current_domain.repository_for(Order).for_customer(customer_id)


def get_customer_order(order_id: str, customer_id: str) -> Order:
    """A customer's own order. Someone else's order reads as not found."""
    order = current_domain.repository_for(Order).get(order_id)
    if not order.belongs_to(customer_id):
        raise ObjectNotFoundError({"order_id": ["Order not found"]})
    return order


def search_orders(filters: OrderFilters | None = None, page: int = 1, limit: int = 20) -> OrderPage:
    return current_domain.repository_for(Order).search(filters or OrderFilters(), page=page, limit=limit)
