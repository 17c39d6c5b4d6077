"""Repository for the Order aggregate with the storefront's lookups."""

from dataclasses import dataclass, field
from datetime import date

from ordering.domain import ordering
from ordering.order.order import Order


@dataclass
class OrderFilters:
    """Admin order list filters. Unset fields do not constrain the result."""

    status: str | None = None
    customer_type: str | None = None
    payment_method: str | None = None
    payment_status: str | None = None
    search: str | None = None
    date_from: date | None = None
    date_to: date | None = None

    def exact_lookups(self) -> dict:
        lookups = {
            "status": self.status,
            "customer_type": self.customer_type,
            "payment_method": self.payment_method,
            "payment_status": self.payment_status,
        }
        return {key: value for key, value in lookups.items() if value}


@dataclass
class OrderPage:
    orders: list[Order] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0


@ordering.repository(part_of=Order)
class OrderRepository:
    def find_by_order_number(self, order_number: str) -> Order | None:
        return self._dao.query.filter(order_number=order_number).all().first

    def find_by_gateway_order_id(self, gateway_order_id: str) -> Order | None:
        return self._dao.query.filter(gateway_order_id=gateway_order_id).all().first

    def for_customer(self, customer_id: str) -> list[Order]:
        """A customer's orders, newest first."""
        return self._dao.query.filter(customer_id=str(customer_id)).order_by("-placed_at").all().items

    def search(self, filters: OrderFilters, page: int = 1, limit: int = 20) -> OrderPage:
        """Filter, newest first, then paginate.

        Status, customer type and payment fields are pushed down to the
        store; the free-text search (order number, contact name, phone,
        email) and the delivery date range are applied here.
        """
        page = max(page, 1)
        limit = max(limit, 1)

        query = self._dao.query
        lookups = filters.exact_lookups()
        if lookups:
            query = query.filter(**lookups)
        orders = query.order_by("-placed_at").all().items

        if filters.search:
            needle = filters.search.strip().lower()
            orders = [order for order in orders if _matches(order, needle)]
        if filters.date_from:
            orders = [order for order in orders if order.placed_at and order.placed_at.date() >= filters.date_from]
        if filters.date_to:
            orders = [order for order in orders if order.placed_at and order.placed_at.date() <= filters.date_to]

        start = (page - 1) * limit
        return OrderPage(orders=orders[start : start + limit], total=len(orders), page=page, limit=limit)


def _matches(order: Order, needle: str) -> bool:
    contact = order.contact_info
    haystack = [order.order_number or ""]
    if contact:
        haystack.extend([contact.name or "", contact.phone or "", contact.email or ""])
    return any(needle in value.lower() for value in haystack)
