"""Ordering bounded context: order lifecycle and payment reconciliation.

Handles pricing and coupons, guest and authenticated order placement,
cash-on-delivery and gateway-verified online payments, and the admin-driven
order status state machine.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")
