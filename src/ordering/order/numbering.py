"""Order number allocation.

Numbers come from the ``orders`` counter in the counter store, which hands
out each value exactly once however many checkouts run at the same time.
A placement that fails after taking a number leaves a gap; numbers are
unique, not gapless. The Order's ``order_number`` field is unique as well.
"""

from ordering.config import get_settings
from ordering.counters import get_counter_store

ORDER_SEQUENCE = "orders"


def format_order_number(value: int, prefix: str | None = None) -> str:
    prefix = get_settings().order_number_prefix if prefix is None else prefix
    return f"{prefix}{value:06d}"


def allocate_order_number() -> str:
    """Issue the next order number, e.g. ``GD000001``."""
    return format_order_number(get_counter_store().increment(ORDER_SEQUENCE))
