"""Order notification port.

Notification delivery (email, SMS) lives outside the ordering context; the
ordering side only hands over a summary of the placed order.
"""

from abc import ABC, abstractmethod


class OrderNotifier(ABC):
    @abstractmethod
    def order_placed(self, summary: dict) -> None:
        """Tell the customer and the shop that an order was placed."""
        ...
