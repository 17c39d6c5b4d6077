"""Recording notifier for development and testing."""

from ordering.notifier.port import OrderNotifier


class FakeNotifier(OrderNotifier):
    """Keeps every summary it was handed. Can be told to fail."""

    def __init__(self) -> None:
        self.sent: list[dict] = []
        self.should_fail: bool = False

    def configure(self, should_fail: bool) -> None:
        self.should_fail = should_fail

    def order_placed(self, summary: dict) -> None:
        if self.should_fail:
            raise ConnectionError("Notification service unreachable")
        self.sent.append(summary)
