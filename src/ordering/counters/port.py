"""Counter store port.

Named integer counters that change only through atomic increments. Order
numbers and coupon usage are issued from here so that two concurrent
checkouts can never be handed the same value.
"""

from abc import ABC, abstractmethod


class CounterStore(ABC):
    @abstractmethod
    def increment(self, name: str) -> int:
        """Add one to ``name`` and return the new value. Missing counters start at zero."""
        ...

    @abstractmethod
    def increment_below(self, name: str, ceiling: int, start: int = 0) -> int | None:
        """Add one to ``name`` only while it is below ``ceiling``.

        Returns the new value, or ``None`` when the counter had already
        reached the ceiling. A missing counter is created at ``start`` first.
        """
        ...

    @abstractmethod
    def value(self, name: str, default: int = 0) -> int: ...

    @abstractmethod
    def clear(self) -> None:
        """Forget every counter."""
        ...
