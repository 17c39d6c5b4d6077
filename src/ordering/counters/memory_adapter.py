"""In-process counter store for the memory provider and tests."""

import threading

from ordering.counters.port import CounterStore


class MemoryCounterStore(CounterStore):
    def __init__(self) -> None:
        self._values: dict[str, int] = {}
        self._lock = threading.Lock()

    def increment(self, name: str) -> int:
        with self._lock:
            self._values[name] = self._values.get(name, 0) + 1
            return self._values[name]

    def increment_below(self, name: str, ceiling: int, start: int = 0) -> int | None:
        with self._lock:
            current = self._values.setdefault(name, start)
            if current >= ceiling:
                return None
            self._values[name] = current + 1
            return current + 1

    def value(self, name: str, default: int = 0) -> int:
        with self._lock:
            return self._values.get(name, default)

    def clear(self) -> None:
        with self._lock:
            self._values.clear()
