"""Counter store factory with get_counter_store() / set_counter_store() / reset_counter_store().

SQL-backed domains keep their counters in the same database as the
aggregates; the memory provider gets an in-process store.
"""

import threading

from protean.utils.globals import current_domain

from ordering.counters.memory_adapter import MemoryCounterStore
from ordering.counters.port import CounterStore
from ordering.counters.sql_adapter import SqlCounterStore

_SQL_PROVIDERS = ("sqlite", "postgresql")

_current_store: CounterStore | None = None
_store_lock = threading.Lock()


def _default_store() -> CounterStore:
    conn_info = current_domain.providers["default"].conn_info
    if conn_info["provider"] in _SQL_PROVIDERS:
        return SqlCounterStore(conn_info["database_uri"])
    return MemoryCounterStore()


def get_counter_store() -> CounterStore:
    global _current_store
    with _store_lock:
        if _current_store is None:
            _current_store = _default_store()
        return _current_store


def set_counter_store(store: CounterStore) -> None:
    """Override the active store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_counter_store() -> None:
    """Clear the active store's counters and drop it."""
    global _current_store
    if _current_store is not None:
        _current_store.clear()
    _current_store = None
