"""Tests for the counter store adapters."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from ordering.counters import get_counter_store, reset_counter_store
from ordering.counters.memory_adapter import MemoryCounterStore
from ordering.counters.sql_adapter import SqlCounterStore


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryCounterStore()
    return SqlCounterStore(f"sqlite:///{tmp_path / 'counters.db'}")


class TestIncrement:
    def test_starts_at_one(self, store):
        assert store.increment("orders") == 1
        assert store.increment("orders") == 2

    def test_counters_are_independent(self, store):
        store.increment("orders")
        assert store.increment("coupon:FIRST50") == 1

    def test_value_of_unknown_counter(self, store):
        assert store.value("orders") == 0
        assert store.value("orders", default=7) == 7

    def test_concurrent_increments_never_repeat(self, store):
        with ThreadPoolExecutor(max_workers=8) as pool:
            values = list(pool.map(lambda _: store.increment("orders"), range(100)))

        assert sorted(values) == list(range(1, 101))
        assert store.value("orders") == 100


class TestIncrementBelow:
    def test_stops_at_ceiling(self, store):
        assert store.increment_below("coupon:FIRST50", ceiling=2) == 1
        assert store.increment_below("coupon:FIRST50", ceiling=2) == 2
        assert store.increment_below("coupon:FIRST50", ceiling=2) is None
        assert store.value("coupon:FIRST50") == 2

    def test_missing_counter_starts_from_given_value(self, store):
        assert store.increment_below("coupon:SAVE20", ceiling=10, start=9) == 10
        assert store.increment_below("coupon:SAVE20", ceiling=10, start=9) is None

    def test_start_is_ignored_once_counter_exists(self, store):
        store.increment_below("coupon:SAVE20", ceiling=10)
        assert store.increment_below("coupon:SAVE20", ceiling=10, start=5) == 2

    def test_concurrent_claims_respect_ceiling(self, store):
        with ThreadPoolExecutor(max_workers=8) as pool:
            claims = list(pool.map(lambda _: store.increment_below("coupon:FIRST50", ceiling=5), range(40)))

        assert sorted(claim for claim in claims if claim is not None) == [1, 2, 3, 4, 5]
        assert claims.count(None) == 35
        assert store.value("coupon:FIRST50") == 5


def test_clear_forgets_counters(store):
    store.increment("orders")
    store.clear()
    assert store.value("orders") == 0


class TestCounterStoreFactory:
    def test_memory_provider_gets_memory_store(self):
        assert isinstance(get_counter_store(), MemoryCounterStore)

    def test_reset_clears_counters(self):
        get_counter_store().increment("orders")
        reset_counter_store()
        assert get_counter_store().value("orders") == 0
