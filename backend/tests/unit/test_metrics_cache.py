import pytest
from datetime import date

from app.infrastructure.cache.metrics_cache import MetricsCache, daily_key, period_key

DAY = date(2024, 3, 6)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return MetricsCache(period_ttl_seconds=300, clock=clock)


class TestMetricsCache:

    def test_miss_returns_none(self, cache):
        assert cache.get(daily_key(1, DAY)) is None

    def test_keys_are_scoped_by_user(self, cache):
        cache.put(daily_key(1, DAY), "ana")
        assert cache.get(daily_key(2, DAY)) is None
        assert cache.get(daily_key(1, DAY)) == "ana"

    def test_daily_entries_do_not_expire(self, cache, clock):
        cache.put(daily_key(1, DAY), "m")
        clock.now += 10_000
        assert cache.get(daily_key(1, DAY)) == "m"

    def test_period_entries_expire(self, cache, clock):
        key = period_key(1, date(2024, 3, 1), date(2024, 3, 7))
        cache.put(key, "summary")
        clock.now += 299
        assert cache.get(key) == "summary"
        clock.now += 1
        assert cache.get(key) is None

    def test_invalidate_user_day_drops_covering_periods(self, cache):
        cache.put(daily_key(1, DAY), "d")
        cache.put(daily_key(1, date(2024, 3, 5)), "other day")
        cache.put(period_key(1, date(2024, 3, 1), date(2024, 3, 7)), "covers")
        cache.put(period_key(1, date(2024, 2, 1), date(2024, 2, 29)), "earlier")
        cache.put(daily_key(2, DAY), "other user")

        cache.invalidate_user_day(1, DAY)

        assert cache.get(daily_key(1, DAY)) is None
        assert cache.get(period_key(1, date(2024, 3, 1), date(2024, 3, 7))) is None
        assert cache.get(daily_key(1, date(2024, 3, 5))) == "other day"
        assert cache.get(period_key(1, date(2024, 2, 1), date(2024, 2, 29))) == "earlier"
        assert cache.get(daily_key(2, DAY)) == "other user"

    def test_invalidate_user(self, cache):
        cache.put(daily_key(1, DAY), "a")
        cache.put(period_key(1, DAY, DAY), "b")
        cache.put(daily_key(2, DAY), "c")
        cache.invalidate_user(1)
        assert len(cache) == 1

    def test_invalidate_and_clear(self, cache):
        cache.put(daily_key(1, DAY), "a")
        cache.invalidate(daily_key(1, DAY))
        assert len(cache) == 0
        cache.put(daily_key(1, DAY), "a")
        cache.clear()
        assert len(cache) == 0
