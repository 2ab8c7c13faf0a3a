"""Tests for the stale-while-revalidate response-time cache."""

import asyncio
from datetime import timedelta

from devdesk_insights.team.infrastructure import ResponseTimeCache

from tests.conftest import T0


class FakeClock:
    def __init__(self, start=T0):
        self.current = start

    def __call__(self):
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)


class CountingLoader:
    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        result = self.results[min(self.calls, len(self.results)) - 1]
        if isinstance(result, Exception):
            raise result
        return result


class TestResponseTimeCache:
    async def test_cold_read_returns_empty_and_schedules_refresh(self):
        cache = ResponseTimeCache(clock=FakeClock())
        loader = CountingLoader({"alice@acme.io": [1000.0]})

        assert dict(cache.get(loader)) == {}
        await cache.refresh_task

        assert loader.calls == 1
        assert dict(cache.get(loader)) == {"alice@acme.io": (1000.0,)}

    async def test_reads_within_ttl_are_identical_and_do_not_refresh(self):
        clock = FakeClock()
        cache = ResponseTimeCache(ttl=timedelta(minutes=5), clock=clock)
        loader = CountingLoader({"alice@acme.io": [1000.0]})
        await cache.refresh_async(loader)

        clock.advance(minutes=4)
        first = cache.get(loader)
        second = cache.get(loader)

        assert first is second
        assert loader.calls == 1
        assert cache.refresh_task is None

    async def test_expired_read_serves_stale_and_refreshes_once(self):
        clock = FakeClock()
        cache = ResponseTimeCache(ttl=timedelta(minutes=5), clock=clock)
        loader = CountingLoader({"alice@acme.io": [1000.0]}, {"alice@acme.io": [2000.0]})
        await cache.refresh_async(loader)

        clock.advance(minutes=6)
        stale = cache.get(loader)
        again = cache.get(loader)
        task = cache.refresh_task

        assert dict(stale) == {"alice@acme.io": (1000.0,)}
        assert dict(again) == dict(stale)
        await task
        assert loader.calls == 2
        assert dict(cache.get(loader)) == {"alice@acme.io": (2000.0,)}

    async def test_samples_of_another_domain_read_as_missing(self):
        cache = ResponseTimeCache(clock=FakeClock())
        acme = CountingLoader({"alice@acme.io": [1000.0]})
        await cache.refresh_async(acme, "acme.io")

        other = CountingLoader({"pat@customer.com": [3000.0]})
        assert dict(cache.get(other, "customer.com")) == {}
        await cache.refresh_task

        assert other.calls == 1
        assert cache.snapshot.internal_domain == "customer.com"
        assert dict(cache.get(other, "customer.com")) == {"pat@customer.com": (3000.0,)}
        assert dict(cache.get(acme, "acme.io")) == {}
        await cache.aclose()

    async def test_concurrent_refresh_requests_share_one_task(self):
        cache = ResponseTimeCache(clock=FakeClock())
        release = asyncio.Event()
        calls = 0

        async def slow_loader():
            nonlocal calls
            calls += 1
            await release.wait()
            return {"bob@acme.io": [5.0]}

        first = cache.refresh_async(slow_loader)
        second = cache.refresh_async(slow_loader)
        release.set()
        await first

        assert first is second
        assert calls == 1

    async def test_failed_refresh_keeps_previous_snapshot(self):
        clock = FakeClock()
        cache = ResponseTimeCache(ttl=timedelta(minutes=5), clock=clock)
        loader = CountingLoader({"alice@acme.io": [1000.0]}, RuntimeError("upstream down"))
        await cache.refresh_async(loader)
        before = cache.snapshot

        clock.advance(minutes=10)
        cache.get(loader)
        await cache.refresh_task

        assert cache.snapshot is before
        assert loader.calls == 2

    async def test_snapshot_drops_empty_lists_and_normalizes_keys(self):
        cache = ResponseTimeCache(clock=FakeClock())
        await cache.refresh_async(CountingLoader({"Alice@Acme.io": [1.0], "bob@acme.io": []}))

        assert dict(cache.snapshot.samples) == {"alice@acme.io": (1.0,)}
        assert cache.snapshot.computed_at == T0

    async def test_clear_and_close(self):
        cache = ResponseTimeCache(clock=FakeClock())
        await cache.refresh_async(CountingLoader({"alice@acme.io": [1.0]}))
        cache.clear()
        assert cache.snapshot is None

        release = asyncio.Event()

        async def never_finishes():
            await release.wait()
            return {}

        task = cache.refresh_async(never_finishes)
        await cache.aclose()
        assert task.cancelled()
