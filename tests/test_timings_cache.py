"""
Tests for the same-day timings cache and fetch_timings()

Tests cover:
- At most one fetch per (date, params)
- Refetch on new params or new date
- Failed or invalid fetches leave the cache untouched
- Stale entries are never served for a different key
"""
import datetime
import json
import threading

from prayline.api.aladhan import SourceParams
from prayline.core import scheduler
from prayline.core.scheduler import TimingsCache, fetch_timings, get_next_event


class TestCacheHits:
    """Cache reuse within a day"""

    def test_same_params_same_day_fetches_once(self, params, fetcher, clock, cache):
        first = fetch_timings(params, fetcher, clock, cache)
        clock.current += datetime.timedelta(hours=5)
        second = fetch_timings(params, fetcher, clock, cache)
        assert first == second
        assert first["Asr"] == "15:45"
        assert len(fetcher.calls) == 1

    def test_different_params_refetch(self, params, fetcher, clock, cache):
        fetch_timings(params, fetcher, clock, cache)
        other = SourceParams(city="Vienna", country="Austria", method=2)
        fetch_timings(other, fetcher, clock, cache)
        assert len(fetcher.calls) == 2
        assert cache.entry.params_key == "Vienna:Austria:2"

    def test_new_day_refetches(self, params, fetcher, clock, cache):
        fetch_timings(params, fetcher, clock, cache)
        clock.current += datetime.timedelta(days=1)
        fetch_timings(params, fetcher, clock, cache)
        assert len(fetcher.calls) == 2
        assert cache.entry.date_key == "2026-10-18"

    def test_switching_back_refetches(self, params, fetcher, clock, cache):
        """Single entry: A, B, A needs three fetches."""
        other = SourceParams(city="Cairo", country="Egypt", method=5)
        for p in (params, other, params):
            fetch_timings(p, fetcher, clock, cache)
        assert len(fetcher.calls) == 3

    def test_cache_entry_contents(self, params, fetcher, clock, cache, sample_timings):
        assert cache.is_empty
        fetch_timings(params, fetcher, clock, cache)
        assert not cache.is_empty
        assert cache.entry.timings == sample_timings
        assert cache.entry.date_key == "2026-10-17"
        assert cache.entry.params_key == "Vienna:Austria:3"


class TestFetchFailures:
    """Failures yield None and never overwrite the cache"""

    def test_fetcher_failure_returns_none(self, params, fetcher, clock, cache):
        fetcher.body = None
        assert fetch_timings(params, fetcher, clock, cache) is None
        assert cache.is_empty

    def test_fetcher_exception_returns_none(self, params, clock, cache):
        def broken(_params):
            raise RuntimeError("socket closed")

        assert fetch_timings(params, broken, clock, cache) is None
        assert cache.is_empty

    def test_malformed_body_keeps_previous_entry(self, params, fetcher, clock, cache):
        fetch_timings(params, fetcher, clock, cache)
        before = cache.entry

        clock.current += datetime.timedelta(days=1)
        fetcher.body = "<html>502 Bad Gateway</html>"
        assert fetch_timings(params, fetcher, clock, cache) is None
        assert cache.entry is before

    def test_non_success_code_keeps_previous_entry(self, params, fetcher, clock, cache, envelope):
        fetch_timings(params, fetcher, clock, cache)
        before = cache.entry

        envelope["code"] = 400
        fetcher.body = json.dumps(envelope)
        other = SourceParams(city="Nowhere", country="Atlantis", method=3)
        assert fetch_timings(other, fetcher, clock, cache) is None
        assert cache.entry is before

    def test_stale_entry_not_served_after_failure(self, params, fetcher, clock, cache):
        fetch_timings(params, fetcher, clock, cache)
        clock.current += datetime.timedelta(days=1)
        fetcher.body = None
        assert fetch_timings(params, fetcher, clock, cache) is None
        assert cache.entry.date_key == "2026-10-17"

    def test_invalid_timings_rejected(self, params, fetcher, clock, cache, envelope):
        envelope["data"]["timings"]["Fajr"] = "5:30"
        fetcher.body = json.dumps(envelope)
        assert fetch_timings(params, fetcher, clock, cache) is None
        assert cache.is_empty


class TestDefaults:
    """Default collaborators"""

    def test_default_cache_used(self, params, fetcher, clock, monkeypatch):
        shared = TimingsCache()
        monkeypatch.setattr(scheduler, "default_cache", shared)
        fetch_timings(params, fetcher, clock)
        fetch_timings(params, fetcher, clock)
        assert len(fetcher.calls) == 1
        assert not shared.is_empty

    def test_default_fetcher_used(self, params, clock, cache, envelope_text, monkeypatch):
        calls = []

        def fake_body(p):
            calls.append(p)
            return envelope_text

        monkeypatch.setattr(scheduler, "fetch_timings_body", fake_body)
        assert fetch_timings(params, clock=clock, cache=cache) is not None
        assert calls == [params]


class TestConcurrentCallers:
    """Lookup, fetch and store form one critical section"""

    def test_concurrent_same_key_fetches_once(self, params, envelope_text, clock, cache):
        calls = []

        def slow_fetcher(p):
            calls.append(p)
            threading.Event().wait(0.05)
            return envelope_text

        threads = [
            threading.Thread(target=fetch_timings, args=(params, slow_fetcher, clock, cache))
            for _ in range(4)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(calls) == 1


class TestGetNextEvent:
    """Fetch and compute combined"""

    def test_returns_next_event(self, params, fetcher, clock, cache):
        result = get_next_event(params, fetcher, clock, cache)
        assert result.name == "Dhuhr"
        assert result.remaining == "2h 30m"

    def test_returns_none_when_unavailable(self, params, fetcher, clock, cache):
        fetcher.body = "not json"
        assert get_next_event(params, fetcher, clock, cache) is None
