"""Shared pytest fixtures for the PrayLine test suite."""

from __future__ import annotations

import datetime
import json
from typing import Any, Dict, List, Optional

import pytest

from prayline.api.aladhan import SourceParams
from prayline.core.scheduler import TimingsCache


@pytest.fixture
def sample_timings() -> Dict[str, str]:
    """Timings for one day including the unscheduled Sunrise entry."""
    return {
        "Fajr": "05:30",
        "Sunrise": "06:45",
        "Dhuhr": "12:30",
        "Asr": "15:45",
        "Maghrib": "18:15",
        "Isha": "19:45",
    }


@pytest.fixture
def envelope(sample_timings: Dict[str, str]) -> Dict[str, Any]:
    """A successful Aladhan response body as a dict."""
    return {
        "code": 200,
        "status": "OK",
        "data": {
            "timings": sample_timings,
            "date": {"readable": "17 Oct 2026", "timestamp": "1792195200"},
            "meta": {"timezone": "Europe/Vienna", "method": {"id": 3, "name": "Muslim World League"}},
        },
    }


@pytest.fixture
def envelope_text(envelope: Dict[str, Any]) -> str:
    return json.dumps(envelope)


@pytest.fixture
def params() -> SourceParams:
    return SourceParams(city="Vienna", country="Austria", method=3)


@pytest.fixture
def cache() -> TimingsCache:
    """Fresh cache so tests never share state through the process default."""
    return TimingsCache()


class FakeClock:
    """Clock with a settable current time."""

    def __init__(self, current: datetime.datetime):
        self.current = current

    def now(self) -> datetime.datetime:
        return self.current

    def today(self) -> datetime.date:
        return self.current.date()


class CountingFetcher:
    """Fetcher returning canned bodies and recording every call."""

    def __init__(self, body: Optional[str]):
        self.body = body
        self.calls: List[SourceParams] = []

    def __call__(self, params: SourceParams) -> Optional[str]:
        self.calls.append(params)
        return self.body


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime.datetime(2026, 10, 17, 10, 0))


@pytest.fixture
def fetcher(envelope_text: str) -> CountingFetcher:
    return CountingFetcher(envelope_text)
