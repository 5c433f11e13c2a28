#!/usr/bin/env python3
"""
Next-prayer scheduling and the same-day timings cache.

All times are local wall-clock values; no timezone conversion happens here.
If the caller passes an aware ``now`` its tzinfo is carried onto the
computed prayer datetimes unchanged.
"""

from __future__ import annotations

import datetime
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping, Optional, Protocol, Tuple

from ..api.aladhan import SourceParams, fetch_timings_body
from ..config_schema import AladhanEnvelope
from ..constants import IMMINENT_WINDOW_MINUTES, PRAYER_NAMES
from ..utils.validation import is_valid_api_envelope, is_valid_event_timings
from .ingest import FailureReason, ingest_result

_LOGGER = logging.getLogger("prayline.scheduler")

IMMINENT_WINDOW = datetime.timedelta(minutes=IMMINENT_WINDOW_MINUTES)

Fetcher = Callable[[SourceParams], Optional[str]]
Timings = Mapping[str, Any]


@dataclass(frozen=True)
class NextEvent:
    """The upcoming prayer as handed to the renderer."""
    name: str
    time: datetime.datetime
    remaining: str
    delta: datetime.timedelta
    is_imminent: bool


class Clock(Protocol):
    def now(self) -> datetime.datetime: ...

    def today(self) -> datetime.date: ...


class SystemClock:
    """Local wall clock."""

    def now(self) -> datetime.datetime:
        return datetime.datetime.now()

    def today(self) -> datetime.date:
        return datetime.date.today()


def _time_components(time_str: str) -> Tuple[int, int]:
    hour, minute = map(int, time_str.split(":"))
    return hour, minute


def event_datetime(
    time_str: str,
    day: datetime.date,
    tzinfo: Optional[datetime.tzinfo] = None,
) -> datetime.datetime:
    """Return the datetime for ``HH:MM`` on ``day``."""
    hour, minute = _time_components(time_str)
    return datetime.datetime.combine(day, datetime.time(hour, minute), tzinfo=tzinfo)


def format_remaining(delta: datetime.timedelta) -> str:
    """Render ``delta`` as ``"2h 30m"``, ``"2h"`` or ``"30m"`` (floored to the minute)."""
    total_minutes = max(0, int(delta.total_seconds() // 60))
    hours, minutes = divmod(total_minutes, 60)

    if hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h {minutes}m"


def next_event(timings: Timings, now: Optional[datetime.datetime] = None) -> NextEvent:
    """Return the first prayer strictly after ``now``.

    When every prayer of the day has passed, tomorrow's Fajr is returned and
    it is never flagged imminent.

    Raises:
        ValueError: If ``timings`` lacks a valid ``HH:MM`` for any of the
            five prayers. Timings coming out of ``fetch_timings`` always pass.
    """
    if not is_valid_event_timings(dict(timings)):
        raise ValueError("timings must contain valid HH:MM values for all prayers")

    now = now or datetime.datetime.now()
    today = now.date()

    for name in PRAYER_NAMES:
        prayer_time = event_datetime(timings[name], today, now.tzinfo)
        delta = prayer_time - now
        if delta > datetime.timedelta(0):
            return NextEvent(
                name=name,
                time=prayer_time,
                remaining=format_remaining(delta),
                delta=delta,
                is_imminent=delta <= IMMINENT_WINDOW,
            )

    first = PRAYER_NAMES[0]
    tomorrow = event_datetime(timings[first], today + datetime.timedelta(days=1), now.tzinfo)
    delta = tomorrow - now
    return NextEvent(
        name=first,
        time=tomorrow,
        remaining=format_remaining(delta),
        delta=delta,
        is_imminent=False,
    )


@dataclass(frozen=True)
class CacheEntry:
    timings: Mapping[str, Any]
    date_key: str
    params_key: str


class TimingsCache:
    """Single-entry cache of the most recently fetched timings.

    An entry is only served when both its date and parameter keys match;
    a mismatch bypasses the cache but never clears it. Successful fetches
    overwrite the entry.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._entry: Optional[CacheEntry] = None

    @property
    def entry(self) -> Optional[CacheEntry]:
        return self._entry

    @property
    def is_empty(self) -> bool:
        return self._entry is None

    @contextmanager
    def critical_section(self) -> Iterator["TimingsCache"]:
        """Hold the cache lock across a lookup-fetch-store sequence."""
        with self._lock:
            yield self

    def lookup(self, date_key: str, params_key: str) -> Optional[Mapping[str, Any]]:
        with self._lock:
            entry = self._entry
            if entry and entry.date_key == date_key and entry.params_key == params_key:
                return entry.timings
            return None

    def store(self, timings: Mapping[str, Any], date_key: str, params_key: str) -> None:
        with self._lock:
            self._entry = CacheEntry(timings=dict(timings), date_key=date_key, params_key=params_key)


# Process-wide default; callers that need isolation pass their own instance
default_cache = TimingsCache()


def fetch_timings(
    params: SourceParams,
    fetcher: Optional[Fetcher] = None,
    clock: Optional[Clock] = None,
    cache: Optional[TimingsCache] = None,
) -> Optional[Mapping[str, Any]]:
    """Return today's timings for ``params``, from cache when possible.

    Args:
        params: City, country and method to query
        fetcher: Callable returning the raw API body or None
            (defaults to the Aladhan HTTP fetcher)
        clock: Source of today's date (defaults to the system clock)
        cache: Cache to consult and update (defaults to ``default_cache``)

    Returns:
        The timings mapping, or None if the source was unavailable or the
        body failed validation. The cache is left untouched on failure.
    """
    fetcher = fetcher or fetch_timings_body
    clock = clock or SystemClock()
    cache = cache if cache is not None else default_cache

    date_key = clock.today().isoformat()
    params_key = params.cache_key

    with cache.critical_section():
        cached = cache.lookup(date_key, params_key)
        if cached is not None:
            _LOGGER.debug("Using cached timings for %s on %s", params_key, date_key)
            return cached

        try:
            body = fetcher(params)
        except Exception as exc:
            _LOGGER.warning("Timings fetcher failed for %s: %s", params_key, exc)
            body = None

        if body is None:
            _LOGGER.info("No timings for %s: %s", params_key, FailureReason.SOURCE_UNAVAILABLE.value)
            return None

        result = ingest_result(body, is_valid_api_envelope, AladhanEnvelope)
        if not result.ok:
            _LOGGER.warning("Discarding timings response for %s: %s", params_key, result.failure.value)
            return None

        timings = result.value.data.timings.as_dict()
        cache.store(timings, date_key, params_key)
        return timings


def get_next_event(
    params: SourceParams,
    fetcher: Optional[Fetcher] = None,
    clock: Optional[Clock] = None,
    cache: Optional[TimingsCache] = None,
) -> Optional[NextEvent]:
    """Fetch (or reuse) today's timings and compute the next prayer."""
    clock = clock or SystemClock()
    timings = fetch_timings(params, fetcher=fetcher, clock=clock, cache=cache)
    if timings is None:
        return None
    return next_event(timings, clock.now())


__all__ = [
    "CacheEntry", "Clock", "NextEvent", "SystemClock", "TimingsCache",
    "default_cache", "event_datetime", "fetch_timings", "format_remaining",
    "get_next_event", "next_event",
]
