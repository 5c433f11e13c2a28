#!/usr/bin/env python3
"""
🕌 Aladhan API access for PrayLine
Builds the ``timingsByCity`` request and returns the raw response body.
Parsing and validation of the body happen in ``core.ingest``; this module
only moves bytes.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from ..constants import API_BASE
from .http import get_http_session

_LOGGER = logging.getLogger("prayline.aladhan")


@dataclass(frozen=True)
class SourceParams:
    """Query parameters identifying one day's timings."""
    city: str
    country: str
    method: int

    @property
    def cache_key(self) -> str:
        return f"{self.city}:{self.country}:{self.method}"

    def as_query(self) -> Dict[str, str]:
        return {"city": self.city, "country": self.country, "method": str(self.method)}

    @classmethod
    def from_config(cls, config) -> "SourceParams":
        return cls(city=config.city, country=config.country, method=config.method)


def fetch_timings_body(
    params: SourceParams,
    session: Optional[requests.Session] = None,
) -> Optional[str]:
    """Request today's timings and return the response text.

    Returns:
        The body on a 2xx response, otherwise None. Network errors are logged
        and reported as None.
    """
    http = session or get_http_session()
    try:
        response = http.get(API_BASE, params=params.as_query())
    except requests.RequestException as exc:
        _LOGGER.warning("Prayer times request failed for %s: %s", params.cache_key, exc)
        return None

    if not response.ok:
        _LOGGER.warning(
            "Prayer times request for %s returned HTTP %s",
            params.cache_key,
            response.status_code,
        )
        return None

    return response.text


__all__ = ["SourceParams", "fetch_timings_body"]
