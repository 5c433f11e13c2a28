#!/usr/bin/env python3
"""Centralised HTTP session configuration for prayer times API access."""

import logging
import os
import platform
from threading import RLock
from typing import Any, Callable, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from ..version import APP_NAME, VERSION

_LOGGER = logging.getLogger("prayline.http")
_SESSION_LOCK = RLock()
_SESSION: Optional[requests.Session] = None


def _parse_timeout_tuple() -> Tuple[float, float]:
    """Parse timeout defaults from environment variables."""
    raw = os.getenv("PRAYLINE_HTTP_TIMEOUTS")
    if raw:
        parts = [p.strip() for p in raw.replace(";", ",").split(",") if p.strip()]
        if len(parts) == 2:
            try:
                connect = max(0.5, float(parts[0]))
                read = max(1.0, float(parts[1]))
                return connect, read
            except ValueError:
                pass

    connect_env = os.getenv("PRAYLINE_HTTP_CONNECT_TIMEOUT")
    read_env = os.getenv("PRAYLINE_HTTP_READ_TIMEOUT")
    try:
        connect = max(0.5, float(connect_env)) if connect_env else 3.0
    except ValueError:
        connect = 3.0
    try:
        read = max(1.0, float(read_env)) if read_env else 5.0
    except ValueError:
        read = 5.0
    return connect, read


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _with_default_timeout(
    request_func: Callable[..., requests.Response],
    timeout: Tuple[float, float],
) -> Callable[..., requests.Response]:
    """Wrap session.request to inject default timeouts."""

    def wrapper(method: str, url: str, **kwargs: Any) -> requests.Response:
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = timeout
        return request_func(method, url, **kwargs)

    return wrapper


def _build_retry_configuration() -> Retry:
    return Retry(
        total=_int_env("PRAYLINE_HTTP_RETRY_TOTAL", 2),
        connect=_int_env("PRAYLINE_HTTP_RETRY_CONNECT", 2),
        read=_int_env("PRAYLINE_HTTP_RETRY_READ", 1),
        backoff_factor=_float_env("PRAYLINE_HTTP_BACKOFF_FACTOR", 0.3),
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET"],
        respect_retry_after_header=True,
        raise_on_status=False,
    )


def build_session() -> requests.Session:
    """Create a configured requests.Session with retries and timeouts."""
    session = requests.Session()

    adapter = HTTPAdapter(max_retries=_build_retry_configuration())
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update(
        {
            "Accept": "application/json",
            "User-Agent": (
                f"{APP_NAME}/{VERSION} (Python {platform.python_version()}; "
                f"Requests {requests.__version__})"
            ),
        }
    )
    timeout = _parse_timeout_tuple()
    session.request = _with_default_timeout(session.request, timeout)

    _LOGGER.debug(
        "HTTP session configured",
        extra={
            "http.timeout_connect": timeout[0],
            "http.timeout_read": timeout[1],
            "http.retry_total": adapter.max_retries.total,
        },
    )
    return session


def get_http_session() -> requests.Session:
    """Return the shared HTTP session, creating it if necessary."""
    global _SESSION
    if _SESSION is None:
        with _SESSION_LOCK:
            if _SESSION is None:
                _SESSION = build_session()
    return _SESSION


def set_http_session(session: Optional[requests.Session]) -> None:
    """
    Override the shared HTTP session (primarily for testing).

    Args:
        session: Preconfigured session instance, or None to rebuild lazily
    """
    global _SESSION
    with _SESSION_LOCK:
        _SESSION = session


__all__ = ["build_session", "get_http_session", "set_http_session"]
