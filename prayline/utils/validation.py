#!/usr/bin/env python3
"""
🛡️ Schema Validation Module for PrayLine
Total, side-effect-free predicates over sanitized JSON trees:
- Location strings (city, country)
- Calculation method ids (0-14, 6 unassigned)
- Time formats (HH:MM)
- Config records, prayer timings and the Aladhan API envelope

An unrecognised shape is simply ``False``; nothing here raises.
"""

import re
from enum import Enum
from typing import Any, Callable, Dict

from ..constants import API_SUCCESS_CODE, MAX_LOCATION_LENGTH, PRAYER_NAMES

# ASCII digits only; ``\d`` would also match other Unicode digits
TIME_PATTERN = re.compile(r'([01][0-9]|2[0-3]):[0-5][0-9]')

MIN_METHOD = 0
MAX_METHOD = 14
UNASSIGNED_METHODS = frozenset({6})


def is_non_empty_bounded_string(value: Any, max_length: int = MAX_LOCATION_LENGTH) -> bool:
    """Return True if ``value`` is a string of at most ``max_length`` characters
    that is not blank once trimmed. The length limit applies to the raw string."""
    return (
        isinstance(value, str)
        and len(value) <= max_length
        and len(value.strip()) > 0
    )


def is_valid_city(value: Any) -> bool:
    return is_non_empty_bounded_string(value, MAX_LOCATION_LENGTH)


def is_valid_country(value: Any) -> bool:
    return is_non_empty_bounded_string(value, MAX_LOCATION_LENGTH)


def is_valid_method(value: Any) -> bool:
    """Validate calculation method id.

    Integer-valued numbers in 0-14 are accepted, except 6 which the upstream
    catalogue does not define. Booleans are not numbers here.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if isinstance(value, float):
        if not value.is_integer():
            return False
        value = int(value)
    return MIN_METHOD <= value <= MAX_METHOD and value not in UNASSIGNED_METHODS


def is_valid_enabled(value: Any) -> bool:
    return isinstance(value, bool)


def is_valid_time_format(value: Any) -> bool:
    """Return True for zero-padded 24-hour ``HH:MM`` strings (``05:30``, not ``5:30``)."""
    if not isinstance(value, str):
        return False
    return TIME_PATTERN.fullmatch(value) is not None


def is_valid_open_record(value: Any) -> bool:
    """Any JSON object; arrays, null and scalars are rejected."""
    return isinstance(value, dict)


def is_valid_config(value: Any) -> bool:
    """Validate a complete config record. Missing fields fail, extras are ignored."""
    if not isinstance(value, dict):
        return False
    return (
        is_valid_city(value.get("city"))
        and is_valid_country(value.get("country"))
        and is_valid_method(value.get("method"))
        and is_valid_enabled(value.get("enabled"))
    )


def is_valid_event_timings(value: Any) -> bool:
    """All five canonical prayers present with valid times; other keys ignored."""
    if not isinstance(value, dict):
        return False
    for name in PRAYER_NAMES:
        if name not in value:
            return False
    return all(is_valid_time_format(value[name]) for name in PRAYER_NAMES)


def is_valid_api_envelope(value: Any) -> bool:
    """Validate the Aladhan response envelope.

    Requires ``code == 200`` and ``data.timings`` matching
    :func:`is_valid_event_timings`. Any other status is rejected even when the
    body is otherwise well formed.
    """
    if not isinstance(value, dict):
        return False

    code = value.get("code")
    if isinstance(code, bool) or code != API_SUCCESS_CODE:
        return False

    data = value.get("data")
    if not isinstance(data, dict):
        return False

    timings = data.get("timings")
    return isinstance(timings, dict) and is_valid_event_timings(timings)


class Schema(Enum):
    """Closed set of structural contracts known to PrayLine."""
    CONFIG = "config"
    EVENT_TIMINGS = "event_timings"
    API_ENVELOPE = "api_envelope"
    OPEN_RECORD = "open_record"


SCHEMA_VALIDATORS: Dict[Schema, Callable[[Any], bool]] = {
    Schema.CONFIG: is_valid_config,
    Schema.EVENT_TIMINGS: is_valid_event_timings,
    Schema.API_ENVELOPE: is_valid_api_envelope,
    Schema.OPEN_RECORD: is_valid_open_record,
}


def validate(schema: Schema, value: Any) -> bool:
    """Check ``value`` against one of the known schemas."""
    return SCHEMA_VALIDATORS[schema](value)
