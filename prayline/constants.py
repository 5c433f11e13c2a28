"""Central constants for PrayLine (small, stable primitives only).

Avoid runtime/config dependent values here.
"""

from typing import Dict, FrozenSet, Tuple

# Canonical daily events, in the order they occur
PRAYER_NAMES: Tuple[str, ...] = ("Fajr", "Dhuhr", "Asr", "Maghrib", "Isha")

# An event this close (minutes) is rendered as imminent
IMMINENT_WINDOW_MINUTES: int = 15

# Keys stripped from every decoded record before validation
DANGEROUS_KEYS: FrozenSet[str] = frozenset({"__proto__", "constructor", "prototype"})

# Upper bound for nested containers in decoded payloads
MAX_NESTING_DEPTH: int = 256

MAX_LOCATION_LENGTH: int = 100

API_BASE = "https://api.aladhan.com/v1/timingsByCity"
API_SUCCESS_CODE: int = 200

DEFAULT_METHOD: int = 2  # ISNA

# Aladhan calculation methods (id 6 is not assigned)
CALCULATION_METHODS: Dict[int, str] = {
    0: "Shia Ithna-Ashari",
    1: "University of Islamic Sciences, Karachi",
    2: "Islamic Society of North America",
    3: "Muslim World League",
    4: "Umm Al-Qura University, Makkah",
    5: "Egyptian General Authority of Survey",
    7: "Institute of Geophysics, University of Tehran",
    8: "Gulf Region",
    9: "Kuwait",
    10: "Qatar",
    11: "Majlis Ugama Islam Singapura",
    12: "Union Organization Islamic de France",
    13: "Diyanet İşleri Başkanlığı, Turkey",
    14: "Spiritual Administration of Muslims of Russia",
}


def describe_method(method_id: int) -> str:
    """Return the human-readable name for ``method_id`` (or ``"Unknown method"``)."""
    return CALCULATION_METHODS.get(method_id, "Unknown method")
