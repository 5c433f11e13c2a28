"""
Pydantic models for PrayLine's typed values

Trees that already passed the matching predicate in ``utils.validation`` are
turned into these models by ``core.ingest``. The field constraints mirror the
predicates so a model can never hold a value the predicate would reject.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import MAX_LOCATION_LENGTH, describe_method
from .utils.validation import is_non_empty_bounded_string, is_valid_method

TIME_PATTERN = r"^([01][0-9]|2[0-3]):[0-5][0-9]$"


class PrayConfig(BaseModel):
    """User configuration stored in ``~/.claude/claude-pray.json``.

    Example:
        >>> PrayConfig(city="Vienna", country="Austria", method=3, enabled=True)
        PrayConfig(city='Vienna', country='Austria', method=3, enabled=True)
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    city: str = Field(max_length=MAX_LOCATION_LENGTH, description="City name sent to the API")
    country: str = Field(max_length=MAX_LOCATION_LENGTH, description="Country name sent to the API")
    method: int = Field(description="Aladhan calculation method id")
    enabled: bool = Field(description="Whether the statusline shows prayer times")

    @field_validator("city", "country")
    @classmethod
    def validate_location(cls, v: str) -> str:
        if not is_non_empty_bounded_string(v, MAX_LOCATION_LENGTH):
            raise ValueError("must be a non-blank string of at most 100 characters")
        return v

    @field_validator("method", mode="before")
    @classmethod
    def validate_method(cls, v: Any) -> Any:
        """Reject ids outside 0-14 and the unassigned id 6."""
        if not is_valid_method(v):
            raise ValueError(f"Invalid calculation method: {v!r}")
        return v

    @property
    def method_name(self) -> str:
        return describe_method(self.method)

    def to_json_safe(self) -> Dict[str, Any]:
        """Convert to JSON-safe dictionary (for saving to file)."""
        return self.model_dump(mode="json")


class PrayerTimings(BaseModel):
    """Times for one day; extra keys such as ``Sunrise`` or ``Midnight`` are kept as-is."""

    model_config = ConfigDict(extra="allow")

    Fajr: str = Field(pattern=TIME_PATTERN)
    Dhuhr: str = Field(pattern=TIME_PATTERN)
    Asr: str = Field(pattern=TIME_PATTERN)
    Maghrib: str = Field(pattern=TIME_PATTERN)
    Isha: str = Field(pattern=TIME_PATTERN)

    def as_dict(self) -> Dict[str, Any]:
        """Plain mapping of the timings as received, extra keys included."""
        return self.model_dump()


class AladhanData(BaseModel):
    model_config = ConfigDict(extra="allow")

    timings: PrayerTimings


class AladhanEnvelope(BaseModel):
    """Response body of ``/v1/timingsByCity``; only the parts PrayLine reads are typed."""

    model_config = ConfigDict(extra="allow")

    code: int
    data: AladhanData


__all__ = ["AladhanData", "AladhanEnvelope", "PrayConfig", "PrayerTimings"]
