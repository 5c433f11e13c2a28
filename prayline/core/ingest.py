#!/usr/bin/env python3
"""
Trusted ingestion of untrusted JSON text.

``ingest`` is the only sanctioned way to turn external text (config file,
API body, host stdin) into a value the rest of PrayLine uses. It composes
safe decoding with a schema predicate and never raises; callers that want a
default apply it themselves when ``None`` comes back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..utils.safe_json import DecodeError, decode

_LOGGER = logging.getLogger("prayline.ingest")

T = TypeVar("T")
Validator = Callable[[Any], bool]


class FailureReason(Enum):
    """Why untrusted input produced no value."""
    MALFORMED = "malformed"
    VALIDATION_REJECTED = "validation_rejected"
    SOURCE_UNAVAILABLE = "source_unavailable"


@dataclass(frozen=True)
class IngestResult:
    """Typed value or the reason there is none."""
    value: Any = None
    failure: Optional[FailureReason] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def ingest_result(
    text: Any,
    validator: Validator,
    model: Optional[Type[BaseModel]] = None,
) -> IngestResult:
    """Decode ``text``, check it with ``validator`` and optionally build ``model``."""
    decoded = decode(text)
    if not decoded.ok:
        reason = "too deeply nested" if decoded.error is DecodeError.TOO_DEEP else "malformed"
        _LOGGER.debug("Ingest rejected %s input", reason)
        return IngestResult(failure=FailureReason.MALFORMED)

    tree = decoded.value
    try:
        accepted = validator(tree)
    except Exception as exc:
        _LOGGER.warning("Validator %s raised: %s", getattr(validator, "__name__", validator), exc)
        return IngestResult(failure=FailureReason.VALIDATION_REJECTED)
    if not accepted:
        _LOGGER.debug("Ingest rejected input failing %s", getattr(validator, "__name__", validator))
        return IngestResult(failure=FailureReason.VALIDATION_REJECTED)

    if model is None:
        return IngestResult(value=tree)

    try:
        return IngestResult(value=model.model_validate(tree))
    except ValidationError as exc:
        _LOGGER.debug("Ingest could not build %s: %s", model.__name__, exc)
        return IngestResult(failure=FailureReason.VALIDATION_REJECTED)


def ingest(
    text: Any,
    validator: Validator,
    model: Optional[Type[T]] = None,
) -> Optional[T]:
    """Return the validated value for ``text`` or ``None``.

    Args:
        text: Untrusted JSON text
        validator: Predicate from ``utils.validation`` the sanitized tree must pass
        model: Optional pydantic model to build from the tree; without one the
            sanitized tree itself is returned

    Returns:
        The typed value, or None when decoding or validation failed
    """
    return ingest_result(text, validator, model).value


__all__ = ["FailureReason", "IngestResult", "ingest", "ingest_result"]
