#!/usr/bin/env python3
"""
🛡️ Safe JSON decoding for PrayLine
Parses untrusted text and strips keys that could redefine object behaviour
(``__proto__``, ``constructor``, ``prototype``) at every nesting level.

The walk is iterative so pathological input cannot exhaust the interpreter
stack; trees nested deeper than ``MAX_NESTING_DEPTH`` are rejected.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from ..constants import DANGEROUS_KEYS, MAX_NESTING_DEPTH

_LOGGER = logging.getLogger("prayline.safe_json")

TreeValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]


class DecodeError(Enum):
    """Reasons a decode can fail."""
    MALFORMED = "malformed"
    TOO_DEEP = "too_deep"


class NestingTooDeep(ValueError):
    """Raised by :func:`sanitize` when the tree exceeds the allowed depth."""


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of :func:`decode`: either a sanitized value or an error."""
    value: TreeValue = None
    error: Optional[DecodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _reject_constant(name: str) -> Any:
    # JSON has no NaN/Infinity; Python's parser accepts them by default
    raise ValueError(f"Non-standard JSON constant: {name}")


def _new_container(value: Union[list, dict]) -> Union[list, dict]:
    return {} if isinstance(value, dict) else []


def sanitize(value: TreeValue, max_depth: int = MAX_NESTING_DEPTH) -> TreeValue:
    """Return a copy of ``value`` with every dangerous key removed.

    Records are walked key-wise, sequences element-wise; scalars are returned
    unchanged. Surviving keys keep their relative order. The input is never
    mutated.

    Raises:
        NestingTooDeep: If containers are nested deeper than ``max_depth``.
    """
    if not isinstance(value, (dict, list)):
        return value

    root = _new_container(value)
    stack: List[Tuple[Union[list, dict], Union[list, dict], int]] = [(value, root, 1)]

    while stack:
        source, target, depth = stack.pop()
        if depth > max_depth:
            raise NestingTooDeep(f"nesting depth exceeds {max_depth}")

        if isinstance(source, dict):
            for key, child in source.items():
                if key in DANGEROUS_KEYS:
                    continue
                if isinstance(child, (dict, list)):
                    copy = _new_container(child)
                    stack.append((child, copy, depth + 1))
                    target[key] = copy
                else:
                    target[key] = child
        else:
            for child in source:
                if isinstance(child, (dict, list)):
                    copy = _new_container(child)
                    stack.append((child, copy, depth + 1))
                    target.append(copy)
                else:
                    target.append(child)

    return root


def decode(text: Any) -> DecodeResult:
    """Parse ``text`` as JSON and sanitize the result.

    Never raises: malformed input yields ``DecodeError.MALFORMED`` and overly
    nested input ``DecodeError.TOO_DEEP``. Nothing is partially decoded.
    """
    if not isinstance(text, str):
        return DecodeResult(error=DecodeError.MALFORMED)

    try:
        parsed = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        _LOGGER.debug("Rejected malformed JSON: %s", exc)
        return DecodeResult(error=DecodeError.MALFORMED)

    try:
        return DecodeResult(value=sanitize(parsed))
    except NestingTooDeep as exc:
        _LOGGER.debug("Rejected deeply nested JSON: %s", exc)
        return DecodeResult(error=DecodeError.TOO_DEEP)


__all__ = ["DecodeError", "DecodeResult", "NestingTooDeep", "TreeValue", "decode", "sanitize"]
