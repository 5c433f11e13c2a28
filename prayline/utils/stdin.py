#!/usr/bin/env python3
"""Reader for the JSON payload the host pipes to the statusline command."""

import sys
from typing import Any, Dict, Optional, TextIO

from ..core.ingest import ingest
from .validation import is_valid_open_record


def read_stdin(stream: Optional[TextIO] = None) -> Dict[str, Any]:
    """Return the host payload as a dict; empty or invalid input gives ``{}``."""
    stream = stream if stream is not None else sys.stdin
    if stream is None or stream.isatty():
        return {}

    try:
        text = stream.read().strip()
    except (OSError, UnicodeDecodeError):
        return {}
    if not text:
        return {}

    return ingest(text, is_valid_open_record) or {}
