"""Statusline text for the next prayer."""

from typing import Optional

from ..core.scheduler import NextEvent
from .colors import cyan, dim, green, yellow

CRESCENT = '☪'


def render_prayer_line(prayer: Optional[NextEvent]) -> str:
    """``☪ Asr in 10m``; the remaining time is green when the prayer is imminent."""
    symbol = cyan(CRESCENT)
    if prayer is None:
        return f"{symbol} {dim('Prayer times unavailable')}"

    remaining = f"in {prayer.remaining}"
    time_info = green(remaining) if prayer.is_imminent else dim(remaining)
    return f"{symbol} {yellow(prayer.name)} {time_info}"


def render_setup_prompt() -> str:
    return f"{cyan(CRESCENT)} {dim('Run /claude-pray:setup')}"
