"""Statusline rendering."""

from typing import Any, Dict, Optional

from ..api.aladhan import SourceParams
from ..config import is_configured
from ..config_schema import PrayConfig
from ..core.scheduler import Clock, Fetcher, TimingsCache, get_next_event
from .prayer_line import render_prayer_line, render_setup_prompt


def render(
    stdin_data: Dict[str, Any],
    config: PrayConfig,
    fetcher: Optional[Fetcher] = None,
    clock: Optional[Clock] = None,
    cache: Optional[TimingsCache] = None,
) -> str:
    """Build the statusline for ``config``. ``stdin_data`` is accepted for future segments."""
    if not is_configured(config):
        return render_setup_prompt()

    prayer = get_next_event(
        SourceParams.from_config(config),
        fetcher=fetcher,
        clock=clock,
        cache=cache,
    )
    return render_prayer_line(prayer)


__all__ = ["render", "render_prayer_line", "render_setup_prompt"]
