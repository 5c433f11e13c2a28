"""
Configuration management for PrayLine
Reads and writes ``~/.claude/claude-pray.json`` through the trusted ingest
path. A missing, unreadable or invalid file yields ``DEFAULT_CONFIG``
(disabled) so the statusline prompts for setup instead of failing.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .config_schema import PrayConfig
from .constants import DEFAULT_METHOD
from .core.ingest import ingest
from .utils.validation import is_valid_config

_LOGGER = logging.getLogger("prayline.config")


def _get_app_config_dir() -> Path:
    """Get application configuration directory path-agnostically"""
    return Path(os.path.expanduser("~/.prayline"))


def load_environment() -> None:
    """Load PRAYLINE_* overrides from ``~/.prayline/.env`` and a local ``.env``."""
    env_path = _get_app_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
    load_dotenv(find_dotenv(usecwd=True))


# Unvalidated on purpose: empty city/country never pass is_configured()
DEFAULT_CONFIG = PrayConfig.model_construct(
    city="",
    country="",
    method=DEFAULT_METHOD,
    enabled=False,
)


class ConfigManager:
    """Manages configuration loading and saving"""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else self._default_path()

    @staticmethod
    def _default_path() -> Path:
        env_path = os.getenv("PRAYLINE_CONFIG_PATH")
        if env_path:
            return Path(env_path).expanduser()
        return Path.home() / ".claude" / "claude-pray.json"

    def load_config(self) -> PrayConfig:
        """
        Load the user configuration.

        Returns:
            The validated config, or DEFAULT_CONFIG when the file is absent,
            unreadable or fails validation
        """
        try:
            content = self.config_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            _LOGGER.debug("No config file at %s", self.config_path)
            return DEFAULT_CONFIG
        except (OSError, UnicodeDecodeError) as e:
            _LOGGER.warning("Could not read config %s: %s", self.config_path, e)
            return DEFAULT_CONFIG

        config = ingest(content, is_valid_config, PrayConfig)
        if config is None:
            _LOGGER.warning("Ignoring invalid config in %s", self.config_path)
            return DEFAULT_CONFIG
        return config

    def save_config(self, config: PrayConfig) -> bool:
        """
        Save configuration to file

        Args:
            config: Configuration to save

        Returns:
            True if saved successfully
        """
        data = config.to_json_safe()
        if not is_valid_config(data):
            _LOGGER.error("Refusing to save invalid config: %s", data)
            return False

        tmp_path = self.config_path.with_name(f"{self.config_path.name}.tmp")
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(config.model_dump_json(indent=2), encoding="utf-8")
            os.replace(tmp_path, self.config_path)
            return True
        except OSError as e:
            _LOGGER.error("Could not write config %s: %s", self.config_path, e)
            return False


def is_configured(config: PrayConfig) -> bool:
    """True when the statusline should fetch prayer times."""
    return config.enabled and len(config.city) > 0 and len(config.country) > 0


def load_config(config_path: Optional[str] = None) -> PrayConfig:
    """Load the configuration from ``config_path`` or the default location."""
    return ConfigManager(config_path).load_config()


def save_config(config: PrayConfig, config_path: Optional[str] = None) -> bool:
    """Save the configuration to ``config_path`` or the default location."""
    return ConfigManager(config_path).save_config(config)
