"""
Tests for configuration loading and saving

Tests cover:
- Valid config files
- Default fallback for missing, unreadable and invalid files
- Atomic saving and refusal to save invalid data
- PRAYLINE_CONFIG_PATH override and dotenv loading
"""
import json
import os

import pytest

from prayline import config as config_module
from prayline.config import (
    DEFAULT_CONFIG,
    ConfigManager,
    is_configured,
    load_config,
    load_environment,
    save_config,
)
from prayline.config_schema import PrayConfig


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / ".claude" / "claude-pray.json"


def _write(path, payload):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")


class TestLoadConfig:
    """Tests for load_config()"""

    def test_valid_file(self, config_file):
        _write(config_file, {"city": "Vienna", "country": "Austria", "method": 3, "enabled": True})
        config = load_config(str(config_file))
        assert config == PrayConfig(city="Vienna", country="Austria", method=3, enabled=True)
        assert is_configured(config)
        assert config.method_name == "Muslim World League"

    def test_missing_file_returns_default(self, config_file):
        assert load_config(str(config_file)) is DEFAULT_CONFIG

    def test_invalid_json_returns_default(self, config_file):
        _write(config_file, "{city: Vienna}")
        assert load_config(str(config_file)) is DEFAULT_CONFIG

    def test_partial_config_returns_default(self, config_file):
        """Partial files are not merged with defaults."""
        _write(config_file, {"city": "Vienna", "country": "Austria", "enabled": True})
        assert load_config(str(config_file)) is DEFAULT_CONFIG

    def test_method_six_returns_default(self, config_file):
        _write(config_file, {"city": "Vienna", "country": "Austria", "method": 6, "enabled": True})
        assert load_config(str(config_file)) is DEFAULT_CONFIG

    def test_directory_returns_default(self, tmp_path):
        assert load_config(str(tmp_path)) is DEFAULT_CONFIG

    def test_env_path_override(self, config_file, monkeypatch):
        _write(config_file, {"city": "Cairo", "country": "Egypt", "method": 5, "enabled": True})
        monkeypatch.setenv("PRAYLINE_CONFIG_PATH", str(config_file))
        assert ConfigManager().config_path == config_file
        assert load_config().city == "Cairo"

    def test_default_path(self, monkeypatch, tmp_path):
        monkeypatch.delenv("PRAYLINE_CONFIG_PATH", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert ConfigManager().config_path == tmp_path / ".claude" / "claude-pray.json"


class TestDefaultsAndIsConfigured:
    """Tests for DEFAULT_CONFIG and is_configured()"""

    def test_default_is_disabled(self):
        assert DEFAULT_CONFIG.enabled is False
        assert DEFAULT_CONFIG.method == 2
        assert not is_configured(DEFAULT_CONFIG)

    def test_disabled_config_not_configured(self):
        config = PrayConfig(city="Vienna", country="Austria", method=3, enabled=False)
        assert not is_configured(config)


class TestSaveConfig:
    """Tests for save_config()"""

    def test_round_trip(self, config_file):
        config = PrayConfig(city="Istanbul", country="Turkey", method=13, enabled=True)
        assert save_config(config, str(config_file))
        assert json.loads(config_file.read_text(encoding="utf-8")) == config.to_json_safe()
        assert load_config(str(config_file)) == config
        assert not config_file.with_name("claude-pray.json.tmp").exists()

    def test_refuses_invalid_config(self, config_file):
        assert not save_config(DEFAULT_CONFIG, str(config_file))
        assert not config_file.exists()

    def test_write_failure_returns_false(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        config = PrayConfig(city="Vienna", country="Austria", method=3, enabled=True)
        assert not save_config(config, str(blocker / "claude-pray.json"))


class TestEnvironment:
    """Tests for dotenv loading"""

    def test_loads_app_env_file(self, tmp_path, monkeypatch):
        app_dir = tmp_path / ".prayline"
        app_dir.mkdir()
        (app_dir / ".env").write_text("PRAYLINE_TEST_MARKER=loaded\n")
        monkeypatch.setattr(config_module, "_get_app_config_dir", lambda: app_dir)
        monkeypatch.delenv("PRAYLINE_TEST_MARKER", raising=False)
        monkeypatch.chdir(tmp_path)

        load_environment()
        try:
            assert os.environ["PRAYLINE_TEST_MARKER"] == "loaded"
        finally:
            os.environ.pop("PRAYLINE_TEST_MARKER", None)
