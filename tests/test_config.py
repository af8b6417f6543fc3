"""Configuration cascade and validation."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from actkit.config import CascadingConfig, Config, ConfigLayer, PluginSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("ACTKIT_LOCALE", "ACTKIT_LOG_LEVEL", "ACTKIT_LOG_DIR"):
        monkeypatch.delenv(var, raising=False)


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


class TestConfigLayer:
    def test_missing_file_is_empty(self, tmp_path):
        layer = ConfigLayer.from_file(tmp_path / "nope.toml")
        assert layer.data == {}

    def test_invalid_toml_is_skipped(self, tmp_path):
        path = tmp_path / "config.toml"
        _write(path, "locale = [unterminated")
        assert ConfigLayer.from_file(path).data == {}

    def test_env_layer(self, monkeypatch):
        monkeypatch.setenv("ACTKIT_LOCALE", "ja")
        monkeypatch.setenv("ACTKIT_LOG_LEVEL", "DEBUG")
        layer = ConfigLayer.from_env()
        assert layer.data == {"locale": "ja", "log_level": "DEBUG"}
        assert layer.source == "env"


class TestCascadingConfig:
    def test_priority_order(self, tmp_path, monkeypatch):
        home, ws = tmp_path / "home", tmp_path / "ws"
        _write(home / ".actkit" / "config.toml", 'locale = "ja"\nlog_level = "warning"\n')
        _write(ws / ".actkit" / "config.toml", 'log_level = "error"\n')
        _write(ws / ".actkit" / "config.local.toml", 'log_level = "debug"\n')

        cascade = CascadingConfig(workspace=ws, home=home)
        assert cascade.merged == {"locale": "ja", "log_level": "debug"}

        monkeypatch.setenv("ACTKIT_LOG_LEVEL", "info")
        assert CascadingConfig(workspace=ws, home=home).merged["log_level"] == "info"

    def test_nested_tables_deep_merge(self, tmp_path):
        home, ws = tmp_path / "home", tmp_path / "ws"
        _write(home / ".actkit" / "config.toml", "[plugins.timer.config]\nminutes = 25\nsound = true\n")
        _write(ws / ".actkit" / "config.toml", "[plugins.timer.config]\nminutes = 5\n")
        merged = CascadingConfig(workspace=ws, home=home).merged
        assert merged["plugins"]["timer"]["config"] == {"minutes": 5, "sound": True}

    def test_sources_highest_first(self, tmp_path, monkeypatch):
        ws = tmp_path / "ws"
        _write(ws / ".actkit" / "config.toml", 'locale = "en"\n')
        monkeypatch.setenv("ACTKIT_LOCALE", "ja")
        sources = CascadingConfig(workspace=ws, home=tmp_path / "home").sources()
        assert sources[0] == "environment"
        assert sources[1].endswith("config.toml")


class TestConfigModel:
    def test_defaults(self):
        config = Config()
        assert config.locale == "en"
        assert config.logging_level == logging.INFO
        assert config.plugin_config("missing") is None

    def test_log_level_normalized(self):
        assert Config(log_level="WARNING").log_level == "warning"
        with pytest.raises(ValidationError):
            Config(log_level="loud")

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValidationError):
            Config(colour="red")

    def test_disabled_plugin_has_no_config(self):
        config = Config(plugins={"timer": PluginSettings(enabled=False, config={"m": 1})})
        assert config.plugin_config("timer") is None

    def test_load_only_invalid_layer_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        _write(tmp_path / ".actkit" / "config.toml", 'locale = "fr"\n')
        assert Config.load(tmp_path) == Config()

    def test_invalid_home_layer_keeps_project_layer(self, tmp_path, monkeypatch, caplog):
        home = tmp_path / "home"
        monkeypatch.setenv("HOME", str(home))
        _write(home / ".actkit" / "config.toml", 'colour = "red"\nlog_level = "debug"\n')
        _write(tmp_path / ".actkit" / "config.toml", 'locale = "ja"\n')
        with caplog.at_level(logging.WARNING, logger="actkit.config"):
            config = Config.load(tmp_path)
        assert config.locale == "ja"
        assert config.log_level == "info"
        assert [r.getMessage() for r in caplog.records] == ["config_layer_invalid"]

    def test_invalid_plugin_layer_does_not_leak(self, tmp_path, monkeypatch):
        home = tmp_path / "home"
        monkeypatch.setenv("HOME", str(home))
        _write(home / ".actkit" / "config.toml", "[plugins.timer.config]\nminutes = 5\n")
        _write(tmp_path / ".actkit" / "config.local.toml", '[plugins.timer]\nenabled = "sometimes"\n')
        config = Config.load(tmp_path)
        assert config.plugins["timer"].enabled is True
        assert config.plugin_config("timer") == {"minutes": 5}

    def test_load_valid(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        _write(tmp_path / ".actkit" / "config.toml", 'locale = "ja"\naction_dirs = ["tools"]\n')
        config = Config.load(tmp_path)
        assert config.locale == "ja"
        assert [str(p) for p in config.action_dirs] == ["tools"]
