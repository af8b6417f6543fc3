"""Configuration management for actkit.

Config loading priority (highest first):
1. Environment variables (ACTKIT_*)
2. .actkit/config.local.toml (git-ignored, per-machine)
3. .actkit/config.toml (project-specific)
4. ~/.actkit/config.toml (user defaults)

Each layer is validated on its own; an invalid layer is skipped with a
warning. The merged result is handed to actions unmodified.
"""

from __future__ import annotations

import copy
import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger("actkit.config")

CONFIG_DIR_NAME = ".actkit"

LOG_LEVELS = ("debug", "info", "warning", "error")


class PluginSettings(BaseModel):
    enabled: bool = True
    config: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class Config(BaseModel):
    """Validated application configuration."""

    locale: Literal["en", "ja"] = "en"
    log_level: str = "info"
    log_dir: Path | None = None
    action_dirs: list[Path] = Field(default_factory=list)
    plugins: dict[str, PluginSettings] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.lower()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return value

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level.upper())

    def plugin_config(self, name: str | None) -> dict[str, Any] | None:
        """Config dict for an enabled plugin, or None."""
        if not name or name not in self.plugins:
            return None
        settings = self.plugins[name]
        return settings.config if settings.enabled else None

    # ── Loading ──────────────────────────────────────────────

    @classmethod
    def load(cls, workspace: Path | None = None) -> Config:
        """Load config from every layer.

        A layer that fails validation on its own is dropped with a warning
        and the remaining layers still apply. Defaults are used only when
        the merged result is invalid.
        """
        cascade = CascadingConfig(workspace=workspace)
        for layer in cascade.layers:
            if not layer.data:
                continue
            try:
                cls.model_validate(layer.data)
            except ValidationError as e:
                logger.warning(
                    "config_layer_invalid",
                    extra={"data": {"layer": str(layer.path or layer.name), "error": str(e)}},
                )
                layer.data = {}
        cascade.remerge()
        try:
            return cls.model_validate(cascade.merged)
        except ValidationError as e:
            logger.warning(
                "config_invalid",
                extra={"data": {"sources": cascade.sources(), "error": str(e)}},
            )
            return cls()


@dataclass
class ConfigLayer:
    """A single layer in the configuration cascade."""

    name: str
    path: Path | None
    data: dict[str, Any] = field(default_factory=dict)
    source: str = ""

    @classmethod
    def from_file(cls, path: Path) -> ConfigLayer:
        """Load a config layer from a TOML file."""
        if not path.exists():
            return cls(name=path.stem, path=path, data={}, source="file")

        try:
            data = tomllib.loads(path.read_bytes().decode())
            return cls(name=path.stem, path=path, data=data, source="file")
        except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
            logger.warning(
                "config_layer_skipped",
                extra={"data": {"path": str(path), "error": str(e)}},
            )
            return cls(name=path.stem, path=path, data={}, source="file")

    @classmethod
    def from_env(cls) -> ConfigLayer:
        """Load config from ACTKIT_* environment variables."""
        data: dict[str, Any] = {}

        if locale := os.getenv("ACTKIT_LOCALE"):
            data["locale"] = locale
        if level := os.getenv("ACTKIT_LOG_LEVEL"):
            data["log_level"] = level
        if log_dir := os.getenv("ACTKIT_LOG_DIR"):
            data["log_dir"] = log_dir

        return cls(name="environment", path=None, data=data, source="env")


class CascadingConfig:
    """Merges configuration layers, later layers overriding earlier ones."""

    def __init__(self, workspace: Path | None = None, home: Path | None = None):
        self.workspace = workspace or Path.cwd()
        self.home = home or Path.home()
        self.layers: list[ConfigLayer] = []
        self.merged: dict[str, Any] = {}
        self._load_layers()

    def _load_layers(self):
        self.layers = [
            ConfigLayer.from_file(self.home / CONFIG_DIR_NAME / "config.toml"),
            ConfigLayer.from_file(self.workspace / CONFIG_DIR_NAME / "config.toml"),
            ConfigLayer.from_file(self.workspace / CONFIG_DIR_NAME / "config.local.toml"),
            ConfigLayer.from_env(),
        ]
        self.remerge()

    def remerge(self):
        """Rebuild ``merged`` from the current layer data."""
        self.merged = {}
        for layer in self.layers:
            self._deep_merge(self.merged, layer.data)

    @staticmethod
    def _deep_merge(base: dict, updates: dict):
        for key, value in updates.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                CascadingConfig._deep_merge(base[key], value)
            else:
                base[key] = copy.deepcopy(value)

    def sources(self) -> list[str]:
        """Layers that contributed any data, highest priority first."""
        return [
            str(layer.path) if layer.path else layer.name
            for layer in reversed(self.layers)
            if layer.data
        ]
