"""Configuration management for imgsel."""

from __future__ import annotations

import os
import textwrap
from collections.abc import Mapping as MappingABC
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .loader import ENV_PREFIX, env_overrides, layer
from .models import (
    GroupLimit,
    ImgselConfig,
    LibrarySettings,
    LimitSettings,
    LoggingSettings,
    SaveSettings,
    UserLimit,
)

DEFAULT_CONFIG_PATH = Path("~/.imgsel/config.yaml")
_CONFIG_HEADER = textwrap.dedent(
    """\
    # imgsel configuration file
    # Change values with `imgsel config set SECTION.FIELD VALUE`.
    # Placeholders for save.filename_template: ${userId} ${username} ${timestamp}
    # ${date} ${time} ${index} ${ext} ${guildId} ${channelId}
    """
)


class ConfigManager:
    """Read and update the YAML config file and apply environment overrides."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        return self._config_path

    def env_keys(self) -> list[str]:
        """Return the ``IMGSEL__`` variables currently set, sorted."""
        return sorted(key for key in self._env if key.startswith(ENV_PREFIX))

    def load(self, *, include_env: bool = True) -> ImgselConfig:
        """Return the defaults overlaid with the file and then the environment.

        The config file is created with default values on first use.
        """
        self.ensure_exists()
        overrides = env_overrides(self._env) if include_env else None
        return layer(self._read_file(), overrides)

    def set_value(self, key: str, value: Any) -> None:
        """Store ``value`` under ``section.field`` after validating the result.

        Raises:
            ConfigError: If the key is malformed or the new file would be invalid.
        """
        section, _, field = key.strip().partition(".")
        if not section or not field or "." in field:
            raise ConfigError(f"'{key}' must name a section and a field, e.g. library.max_output.")

        data = self._read_file()
        fields = data.get(section) or {}
        if not isinstance(fields, MappingABC):
            raise ConfigError(f"Configuration section '{section}' must be a mapping.")
        data[section] = {**fields, field: value}

        layer(data)
        self._write(data)

    def ensure_exists(self) -> Path:
        """Write a file holding the default values if none exists yet."""
        if not self._config_path.exists():
            self._write(ImgselConfig().model_dump(mode="json"))
        return self._config_path

    def read_text(self) -> str:
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    def _read_file(self) -> dict[str, Any]:
        if not self._config_path.exists():
            return {}

        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse {self._config_path}: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError(f"{self._config_path} must contain a mapping of sections.")
        return raw

    def _write(self, data: Mapping[str, Any]) -> None:
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        body = yaml.safe_dump(dict(data), sort_keys=False, allow_unicode=True)
        self._config_path.write_text(_CONFIG_HEADER + body, encoding="utf-8")


__all__ = [
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "ConfigError",
    "GroupLimit",
    "ImgselConfig",
    "LibrarySettings",
    "LimitSettings",
    "LoggingSettings",
    "SaveSettings",
    "UserLimit",
    "layer",
]
