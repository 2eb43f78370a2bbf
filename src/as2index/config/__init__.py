"""Configuration management for as2index."""

from __future__ import annotations

import os
import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import As2IndexConfig
from .resolver import (
    assign_nested,
    flatten_for_env,
    overrides_from_env,
    resolve_with_precedence,
)

DEFAULT_CONFIG_PATH = Path("~/.as2index/config.yaml")
_CONFIG_HEADER = textwrap.dedent(
    """\
    # as2index configuration file
    # Generated automatically; manage via `as2index config set`.
    """
)


class ConfigManager:
    """Load and persist configuration data, applying precedence rules."""

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
        """Return the resolved configuration path."""
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        env_overrides: Mapping[str, str] | None = None,
    ) -> As2IndexConfig:
        """Load configuration data from disk, applying precedence rules."""
        env_data: Mapping[str, str] | None = None
        if include_env:
            env_data = env_overrides if env_overrides is not None else self._env

        return resolve_with_precedence(
            defaults=As2IndexConfig(),
            file_overrides=self._read_file(),
            env_overrides=overrides_from_env(env_data) if env_data else None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return raw overrides stored on disk."""
        return self._read_file()

    def save(self, config: As2IndexConfig | Mapping[str, Any]) -> None:
        """Persist configuration data to disk."""
        if isinstance(config, As2IndexConfig):
            data = config.model_dump(mode="python")
        else:
            data = dict(config)
        self._write_file(data)

    def ensure_exists(self) -> Path:
        """Create a configuration file with defaults if one does not exist."""
        path = self._config_path
        if not path.exists():
            self._write_file(As2IndexConfig().model_dump(mode="python"))
        return path

    def read_text(self) -> str:
        """Return the current configuration file contents."""
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    # Internal helpers -------------------------------------------------

    def _read_file(self) -> dict[str, Any]:
        if not self._config_path.exists():
            return {}

        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")

        return raw

    def _write_file(self, data: Mapping[str, Any]) -> None:
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        serialized = yaml.safe_dump(dict(data), sort_keys=False)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        timestamp = f"# Last updated: {stamp}\n"
        self._config_path.write_text(_CONFIG_HEADER + timestamp + serialized, encoding="utf-8")


__all__ = [
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "As2IndexConfig",
    "assign_nested",
    "resolve_with_precedence",
    "flatten_for_env",
    "ConfigError",
]
