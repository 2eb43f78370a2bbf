"""Layered resolution of as2index settings.

Sources apply from lowest to highest precedence: model defaults, the YAML
file, ``AS2INDEX__SECTION__KEY`` environment variables, then dotted
command-line overrides such as ``{"cli.date_format": "%d/%m/%Y"}``.
"""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Dict, Mapping, Sequence

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import As2IndexConfig

ENV_PREFIX = "AS2INDEX__"


def resolve_with_precedence(
    *,
    defaults: As2IndexConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> As2IndexConfig:
    """Merge configuration sources: defaults < file < environment < CLI.

    Raises:
        ConfigError: If a source is malformed or the merged values fail validation.
    """
    merged = defaults.model_dump(mode="python")
    layers = {"file": file_overrides, "environment": env_overrides, "cli": cli_overrides}
    for source_name, layer in layers.items():
        if layer is not None:
            _merge_into(merged, _expand_dotted(layer, source_name))

    try:
        return As2IndexConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def assign_nested(
    target: dict[str, Any],
    path: Sequence[str],
    value: Any,
    *,
    source_name: str = "cli",
) -> None:
    """Store ``value`` under ``path`` inside ``target``, creating sections as needed.

    Mapping values are merged into an existing section rather than replacing it.

    Raises:
        ConfigError: If ``path`` runs through a value that is not a mapping.
    """
    node = target
    for segment in path[:-1]:
        child = node.get(segment)
        if child is None:
            child = node[segment] = {}
        elif not isinstance(child, dict):
            raise ConfigError(
                f"{source_name.capitalize()} override for {'.'.join(path)} "
                f"conflicts with existing value."
            )
        node = child

    leaf = path[-1]
    if isinstance(value, MappingABC) and isinstance(node.get(leaf), dict):
        _merge_into(node[leaf], _expand_dotted(value, source_name))
    elif isinstance(value, MappingABC):
        node[leaf] = _expand_dotted(value, source_name)
    else:
        node[leaf] = value


def overrides_from_env(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``AS2INDEX__`` variables into nested overrides.

    Values are parsed as YAML scalars; text YAML rejects is kept verbatim.
    """
    overrides: dict[str, Any] = {}
    for key, raw_value in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        path = [part.lower() for part in key[len(ENV_PREFIX) :].split("__") if part]
        if not path:
            continue
        try:
            parsed: Any = yaml.safe_load(raw_value)
        except yaml.YAMLError:
            parsed = raw_value
        assign_nested(overrides, path, parsed, source_name="environment")
    return overrides


def flatten_for_env(config: As2IndexConfig) -> Dict[str, str]:
    """Render ``config`` as the environment variables ``overrides_from_env`` reads."""
    flat: Dict[str, str] = {}
    pending: list[tuple[tuple[str, ...], Any]] = [((), config.model_dump(mode="python"))]
    while pending:
        prefix, value = pending.pop()
        if isinstance(value, dict):
            pending.extend((prefix + (str(key),), child) for key, child in value.items())
            continue
        name = ENV_PREFIX + "__".join(part.upper() for part in prefix)
        flat[name] = "null" if value is None else str(value)
    return flat


def _expand_dotted(source: Mapping[str, Any], source_name: str) -> dict[str, Any]:
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    expanded: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        assign_nested(expanded, key.split("."), value, source_name=source_name)
    return expanded


def _merge_into(base: dict[str, Any], overrides: Mapping[str, Any]) -> None:
    for key, value in overrides.items():
        current = base.get(key)
        if isinstance(value, MappingABC) and isinstance(current, dict):
            _merge_into(current, value)
        else:
            base[key] = deepcopy(value)


__all__ = [
    "ENV_PREFIX",
    "assign_nested",
    "flatten_for_env",
    "overrides_from_env",
    "resolve_with_precedence",
]
