"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from as2index.config import (
    As2IndexConfig,
    ConfigError,
    ConfigManager,
    assign_nested,
    flatten_for_env,
    resolve_with_precedence,
)
from as2index.config.resolver import overrides_from_env


def _fresh_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigManager:
    monkeypatch.setenv("HOME", str(tmp_path))
    return ConfigManager()


def test_ensure_exists_creates_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    path = manager.ensure_exists()

    assert path == tmp_path / ".as2index" / "config.yaml"
    text = path.read_text(encoding="utf-8")
    assert "as2index configuration file" in text
    assert "Last updated:" in text

    config = manager.load(include_env=False)
    assert config == As2IndexConfig()


def test_load_without_file_uses_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    config = manager.load(include_env=False)

    assert config.decoding.entry_name == "index.sav"
    assert not manager.config_path.exists()


def test_resolve_with_precedence_respects_order(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.save({"decoding": {"entry_name": "file.sav"}, "cli": {"date_format": "%d/%m/%Y"}})

    env = {"AS2INDEX__DECODING__ENTRY_NAME": "env.sav", "AS2INDEX__CLI__QUIET_DEFAULT": "true"}
    cli = {"decoding.entry_name": "cli.sav"}

    config = manager.load(cli_overrides=cli, env_overrides=env)

    assert config.cli.date_format == "%d/%m/%Y"
    assert config.cli.quiet_default is True
    # CLI overrides take precedence over environment
    assert config.decoding.entry_name == "cli.sav"


def test_invalid_yaml_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.config_path.write_text("- not-a-mapping", encoding="utf-8")

    with pytest.raises(ConfigError):
        manager.load()


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(
            defaults=As2IndexConfig(),
            file_overrides={"decoding": {"header_size": 10}},
        )


def test_invalid_logging_level_is_rejected() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(
            defaults=As2IndexConfig(),
            cli_overrides={"logging.level": "LOUD"},
        )


def test_flatten_for_env_round_trips_defaults() -> None:
    flat = flatten_for_env(As2IndexConfig())

    assert flat["AS2INDEX__DECODING__ENTRY_NAME"] == "index.sav"
    assert flat["AS2INDEX__DECODING__COMMENT_ENCODING"] == "cp437"
    assert flat["AS2INDEX__CLI__REVEAL_PASSWORD"] == "False"

    manager = ConfigManager(Path("unused.yaml"), env={})
    config = manager.load(include_env=True, env_overrides=flat)
    assert config == As2IndexConfig()


def test_env_overrides_are_nested_and_parsed() -> None:
    env = {
        "AS2INDEX__CLI__QUIET_DEFAULT": "true",
        "AS2INDEX__CLI__DATE_FORMAT": "%d/%m/%Y",
        "PATH": "/usr/bin",
    }

    assert overrides_from_env(env) == {"cli": {"quiet_default": True, "date_format": "%d/%m/%Y"}}


def test_assign_nested_creates_and_merges_sections() -> None:
    data: dict = {"cli": None, "decoding": {"entry_name": "index.sav"}}

    assign_nested(data, ["cli", "quiet_default"], True)
    assign_nested(data, ["decoding"], {"comment_encoding": "utf-8"})

    assert data == {
        "cli": {"quiet_default": True},
        "decoding": {"entry_name": "index.sav", "comment_encoding": "utf-8"},
    }


def test_assign_nested_rejects_scalar_in_path() -> None:
    data = {"cli": "loud"}

    with pytest.raises(ConfigError, match="cli.quiet_default"):
        assign_nested(data, ["cli", "quiet_default"], True)
