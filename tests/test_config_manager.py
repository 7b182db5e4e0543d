"""Unit tests for configuration management."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from mediastamp.config import (
    ConfigError,
    ConfigManager,
    MediastampConfig,
    flatten_for_env,
    resolve_with_precedence,
)


def _fresh_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, **kwargs) -> ConfigManager:
    monkeypatch.setenv("HOME", str(tmp_path))
    return ConfigManager(**kwargs)


def test_ensure_exists_creates_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    path = manager.ensure_exists()

    assert path == tmp_path / ".mediastamp" / "config.yaml"
    text = path.read_text(encoding="utf-8")
    assert "mediastamp configuration file" in text
    assert "Last updated:" in text

    config = manager.load(include_env=False)
    assert config == MediastampConfig()


def test_precedence_file_then_env_then_cli(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env = {
        "MEDIASTAMP__TOOLS__TIMEOUT_SECONDS": "30",
        "MEDIASTAMP__FOLDERS__QUARANTINE": "_review",
        "UNRELATED": "1",
    }
    manager = _fresh_manager(tmp_path, monkeypatch, env=env)
    manager.store({"tools": {"timeout_seconds": 10, "max_workers": 2}})

    config = manager.load(cli_overrides={"tools.timeout_seconds": 5})

    assert config.tools.max_workers == 2
    assert config.folders.quarantine == "_review"
    assert config.tools.timeout_seconds == pytest.approx(5)


def test_env_is_ignored_on_request(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(
        tmp_path, monkeypatch, env={"MEDIASTAMP__FOLDERS__ZERO_BYTE": "_empty"}
    )

    assert manager.load(include_env=False).folders.zero_byte == "_zeroByte"
    assert manager.load().folders.zero_byte == "_empty"


def test_config_is_frozen() -> None:
    config = MediastampConfig()

    with pytest.raises(ValidationError):
        config.tools.timeout_seconds = 1  # type: ignore[misc]


def test_invalid_yaml_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.config_path.write_text("- not-a-mapping", encoding="utf-8")

    with pytest.raises(ConfigError):
        manager.load()


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(defaults=MediastampConfig(), file_overrides={"tools": {"nope": 1}})


def test_flatten_for_env_covers_sections() -> None:
    flat = flatten_for_env(MediastampConfig())

    assert flat["MEDIASTAMP__FOLDERS__QUARANTINE"] == "_unsuccessful"
    assert flat["MEDIASTAMP__TOOLS__MAX_WORKERS"] == "null"
    assert flat["MEDIASTAMP__TIMESTAMPS__PRINCIPAL_TAGS"] == "[DateTimeOriginal, CreateDate]"


def test_resolve_with_precedence_invalid_value_raises() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(
            defaults=MediastampConfig(),
            file_overrides={"tools": {"timeout_seconds": "not-a-number"}},
        )


def test_set_value_returns_before_and_after(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    before, after = manager.set_value("tools.max_workers", "3")

    assert "max_workers: null" in before
    assert "max_workers: 3" in after
    assert manager.load(include_env=False).tools.max_workers == 3


def test_set_value_rejects_nested_scalar(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    with pytest.raises(ConfigError):
        manager.set_value("folders.quarantine.deeper", "x")
