"""YAML-backed configuration store with environment and CLI overrides."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Tuple

import yaml

from .exceptions import ConfigError
from .models import MediastampConfig
from .resolver import ENV_PREFIX, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.mediastamp/config.yaml")
STAMP_PREFIX = "# Last updated: "
HEADER = "# mediastamp configuration file\n# Edit with `mediastamp config set KEY --value VALUE`.\n"


class ConfigManager:
    """Own the configuration file and build the effective run configuration.

    Precedence, lowest first: built-in defaults, the YAML file, ``MEDIASTAMP__``
    environment variables, then explicit CLI overrides.
    """

    def __init__(
        self, config_path: Path | None = None, *, env: Mapping[str, str] | None = None
    ) -> None:
        self.config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = os.environ if env is None else env

    def load(
        self, *, cli_overrides: Mapping[str, Any] | None = None, include_env: bool = True
    ) -> MediastampConfig:
        """Return the validated configuration, writing a default file on first use.

        Raises:
            ConfigError: If the file is unreadable or any layer holds invalid values.
        """
        self.ensure_exists()
        return resolve_with_precedence(
            defaults=MediastampConfig(),
            file_overrides=self.stored(),
            env_overrides=self.environment_overrides() if include_env else None,
            cli_overrides=cli_overrides,
        )

    def ensure_exists(self) -> Path:
        if not self.config_path.exists():
            self.store(MediastampConfig().model_dump(mode="json"))
        return self.config_path

    def stored(self) -> dict[str, Any]:
        """Return the mapping held in the configuration file, empty when absent."""
        try:
            text = self.config_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"{self.config_path} is not valid YAML: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"{self.config_path} must hold a mapping of sections.")
        return data

    def store(self, data: MediastampConfig | Mapping[str, Any]) -> None:
        if isinstance(data, MediastampConfig):
            data = data.model_dump(mode="json")
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        body = yaml.safe_dump(dict(data), sort_keys=False)
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(f"{HEADER}{STAMP_PREFIX}{stamp}\n{body}", encoding="utf-8")

    def text(self) -> str:
        return self.config_path.read_text(encoding="utf-8") if self.config_path.exists() else ""

    def set_value(self, key: str, raw_value: str) -> Tuple[str, str]:
        """Persist ``raw_value`` (a YAML literal) under the dotted ``key``.

        Returns:
            Tuple[str, str]: File contents before and after the update.

        Raises:
            ConfigError: If the key is empty, the value is not YAML, or the
                result would not validate.
        """
        segments = [segment.strip() for segment in key.split(".") if segment.strip()]
        if not segments:
            raise ConfigError("KEY must be a dotted path such as 'tools.timeout_seconds'.")
        try:
            value = yaml.safe_load(raw_value)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Unable to parse value {raw_value!r}: {exc}") from exc

        self.ensure_exists()
        before = self.text()
        data = self.stored()
        node = data
        for segment in segments[:-1]:
            node = node.setdefault(segment, {})
            if not isinstance(node, dict):
                raise ConfigError(f"Cannot assign into '{segment}': it is not a mapping.")
        node[segments[-1]] = value
        resolve_with_precedence(defaults=MediastampConfig(), file_overrides=data)

        self.store(data)
        return before, self.text()

    def environment_overrides(self) -> dict[str, Any]:
        """Translate ``MEDIASTAMP__SECTION__KEY`` variables into dotted overrides."""
        overrides: dict[str, Any] = {}
        for name, raw in self._env.items():
            if not name.startswith(ENV_PREFIX):
                continue
            parts = [part.lower() for part in name[len(ENV_PREFIX) :].split("__") if part]
            if not parts:
                continue
            try:
                overrides[".".join(parts)] = yaml.safe_load(raw)
            except yaml.YAMLError:
                overrides[".".join(parts)] = raw
        return overrides


def without_stamp(text: str) -> list[str]:
    """Return the lines of ``text`` minus the last-updated stamp."""
    return [line for line in text.splitlines() if not line.startswith(STAMP_PREFIX)]


__all__ = ["DEFAULT_CONFIG_PATH", "ConfigManager", "without_stamp"]
