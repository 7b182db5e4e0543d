"""Merge configuration layers into a validated :class:`MediastampConfig`."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Dict, Mapping

from pydantic import ValidationError

from .exceptions import ConfigError
from .models import MediastampConfig

ENV_PREFIX = "MEDIASTAMP__"


def resolve_with_precedence(
    *,
    defaults: MediastampConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> MediastampConfig:
    """Apply file, environment and CLI overrides, later layers winning.

    Keys may be nested mappings or dotted paths such as ``tools.timeout_seconds``.

    Raises:
        ConfigError: If an override is malformed or the merged values are invalid.
    """
    layers = {"file": file_overrides, "environment": env_overrides, "cli": cli_overrides}
    merged: dict[str, Any] = defaults.model_dump(mode="python")
    for layer, overrides in layers.items():
        if overrides is not None:
            _apply_layer(merged, layer, overrides)

    try:
        return MediastampConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def flatten_for_env(config: MediastampConfig) -> Dict[str, str]:
    """Render every setting as a ``MEDIASTAMP__SECTION__KEY`` variable."""
    flat: Dict[str, str] = {}
    for section, values in config.model_dump(mode="json").items():
        for key, value in values.items():
            if isinstance(value, list):
                text = "[" + ", ".join(map(str, value)) + "]"
            elif value is None:
                text = "null"
            else:
                text = str(value)
            flat[f"{ENV_PREFIX}{section.upper()}__{key.upper()}"] = text
    return flat


def _apply_layer(merged: dict[str, Any], layer: str, overrides: Any) -> None:
    if not isinstance(overrides, MappingABC):
        raise ConfigError(f"The {layer} layer must be a mapping of settings.")
    for key, value in overrides.items():
        if not isinstance(key, str):
            raise ConfigError(f"The {layer} layer holds a non-string key: {key!r}.")
        _assign(merged, key.split("."), value, layer)


def _assign(target: dict[str, Any], path: list[str], value: Any, layer: str) -> None:
    *parents, leaf = path
    node = target
    for segment in parents:
        node = node.setdefault(segment, {})
        if not isinstance(node, dict):
            raise ConfigError(f"The {layer} layer sets {'.'.join(path)} below a scalar value.")

    if isinstance(value, MappingABC):
        if not isinstance(node.get(leaf), dict):
            node[leaf] = {}
        for child_key, child_value in value.items():
            _assign(node[leaf], [str(child_key)], child_value, layer)
    else:
        node[leaf] = deepcopy(value)


__all__ = ["ENV_PREFIX", "resolve_with_precedence", "flatten_for_env"]
