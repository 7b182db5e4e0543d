"""Configuration loading for mediastamp."""

from .exceptions import ConfigError
from .manager import DEFAULT_CONFIG_PATH, ConfigManager, without_stamp
from .models import MediastampConfig
from .resolver import flatten_for_env, resolve_with_precedence

__all__ = [
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "MediastampConfig",
    "flatten_for_env",
    "resolve_with_precedence",
    "without_stamp",
]
