"""Configuration failures."""

from mediastamp.errors import MediastampError


class ConfigError(MediastampError):
    """Raised for unreadable configuration files and invalid override values."""


__all__ = ["ConfigError"]
