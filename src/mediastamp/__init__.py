"""Reconcile the capture timestamps of photos and videos."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mediastamp")
except PackageNotFoundError:  # source checkout without installed metadata
    __version__ = "0.0.0"

__all__ = ["__version__"]
