"""File discovery utilities."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List

from mediastamp.config.models import FolderSettings
from mediastamp.errors import InvalidDirectoryError

LOGGER = logging.getLogger(__name__)


def _is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


class DirectoryScanner:
    """List the media files directly inside a target directory."""

    def __init__(self, folders: FolderSettings) -> None:
        self.folders = folders

    def scan(self, root: Path) -> List[Path]:
        """Return regular files in ``root`` that pass the configured filters.

        Raises:
            InvalidDirectoryError: If ``root`` is missing or not a directory.
        """
        root = self.require_directory(root)
        return sorted(self._iter_files(root))

    def zero_byte(self, root: Path) -> List[Path]:
        """Return the empty files among the scanned ones."""
        empty = []
        for path in self.scan(root):
            try:
                size = path.stat().st_size
            except OSError:
                continue
            if size == 0:
                LOGGER.warning("%s byte size is 0", path)
                empty.append(path)
        return empty

    def require_directory(self, root: Path) -> Path:
        resolved = root.expanduser().resolve()
        if not resolved.is_dir():
            raise InvalidDirectoryError(f"Not a directory: {root}")
        return resolved

    def _iter_files(self, root: Path) -> Iterable[Path]:
        excluded = tuple(suffix.lower() for suffix in self.folders.excluded_suffixes)
        for path in root.iterdir():
            if not path.is_file():
                continue
            if _is_hidden(path):
                continue
            if excluded and path.name.lower().endswith(excluded):
                continue
            yield path


__all__ = ["DirectoryScanner"]
