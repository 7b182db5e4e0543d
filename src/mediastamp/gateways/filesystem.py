"""Filesystem side effects: timestamps, renames, and quarantine moves."""

from __future__ import annotations

import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Iterable, List

from mediastamp.config.models import ToolSettings
from mediastamp.errors import MetadataWriteError, QuarantineMoveError, RenameConflictError

from .base import AttributeWriter
from .process import ToolRunner, run_tool

LOGGER = logging.getLogger(__name__)

# SetFile flags for the creation and modification dates.
SETFILE_FLAGS = ("-d", "-m")


def split_extension(name: str) -> tuple[str, str]:
    """Split ``name`` at its last dot, keeping dot files whole."""
    dot = name.rfind(".")
    if dot > 0:
        return name[:dot], name[dot:]
    return name, ""


class SetFileAttributeWriter:
    """Write creation and modification dates with macOS ``SetFile``."""

    def __init__(self, settings: ToolSettings, *, runner: ToolRunner = run_tool) -> None:
        self.settings = settings
        self._runner = runner

    def set_create_and_modify(self, path: Path, formatted: str) -> None:
        for flag in SETFILE_FLAGS:
            output = self._runner(
                [self.settings.setfile_path, flag, formatted, str(path)],
                timeout=self.settings.timeout_seconds,
            )
            if output is None:
                raise MetadataWriteError(path, f"SetFile {flag} {formatted!r} failed")
        LOGGER.info("%s: set filesystem dates to %s", path, formatted)


class UtimeAttributeWriter:
    """Write access and modification times where ``SetFile`` is unavailable.

    The creation date cannot be set portably and is left untouched.
    """

    def __init__(self, attribute_format: str) -> None:
        self.attribute_format = attribute_format

    def set_create_and_modify(self, path: Path, formatted: str) -> None:
        stamp = datetime.strptime(formatted, self.attribute_format).timestamp()
        try:
            os.utime(path, (stamp, stamp))
        except OSError as exc:
            raise MetadataWriteError(path, f"could not set file times: {exc}") from exc
        LOGGER.info("%s: set modification time to %s", path, formatted)


def build_attribute_writer(settings: ToolSettings, attribute_format: str) -> AttributeWriter:
    """Return the attribute writer selected by ``settings.attribute_writer``."""
    choice = settings.attribute_writer
    if choice == "auto":
        choice = "setfile" if shutil.which(settings.setfile_path) else "utime"
    if choice == "setfile":
        return SetFileAttributeWriter(settings)
    return UtimeAttributeWriter(attribute_format)


class FileRenamer:
    """Prefix file names with their canonical timestamp."""

    def __init__(self, partition_string: str) -> None:
        self.partition_string = partition_string

    def has_prefix(self, path: Path, prefix: str) -> bool:
        stem, _ = split_extension(path.name)
        return stem == prefix or stem.startswith(prefix + self.partition_string)

    def rename_with_prefix(self, path: Path, prefix: str) -> Path:
        """Rename ``path`` to ``<prefix><partition><name>`` unless already prefixed.

        Raises:
            RenameConflictError: If the source vanished, the destination exists,
                or the filesystem refused the rename.
        """
        if self.has_prefix(path, prefix):
            LOGGER.info("No need to rename %s", path.name)
            return path

        destination = path.with_name(f"{prefix}{self.partition_string}{path.name}")
        if not path.exists():
            raise RenameConflictError(path, "file vanished before rename")
        if destination.exists():
            raise RenameConflictError(path, f"destination already exists: {destination.name}")
        try:
            path.rename(destination)
        except OSError as exc:
            raise RenameConflictError(path, f"rename failed: {exc}") from exc
        LOGGER.info("Renamed %s to %s", path.name, destination.name)
        return destination


class QuarantineMover:
    """Move files into a named sub folder of the target directory."""

    def move_all(self, root: Path, paths: Iterable[Path], folder_name: str) -> List[Path]:
        """Move ``paths`` into ``root / folder_name`` and return those left in place."""
        pending = list(paths)
        if not pending:
            return []

        destination_dir = root / folder_name
        try:
            destination_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            LOGGER.error("Failed to create directory %s: %s", destination_dir, exc)
            return pending

        failed: List[Path] = []
        for path in pending:
            try:
                self._move(path, destination_dir)
            except QuarantineMoveError as exc:
                LOGGER.error("%s; needs manual follow-up", exc)
                failed.append(path)
        return failed

    def _move(self, path: Path, destination_dir: Path) -> None:
        destination = destination_dir / path.name
        if destination.exists():
            raise QuarantineMoveError(path, f"{destination} already exists")
        try:
            path.rename(destination)
        except FileNotFoundError as exc:
            raise QuarantineMoveError(path, "file does not exist") from exc
        except OSError as exc:
            raise QuarantineMoveError(path, f"error moving file: {exc}") from exc
        LOGGER.info("Moved %s to %s", path.name, destination_dir)


__all__ = [
    "SETFILE_FLAGS",
    "split_extension",
    "SetFileAttributeWriter",
    "UtimeAttributeWriter",
    "build_attribute_writer",
    "FileRenamer",
    "QuarantineMover",
]
