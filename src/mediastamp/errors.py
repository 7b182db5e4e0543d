"""Error kinds raised while reconciling media timestamps."""

from __future__ import annotations

from pathlib import Path


class MediastampError(Exception):
    """Base exception for mediastamp operations."""


class InvalidDirectoryError(MediastampError):
    """Raised before any file is touched when the target directory is unusable."""


class ExternalToolError(MediastampError):
    """Raised when a required external executable is unavailable."""


class FileOperationError(MediastampError):
    """Base class for failures tied to one file.

    Attributes:
        path: File the failure relates to.
    """

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class MetadataReadError(FileOperationError):
    """Raised when metadata cannot be read from a file."""


class MetadataWriteError(FileOperationError):
    """Raised when metadata or filesystem timestamps cannot be written."""


class RenameConflictError(FileOperationError):
    """Raised when a rename is impossible or refused by the filesystem."""


class QuarantineMoveError(FileOperationError):
    """Raised when a file cannot be moved into a quarantine folder."""


class UnparsableCandidateError(MediastampError):
    """Raised when no interpretation of a filename candidate is a valid timestamp."""


class NoTimestampFoundError(FileOperationError):
    """Raised when every reconciliation tier failed for a file."""


__all__ = [
    "MediastampError",
    "InvalidDirectoryError",
    "ExternalToolError",
    "FileOperationError",
    "MetadataReadError",
    "MetadataWriteError",
    "RenameConflictError",
    "QuarantineMoveError",
    "UnparsableCandidateError",
    "NoTimestampFoundError",
]
