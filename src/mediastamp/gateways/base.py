"""Protocols for the external collaborators the core depends on."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping, Optional, Protocol, Sequence


class MetadataGateway(Protocol):
    """Read and write timestamp tags embedded in media files."""

    def read_all(self, path: Path) -> Mapping[str, str]:
        """Return every timestamp tag of ``path`` as ``tag -> raw value``."""

    def read_one(self, path: Path, tag: str) -> Optional[str]:
        """Return the raw value of ``tag`` or None when it is absent."""

    def write(self, path: Path, formatted: str, tag_selector: str) -> None:
        """Write ``formatted`` into the tags selected by ``tag_selector``."""

    def create_missing(self, path: Path, tags: Iterable[str]) -> None:
        """Create ``tags`` on ``path`` when they do not exist yet."""


class AttributeWriter(Protocol):
    """Set filesystem creation and modification timestamps."""

    def set_create_and_modify(self, path: Path, formatted: str) -> None:
        """Apply ``formatted`` (``MM/dd/yyyy HH:mm:ss``) to ``path``."""


class InteractivePrompt(Protocol):
    """Blocking operator prompt."""

    def choose(self, message: str, options: Sequence[str]) -> str:
        """Ask ``message`` until one of ``options`` is answered and return it."""


class PreviewController(Protocol):
    """Show files to the operator while a prompt is pending."""

    def open(self, path: Path) -> None: ...

    def close_window(self) -> None: ...

    def quit(self) -> None: ...


__all__ = ["MetadataGateway", "AttributeWriter", "InteractivePrompt", "PreviewController"]
