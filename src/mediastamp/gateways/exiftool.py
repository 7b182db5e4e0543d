"""ExifTool-backed metadata gateway."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Dict, Iterable, Optional

from mediastamp.config.models import ToolSettings
from mediastamp.errors import ExternalToolError, MetadataReadError, MetadataWriteError

from .process import ToolRunner, run_tool

LOGGER = logging.getLogger(__name__)

ALL_TIME_TAGS = "time:all"
LARGE_FILE_SUPPORT = "%Image::ExifTool::UserDefined::Options = (\n\tLargeFileSupport => 1,\n);"
_NOISE_MARKERS = ("scanned", "read")


def parse_tag_output(output: str) -> Dict[str, str]:
    """Parse ``exiftool -s`` output lines (``Tag   : value``) into a mapping.

    Summary lines such as ``1 image files read`` are dropped.
    """
    tags: Dict[str, str] = {}
    for line in output.splitlines():
        key, separator, value = line.partition(" : ")
        key = key.strip()
        if not separator or not key or any(marker in key for marker in _NOISE_MARKERS):
            continue
        tags.setdefault(key, value.strip())
    return tags


class ExifToolGateway:
    """Read and write timestamp tags by shelling out to ExifTool."""

    def __init__(self, settings: ToolSettings, *, runner: ToolRunner = run_tool) -> None:
        self.settings = settings
        self._runner = runner

    def ensure_available(self) -> str:
        """Return the installed ExifTool version.

        Raises:
            ExternalToolError: If the executable is missing or does not respond.
        """
        if shutil.which(self.settings.exiftool_path) is None:
            raise ExternalToolError(f"ExifTool not found at {self.settings.exiftool_path!r}")
        version = self._run(["-ver"])
        if not version:
            raise ExternalToolError("ExifTool did not report a version")
        LOGGER.info("Using ExifTool %s", version)
        return version

    def ensure_config_file(self) -> Optional[Path]:
        """Create or extend the configured ExifTool config with large file support."""
        config_path = self.settings.exiftool_config
        if config_path is None:
            return None
        config_path = config_path.expanduser()
        existing = config_path.read_text(encoding="utf-8") if config_path.exists() else ""
        if LARGE_FILE_SUPPORT not in existing:
            content = f"{existing}\n\n{LARGE_FILE_SUPPORT}" if existing else LARGE_FILE_SUPPORT
            config_path.parent.mkdir(parents=True, exist_ok=True)
            config_path.write_text(content, encoding="utf-8")
            LOGGER.info("Wrote ExifTool config %s", config_path)
        return config_path

    def read_all(self, path: Path) -> Dict[str, str]:
        """Return every timestamp tag of ``path``."""
        output = self._run([f"-{ALL_TIME_TAGS}", "-m", "-s", str(path)])
        if output is None:
            raise MetadataReadError(path, "exiftool could not read timestamp tags")
        return parse_tag_output(output)

    def read_one(self, path: Path, tag: str) -> Optional[str]:
        """Return the raw value of ``tag`` or None when absent."""
        output = self._run(["-s", f"-{tag}", str(path)])
        if output is None:
            raise MetadataReadError(path, f"exiftool could not read {tag}")
        return parse_tag_output(output).get(tag)

    def write(self, path: Path, formatted: str, tag_selector: str = ALL_TIME_TAGS) -> None:
        """Overwrite the existing writable tags matched by ``tag_selector``."""
        output = self._run(
            ["-overwrite_original", "-wm", "w", f"-{tag_selector}={formatted}", str(path)]
        )
        if output is None:
            raise MetadataWriteError(path, f"exiftool could not write {tag_selector}={formatted}")
        LOGGER.info("%s: set %s to %s", path, tag_selector, formatted)

    def create_missing(self, path: Path, tags: Iterable[str]) -> None:
        """Create each tag that is not present yet so that a later write reaches it."""
        for tag in tags:
            lowered = tag.lower()
            created = self._run(
                ["-if", f"not ${lowered}", f"-{lowered}=now", "-overwrite_original", str(path)]
            )
            # ExifTool exits non-zero when the condition fails, i.e. the tag exists.
            if created is not None:
                LOGGER.debug("%s: created missing %s", path, tag)

    def _run(self, args: list[str]) -> Optional[str]:
        command = [self.settings.exiftool_path]
        if self.settings.exiftool_config is not None:
            command += ["-config", str(self.settings.exiftool_config.expanduser())]
        return self._runner([*command, *args], timeout=self.settings.timeout_seconds)


__all__ = ["ALL_TIME_TAGS", "ExifToolGateway", "parse_tag_output"]
