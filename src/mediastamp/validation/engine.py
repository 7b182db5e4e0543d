"""Cross-check filename timestamps against principal metadata."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from mediastamp.config.models import FolderSettings, TimestampSettings
from mediastamp.errors import MetadataReadError
from mediastamp.gateways.base import MetadataGateway
from mediastamp.gateways.filesystem import split_extension
from mediastamp.timestamps.models import QuarantineDecision, QuarantineReason
from mediastamp.timestamps.parser import TimestampParser

LOGGER = logging.getLogger(__name__)


class ValidationEngine:
    """Decide which files must be quarantined for manual review.

    A file passes when its name starts with a ``yyyyMMdd_HHmmss`` timestamp and
    every principal tag that can be parsed holds exactly that timestamp.
    """

    def __init__(
        self,
        settings: TimestampSettings,
        folders: FolderSettings,
        gateway: MetadataGateway,
        parser: TimestampParser,
        *,
        max_workers: Optional[int] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.settings = settings
        self.folders = folders
        self.gateway = gateway
        self.parser = parser
        self.max_workers = max_workers
        self._clock = clock

    def filename_timestamp(self, path: Path) -> Optional[datetime]:
        """Parse the part of the name before the partition string."""
        stem, _ = split_extension(path.name)
        prefix, _, _ = stem.partition(self.settings.partition_string)
        return self.parser.parse_filename(prefix)

    def decide(self, path: Path) -> Optional[QuarantineDecision]:
        """Return a quarantine decision for ``path`` or None when it is consistent."""
        LOGGER.info("Validating %s", path)
        if path.name.endswith(self.folders.tool_artifact_suffix):
            LOGGER.warning("%s is a remnant ExifTool temp file", path)
            return self._quarantine(path, QuarantineReason.TOOL_ARTIFACT)

        expected = self.filename_timestamp(path)
        if expected is None:
            LOGGER.warning("%s: file name contains no valid timestamp", path)
            return self._quarantine(path, QuarantineReason.NO_FILENAME_TIMESTAMP)

        compared = 0
        mismatched: List[str] = []
        for tag in self.settings.principal_tags:
            actual = self._read_tag(path, tag)
            if actual is None:
                continue
            compared += 1
            LOGGER.info("Comparing file timestamp %s with %s %s", expected, tag, actual)
            if actual != expected:
                mismatched.append(f"{tag}={actual}")

        if mismatched:
            LOGGER.warning("%s: timestamps do not match (%s)", path, ", ".join(mismatched))
            detail = "; ".join([f"filename={expected}", *mismatched])
            return self._quarantine(path, QuarantineReason.MISMATCH, detail=detail)
        if compared == 0:
            LOGGER.warning("%s: no principal tag could be compared", path)
            return self._quarantine(path, QuarantineReason.NO_COMPARABLE_METADATA)
        LOGGER.info("%s: timestamps match", path)
        return None

    def run(self, paths: Iterable[Path]) -> List[QuarantineDecision]:
        """Validate ``paths`` concurrently and return the quarantine decisions in order."""
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            outcomes = list(executor.map(self.decide, paths))
        return [decision for decision in outcomes if decision is not None]

    def _read_tag(self, path: Path, tag: str) -> Optional[datetime]:
        try:
            raw = self.gateway.read_one(path, tag)
        except MetadataReadError as exc:
            LOGGER.warning("%s", exc)
            return None
        if raw is None:
            return None
        parsed = self.parser.parse_metadata(raw)
        if parsed is None:
            LOGGER.warning("%s: %s value %r cannot be converted", path, tag, raw)
        return parsed

    def _quarantine(
        self, path: Path, reason: QuarantineReason, *, detail: Optional[str] = None
    ) -> QuarantineDecision:
        return QuarantineDecision(path=path, reason=reason, stamped_at=self._clock(), detail=detail)


__all__ = ["ValidationEngine"]
