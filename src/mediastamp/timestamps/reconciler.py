"""Choose the single timestamp applied to a file."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from mediastamp.config.models import TimestampSettings
from mediastamp.errors import NoTimestampFoundError, UnparsableCandidateError
from mediastamp.gateways.base import InteractivePrompt

from .candidates import CandidateValidator
from .models import MetadataReading, ReconciledTimestamp, TimestampCandidate, TimestampOrigin
from .parser import TimestampParser

LOGGER = logging.getLogger(__name__)

# At most one operator prompt may be outstanding per process.
INTERACTION_LOCK = threading.Lock()

CONFIRM = "y"
DECLINE = "n"


class TimestampReconciler:
    """Resolve a file's timestamp from metadata readings or a filename candidate.

    Each ``from_*`` method returns a :class:`ReconciledTimestamp` or raises
    :class:`NoTimestampFoundError` once every tier of that context is exhausted.
    """

    def __init__(
        self,
        settings: TimestampSettings,
        parser: TimestampParser,
        validator: CandidateValidator,
        prompt: Optional[InteractivePrompt] = None,
        *,
        none_key: str = "-",
        lock: threading.Lock = INTERACTION_LOCK,
    ) -> None:
        self.settings = settings
        self.parser = parser
        self.validator = validator
        self.prompt = prompt
        self.none_key = none_key
        self._lock = lock

    def readings(self, raw: Mapping[str, str]) -> List[MetadataReading]:
        """Parse raw ``tag -> value`` pairs into readings."""
        return [
            MetadataReading(tag=tag, raw=value, parsed=self.parser.parse_metadata(value))
            for tag, value in raw.items()
        ]

    def split(
        self, readings: Iterable[MetadataReading]
    ) -> Tuple[List[MetadataReading], List[MetadataReading]]:
        """Partition readings into principal and secondary tags."""
        principal: List[MetadataReading] = []
        secondary: List[MetadataReading] = []
        for reading in readings:
            if reading.tag in self.settings.principal_tags:
                principal.append(reading)
            else:
                secondary.append(reading)
        return principal, secondary

    def from_principal(
        self, path: Path, readings: Sequence[MetadataReading]
    ) -> ReconciledTimestamp:
        """Pick the earliest parsed principal tag value."""
        parsed = [reading for reading in readings if reading.parsed is not None]
        if not parsed:
            raise NoTimestampFoundError(path, "no parseable principal metadata")

        earliest = min(parsed, key=lambda reading: reading.parsed)
        LOGGER.info("%s: using %s %s", path, earliest.tag, earliest.parsed)
        return ReconciledTimestamp(
            path=path, timestamp=earliest.parsed, origin=TimestampOrigin.PRINCIPAL_METADATA
        )

    def from_secondary(
        self, path: Path, readings: Sequence[MetadataReading]
    ) -> ReconciledTimestamp:
        """Let the operator pick among the secondary tag values."""
        candidates = sorted({reading.parsed for reading in readings if reading.parsed is not None})
        if not candidates:
            LOGGER.warning("%s: no valid secondary timestamps", path)
            raise NoTimestampFoundError(path, "no parseable secondary metadata")

        lines = [f"{index}: {value}" for index, value in enumerate(candidates)]
        lines.append(f"None of those: {self.none_key}")
        options = [self.none_key, *(str(index) for index in range(len(candidates)))]
        answer = self._ask(path, "\n".join(lines), options)
        if answer is None or answer == self.none_key:
            LOGGER.warning("%s: omitted, no secondary timestamp selected", path)
            raise NoTimestampFoundError(path, "operator rejected all secondary timestamps")

        chosen = candidates[int(answer)]
        LOGGER.info("%s: operator selected secondary timestamp %s", path, chosen)
        return ReconciledTimestamp(
            path=path, timestamp=chosen, origin=TimestampOrigin.SECONDARY_METADATA_INTERACTIVE
        )

    def from_filename(
        self,
        path: Path,
        digits: str,
        load_readings: Callable[[], Sequence[MetadataReading]],
    ) -> ReconciledTimestamp:
        """Resolve a filename candidate, completing date-only candidates.

        Args:
            path: File the candidate was extracted from.
            digits: Candidate produced by the extractor.
            load_readings: Returns the file's metadata readings; only called for
                date-only candidates.
        """
        try:
            candidate = self.validator.resolve(digits)
        except UnparsableCandidateError as exc:
            LOGGER.warning("%s: discarded filename candidate: %s", path, exc)
            raise NoTimestampFoundError(path, str(exc)) from exc

        if candidate.has_time:
            timestamp = datetime(*candidate.components)
            LOGGER.info("%s: filename timestamp %s", path, timestamp)
            return ReconciledTimestamp(
                path=path, timestamp=timestamp, origin=TimestampOrigin.FILENAME_EXACT
            )
        if candidate.has_day:
            return self._complete_date(path, candidate, load_readings())
        return self._complete_year_month(path, candidate)

    def _complete_date(
        self,
        path: Path,
        candidate: TimestampCandidate,
        readings: Sequence[MetadataReading],
    ) -> ReconciledTimestamp:
        year, month, day = candidate.components[:3]
        matching = sorted(
            reading.parsed
            for reading in readings
            if reading.parsed is not None
            and reading.parsed.timetuple()[:3] == (year, month, day)
        )
        if matching:
            LOGGER.info(
                "%s: metadata on %s gives time %s", path, candidate.source_text, matching[0]
            )
            return ReconciledTimestamp(
                path=path,
                timestamp=matching[0],
                origin=TimestampOrigin.FILENAME_PARTIAL_METADATA_MATCH,
            )

        timestamp = datetime(year, month, day, *self._default_time())
        LOGGER.info(
            "%s: no metadata for %s, using default time %s", path, candidate.source_text, timestamp
        )
        return ReconciledTimestamp(
            path=path, timestamp=timestamp, origin=TimestampOrigin.FILENAME_PARTIAL_DEFAULT_FILL
        )

    def _complete_year_month(
        self, path: Path, candidate: TimestampCandidate
    ) -> ReconciledTimestamp:
        answer = self._ask(
            path, f"Is {candidate.source_text} a valid partial date?", [CONFIRM, DECLINE]
        )
        if answer != CONFIRM:
            LOGGER.warning(
                "%s: omitted, %s not confirmed as a partial date", path, candidate.source_text
            )
            raise NoTimestampFoundError(path, f"partial date {candidate.source_text} not confirmed")

        year, month = candidate.components[:2]
        timestamp = datetime(year, month, int(self.settings.default_day), *self._default_time())
        LOGGER.info("%s: completed partial date %s to %s", path, candidate.source_text, timestamp)
        return ReconciledTimestamp(
            path=path, timestamp=timestamp, origin=TimestampOrigin.FILENAME_PARTIAL_DEFAULT_FILL
        )

    def _default_time(self) -> Tuple[int, int, int]:
        raw = self.settings.default_time
        return int(raw[0:2]), int(raw[2:4]), int(raw[4:6])

    def _ask(self, path: Path, message: str, options: Sequence[str]) -> Optional[str]:
        if self.prompt is None:
            LOGGER.warning("%s: confirmation needed but no prompt is available", path)
            return None
        with self._lock:
            return self.prompt.choose(f"{path.name}\n{message}", options)


__all__ = ["INTERACTION_LOCK", "TimestampReconciler"]
