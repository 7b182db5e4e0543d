"""Timestamp candidates hidden in file names.

The extractor finds the longest date-like fragment in a file name and reduces
it to a digit blob (``yyyymm``, ``yyyymmdd`` or ``yyyymmdd_hhmmss``). The
validator splits that blob into calendar components, reads the two middle
groups both as month/day and as day/month, and keeps whichever interpretation
is a real timestamp, preferring the direct reading.
"""

from __future__ import annotations

import calendar
import logging
import re
from datetime import date
from typing import Callable, List, Optional, Sequence

from mediastamp.config.models import TimestampSettings
from mediastamp.errors import UnparsableCandidateError

from .models import CandidateVariant, TimestampCandidate

LOGGER = logging.getLogger(__name__)

COMPONENT_WIDTHS: tuple[int, ...] = (4, 2, 2, 2, 2, 2)
DATE_DIGITS = 8
DATE_TIME_SEPARATOR = "_"
_NON_DIGITS = re.compile(r"[^0-9]")


def chunk_digits(digits: str, widths: Sequence[int] = COMPONENT_WIDTHS) -> List[str]:
    """Split ``digits`` into consecutive fixed-width groups.

    Trailing groups are omitted once the input runs out; the last group may be
    shorter than its width.
    """
    groups: List[str] = []
    position = 0
    for width in widths:
        if position >= len(digits):
            break
        groups.append(digits[position : position + width])
        position += width
    return groups


class FilenameCandidateExtractor:
    """Locate the most specific date/time fragment in a file name."""

    def __init__(self, settings: TimestampSettings) -> None:
        self._patterns = [re.compile(pattern) for pattern in settings.filename_patterns]

    def extract(self, filename: str) -> Optional[str]:
        """Return the candidate digit blob for ``filename``.

        Every pattern contributes its first match; the longest match wins and
        earlier patterns win ties.

        Args:
            filename: File name including its extension.

        Returns:
            Optional[str]: ``yyyymm``, ``yyyymmdd`` or ``yyyymmdd_hhmmss`` digits, or
            None when no pattern matched.
        """
        best = ""
        best_pattern: Optional[str] = None
        for pattern in self._patterns:
            match = pattern.search(filename)
            if match and len(match.group(0)) > len(best):
                best = match.group(0)
                best_pattern = pattern.pattern

        digits = _NON_DIGITS.sub("", best)
        if not digits:
            return None
        if len(digits) > DATE_DIGITS:
            digits = digits[:DATE_DIGITS] + DATE_TIME_SEPARATOR + digits[DATE_DIGITS:]
        LOGGER.debug("Candidate %s in %r (pattern %s)", digits, filename, best_pattern)
        return digits


class CandidateValidator:
    """Check candidate digits against calendar bounds."""

    def __init__(
        self,
        settings: TimestampSettings,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.settings = settings
        self._today = today

    def components(self, digits: str) -> List[TimestampCandidate]:
        """Return the direct and, when a day group exists, the swapped interpretation."""
        groups = chunk_digits(_NON_DIGITS.sub("", digits))
        variants = [(CandidateVariant.DIRECT, groups)]
        if len(groups) >= 3:
            swapped = [groups[0], groups[2], groups[1], *groups[3:]]
            variants.append((CandidateVariant.SWAPPED, swapped))

        interpretations: List[TimestampCandidate] = []
        for variant, parts in variants:
            try:
                values = tuple(int(part) for part in parts)
            except ValueError:
                LOGGER.debug("Discarding %s reading of %r", variant.value, digits)
                continue
            interpretations.append(
                TimestampCandidate(source_text=digits, components=values, variant=variant)
            )
        return interpretations

    def is_valid(self, digits: str) -> bool:
        """Return True when at least one interpretation is a real timestamp."""
        return any(self._within_bounds(item.components) for item in self.components(digits))

    def resolve(self, digits: str) -> TimestampCandidate:
        """Return the interpretation to use for ``digits``.

        Raises:
            UnparsableCandidateError: If no interpretation passes the bounds.
        """
        valid = [item for item in self.components(digits) if self._within_bounds(item.components)]
        if not valid:
            raise UnparsableCandidateError(f"{digits!r} does not encode a valid timestamp")

        chosen = valid[0]
        if len(valid) > 1 and valid[0].components != valid[1].components:
            LOGGER.debug(
                "Ambiguous day/month in %s; using %s reading %s over %s",
                digits,
                chosen.variant.value,
                chosen.components,
                valid[1].components,
            )
        return chosen

    def _within_bounds(self, components: Sequence[int]) -> bool:
        current_year = self._today().year
        limits = (
            (current_year - self.settings.year_span, current_year),
            (1, 12),
            None,
            (0, 23),
            (0, 59),
            (0, 59),
        )
        for index, value in enumerate(components):
            if index == 2:
                month = components[1]
                if not 1 <= month <= 12:
                    return False
                if not 1 <= value <= calendar.monthrange(components[0], month)[1]:
                    return False
                continue
            low, high = limits[index]
            if not low <= value <= high:
                return False
        return True


__all__ = [
    "COMPONENT_WIDTHS",
    "chunk_digits",
    "FilenameCandidateExtractor",
    "CandidateValidator",
]
