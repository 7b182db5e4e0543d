"""Data models exchanged between the timestamp components."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class CandidateVariant(str, Enum):
    """Day/month ordering used to interpret a filename candidate."""

    DIRECT = "direct"
    SWAPPED = "swapped"


class TimestampOrigin(str, Enum):
    """Source tier that produced a reconciled timestamp."""

    PRINCIPAL_METADATA = "principal_metadata"
    SECONDARY_METADATA_INTERACTIVE = "secondary_metadata_interactive"
    FILENAME_EXACT = "filename_exact"
    FILENAME_PARTIAL_METADATA_MATCH = "filename_partial_metadata_match"
    FILENAME_PARTIAL_DEFAULT_FILL = "filename_partial_default_fill"


class QuarantineReason(str, Enum):
    """Why validation rejected a file."""

    NO_FILENAME_TIMESTAMP = "no_filename_timestamp"
    MISMATCH = "mismatch"
    NO_COMPARABLE_METADATA = "no_comparable_metadata"
    TOOL_ARTIFACT = "tool_artifact"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class TimestampCandidate(_FrozenModel):
    """One interpretation of the digits found in a file name.

    Attributes:
        source_text: Digit blob the interpretation was built from.
        components: (year, month, day, hour, minute, second) or a 2-4 element prefix.
        variant: Whether the month/day groups were read directly or swapped.
    """

    source_text: str
    components: Tuple[int, ...]
    variant: CandidateVariant = CandidateVariant.DIRECT

    @property
    def has_day(self) -> bool:
        return len(self.components) >= 3

    @property
    def has_time(self) -> bool:
        return len(self.components) == 6


class MetadataReading(_FrozenModel):
    """A raw metadata tag value and its parsed timestamp, if any."""

    tag: str
    raw: str
    parsed: Optional[datetime] = None


class ReconciledTimestamp(_FrozenModel):
    """The single timestamp chosen for a file during a run."""

    path: Path
    timestamp: datetime
    origin: TimestampOrigin


class QuarantineDecision(_FrozenModel):
    """Validation verdict moving a file into the quarantine folder."""

    path: Path
    reason: QuarantineReason
    stamped_at: datetime = Field(default_factory=datetime.now)
    detail: Optional[str] = None


__all__ = [
    "CandidateVariant",
    "TimestampOrigin",
    "QuarantineReason",
    "TimestampCandidate",
    "MetadataReading",
    "ReconciledTimestamp",
    "QuarantineDecision",
]
