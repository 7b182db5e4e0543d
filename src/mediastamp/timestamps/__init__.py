"""Timestamp extraction, validation, and reconciliation."""

from .candidates import CandidateValidator, FilenameCandidateExtractor
from .models import (
    CandidateVariant,
    MetadataReading,
    QuarantineDecision,
    QuarantineReason,
    ReconciledTimestamp,
    TimestampCandidate,
    TimestampOrigin,
)
from .parser import TimestampParser
from .reconciler import INTERACTION_LOCK, TimestampReconciler

__all__ = [
    "CandidateValidator",
    "FilenameCandidateExtractor",
    "CandidateVariant",
    "MetadataReading",
    "QuarantineDecision",
    "QuarantineReason",
    "ReconciledTimestamp",
    "TimestampCandidate",
    "TimestampOrigin",
    "TimestampParser",
    "INTERACTION_LOCK",
    "TimestampReconciler",
]
