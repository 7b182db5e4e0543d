"""Run modes, options, and reports for the use-case orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List

from mediastamp.timestamps.models import QuarantineDecision, ReconciledTimestamp


class UseCase(str, Enum):
    """The fixed set of pipelines a run can execute."""

    EXIF = "exif"
    FILENAME = "file"
    VALIDATE = "validate"


@dataclass(slots=True, frozen=True)
class RunOptions:
    """Modifiers for a run.

    Attributes:
        rename: Prefix file names with the reconciled timestamp.
        treat_secondary: In EXIF mode, ask the operator about files lacking
            principal tags.
        treat_exif: In FILENAME mode, also write metadata tags.
        isolate_zero_byte: Move empty files aside before the run starts.
    """

    rename: bool = False
    treat_secondary: bool = False
    treat_exif: bool = False
    isolate_zero_byte: bool = True


@dataclass(slots=True)
class RunReport:
    """Outcome of a run.

    Attributes:
        use_case: Mode that was executed.
        root: Target directory.
        treated: Timestamps written back, keyed by final path.
        omitted: Files skipped without a timestamp.
        quarantined: Validation decisions that moved files aside.
        quarantine_failures: Quarantined files that could not be moved.
        zero_byte: Empty files moved aside before the run.
        errors: Per-file read/write failures.
    """

    use_case: UseCase
    root: Path
    treated: Dict[Path, ReconciledTimestamp] = field(default_factory=dict)
    omitted: List[Path] = field(default_factory=list)
    quarantined: List[QuarantineDecision] = field(default_factory=list)
    quarantine_failures: List[Path] = field(default_factory=list)
    zero_byte: List[Path] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        """Return summary metrics for display."""
        return {
            "treated": len(self.treated),
            "omitted": len(self.omitted),
            "quarantined": len(self.quarantined),
            "zero_byte": len(self.zero_byte),
            "errors": len(self.errors) + len(self.quarantine_failures),
        }


__all__ = ["UseCase", "RunOptions", "RunReport"]
