"""Run-mode orchestration."""

from .models import RunOptions, RunReport, UseCase
from .orchestrator import UseCaseOrchestrator

__all__ = ["RunOptions", "RunReport", "UseCase", "UseCaseOrchestrator"]
