"""Sequence extraction, reconciliation, write-back, and validation per run mode."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, assert_never

from mediastamp.config.models import MediastampConfig
from mediastamp.errors import (
    MetadataReadError,
    MetadataWriteError,
    NoTimestampFoundError,
    RenameConflictError,
)
from mediastamp.gateways import (
    AttributeWriter,
    ConsolePrompt,
    ExifToolGateway,
    FileRenamer,
    InteractivePrompt,
    MetadataGateway,
    PreviewController,
    QuarantineMover,
    build_attribute_writer,
    build_preview,
)
from mediastamp.gateways.exiftool import ALL_TIME_TAGS
from mediastamp.ingestion import DirectoryScanner
from mediastamp.timestamps import (
    CandidateValidator,
    FilenameCandidateExtractor,
    MetadataReading,
    ReconciledTimestamp,
    TimestampParser,
    TimestampReconciler,
)
from mediastamp.validation import ValidationEngine

from .models import RunOptions, RunReport, UseCase

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class _FileOutcome:
    path: Path
    reconciled: Optional[ReconciledTimestamp] = None
    secondary: List[MetadataReading] = field(default_factory=list)
    error: Optional[str] = None


class UseCaseOrchestrator:
    """Run one of the three pipelines over a directory.

    Per-file reads and non-interactive reconciliation run in a thread pool; the
    calling thread collects results and is the only writer of each batch.
    Interactive secondary-tag prompts run afterwards on the calling thread.
    """

    def __init__(
        self,
        config: MediastampConfig,
        *,
        scanner: DirectoryScanner,
        gateway: MetadataGateway,
        attribute_writer: AttributeWriter,
        parser: TimestampParser,
        extractor: FilenameCandidateExtractor,
        reconciler: TimestampReconciler,
        validation: ValidationEngine,
        renamer: FileRenamer,
        mover: QuarantineMover,
        preview: PreviewController,
    ) -> None:
        self.config = config
        self.scanner = scanner
        self.gateway = gateway
        self.attribute_writer = attribute_writer
        self.parser = parser
        self.extractor = extractor
        self.reconciler = reconciler
        self.validation = validation
        self.renamer = renamer
        self.mover = mover
        self.preview = preview

    @classmethod
    def from_config(
        cls,
        config: MediastampConfig,
        *,
        gateway: Optional[MetadataGateway] = None,
        attribute_writer: Optional[AttributeWriter] = None,
        prompt: Optional[InteractivePrompt] = None,
        preview: Optional[PreviewController] = None,
        today: Callable[[], date] = date.today,
    ) -> "UseCaseOrchestrator":
        """Wire the default collaborators, letting callers substitute any of them."""
        stamps = config.timestamps
        tools = config.tools
        parser = TimestampParser(stamps)
        metadata = gateway or ExifToolGateway(tools)
        return cls(
            config,
            scanner=DirectoryScanner(config.folders),
            gateway=metadata,
            attribute_writer=attribute_writer
            or build_attribute_writer(tools, stamps.attribute_format),
            parser=parser,
            extractor=FilenameCandidateExtractor(stamps),
            reconciler=TimestampReconciler(
                stamps,
                parser,
                CandidateValidator(stamps, today=today),
                prompt or ConsolePrompt(),
                none_key=config.interaction.none_key,
            ),
            validation=ValidationEngine(
                stamps, config.folders, metadata, parser, max_workers=tools.max_workers
            ),
            renamer=FileRenamer(stamps.partition_string),
            mover=QuarantineMover(),
            preview=preview
            or build_preview(config.interaction.preview_app, timeout=tools.timeout_seconds),
        )

    def run(
        self, use_case: UseCase, directory: Path, options: RunOptions = RunOptions()
    ) -> RunReport:
        """Execute ``use_case`` over ``directory``.

        Raises:
            InvalidDirectoryError: If ``directory`` is not a directory; nothing is touched.
        """
        root = self.scanner.require_directory(directory)
        report = RunReport(use_case=use_case, root=root)
        if options.isolate_zero_byte:
            self._isolate_zero_byte(root, report)

        match use_case:
            case UseCase.EXIF:
                self._run_exif(root, options, report)
            case UseCase.FILENAME:
                self._run_filename(root, options, report)
            case UseCase.VALIDATE:
                self._run_validate(root, report)
            case _:
                assert_never(use_case)
        LOGGER.info("%s run on %s finished: %s", use_case.value, root, report.counts())
        return report

    # Modes ---------------------------------------------------------------

    def _run_exif(self, root: Path, options: RunOptions, report: RunReport) -> None:
        principal_batch: Dict[Path, ReconciledTimestamp] = {}
        deferred: List[_FileOutcome] = []
        for outcome in self._map_files(root, lambda path: self._principal_step(path, options)):
            if outcome.reconciled is not None:
                principal_batch[outcome.reconciled.path] = outcome.reconciled
            elif outcome.error is not None:
                report.errors.append(outcome.error)
                report.omitted.append(outcome.path)
            else:
                deferred.append(outcome)

        secondary_batch: Dict[Path, ReconciledTimestamp] = {}
        for outcome in deferred:
            if not options.treat_secondary:
                LOGGER.warning("Omitting %s: no principal timestamp", outcome.path)
                report.omitted.append(outcome.path)
                continue
            reconciled = self._secondary_step(outcome, options.rename)
            if reconciled is None:
                report.omitted.append(outcome.path)
            else:
                secondary_batch[reconciled.path] = reconciled

        self._write_back(principal_batch, report, write_metadata=True)
        self._write_back(secondary_batch, report, write_metadata=True)
        self._run_validate(root, report)
        if options.treat_secondary:
            self.preview.quit()

    def _run_filename(self, root: Path, options: RunOptions, report: RunReport) -> None:
        batch: Dict[Path, ReconciledTimestamp] = {}
        for outcome in self._map_files(root, lambda path: self._filename_step(path, options)):
            if outcome.reconciled is not None:
                batch[outcome.reconciled.path] = outcome.reconciled
            else:
                if outcome.error is not None:
                    report.errors.append(outcome.error)
                report.omitted.append(outcome.path)

        self._write_back(batch, report, write_metadata=options.treat_exif)
        self._run_validate(root, report)

    def _run_validate(self, root: Path, report: RunReport) -> None:
        decisions = self.validation.run(self.scanner.scan(root))
        for decision in decisions:
            LOGGER.warning("Quarantining %s (%s)", decision.path, decision.reason.value)
        failed = self.mover.move_all(
            root, [decision.path for decision in decisions], self.config.folders.quarantine
        )
        report.quarantined.extend(decisions)
        report.quarantine_failures.extend(failed)

    # Per-file steps ------------------------------------------------------

    def _principal_step(self, path: Path, options: RunOptions) -> _FileOutcome:
        try:
            raw = self.gateway.read_all(path)
        except MetadataReadError as exc:
            LOGGER.error("%s", exc)
            return _FileOutcome(path, error=str(exc))

        principal, secondary = self.reconciler.split(self.reconciler.readings(raw))
        try:
            reconciled = self.reconciler.from_principal(path, principal)
        except NoTimestampFoundError:
            return _FileOutcome(path, secondary=secondary)
        return _FileOutcome(path, reconciled=self._prepare(reconciled, options.rename))

    def _secondary_step(
        self, outcome: _FileOutcome, rename: bool
    ) -> Optional[ReconciledTimestamp]:
        self.preview.open(outcome.path)
        try:
            reconciled = self.reconciler.from_secondary(outcome.path, outcome.secondary)
        except NoTimestampFoundError as exc:
            LOGGER.warning("Omitting %s", exc)
            return None
        finally:
            self.preview.close_window()
        return self._prepare(reconciled, rename)

    def _filename_step(self, path: Path, options: RunOptions) -> _FileOutcome:
        digits = self.extractor.extract(path.name)
        if digits is None:
            LOGGER.info("Omitting %s: no date pattern in file name", path)
            return _FileOutcome(path)
        try:
            reconciled = self.reconciler.from_filename(
                path, digits, lambda: self._readings_or_empty(path)
            )
        except NoTimestampFoundError as exc:
            LOGGER.warning("Omitting %s", exc)
            return _FileOutcome(path)
        return _FileOutcome(path, reconciled=self._prepare(reconciled, options.rename))

    def _readings_or_empty(self, path: Path) -> List[MetadataReading]:
        try:
            return self.reconciler.readings(self.gateway.read_all(path))
        except MetadataReadError as exc:
            LOGGER.warning("%s; completing date without metadata", exc)
            return []

    # Shared helpers ------------------------------------------------------

    def _map_files(
        self, root: Path, step: Callable[[Path], _FileOutcome]
    ) -> List[_FileOutcome]:
        files = self.scanner.scan(root)
        with ThreadPoolExecutor(max_workers=self.config.tools.max_workers) as executor:
            futures = {executor.submit(step, path): path for path in files}
            outcomes = [future.result() for future in as_completed(futures)]
        return sorted(outcomes, key=lambda outcome: outcome.path)

    def _prepare(self, reconciled: ReconciledTimestamp, rename: bool) -> ReconciledTimestamp:
        if not rename:
            return reconciled
        prefix = self.parser.format_filename(reconciled.timestamp)
        try:
            new_path = self.renamer.rename_with_prefix(reconciled.path, prefix)
        except RenameConflictError as exc:
            LOGGER.error("Keeping original name: %s", exc)
            return reconciled
        return reconciled.model_copy(update={"path": new_path})

    def _write_back(
        self,
        batch: Mapping[Path, ReconciledTimestamp],
        report: RunReport,
        *,
        write_metadata: bool,
    ) -> None:
        for path in sorted(batch):
            reconciled = batch[path]
            try:
                if write_metadata:
                    self.gateway.create_missing(path, self.config.timestamps.principal_tags)
                    self.gateway.write(
                        path, self.parser.format_metadata(reconciled.timestamp), ALL_TIME_TAGS
                    )
                self.attribute_writer.set_create_and_modify(
                    path, self.parser.format_attribute(reconciled.timestamp)
                )
            except MetadataWriteError as exc:
                LOGGER.error("%s", exc)
                report.errors.append(str(exc))
                continue
            LOGGER.info(
                "Treated %s: %s (%s)", path, reconciled.timestamp, reconciled.origin.value
            )
            report.treated[path] = reconciled

    def _isolate_zero_byte(self, root: Path, report: RunReport) -> None:
        empty = self.scanner.zero_byte(root)
        failed = self.mover.move_all(root, empty, self.config.folders.zero_byte)
        report.zero_byte.extend(path for path in empty if path not in failed)
        report.quarantine_failures.extend(failed)


__all__ = ["UseCaseOrchestrator"]
