"""
File Sync Domain Service

Architectural Intent:
- Copies every file with one extension from a source directory to a destination
  (local path or administrative share), creating the destination on demand
- Partial-failure semantics: one failing file never stops the rest of the batch
- Reconciliation is a file count comparison, not a content check

Distribution:
- The same batch fanned out to several destinations one at a time, each with its
  own reconciliation and its own host outcome
"""

from __future__ import annotations
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from stagehand.domain.entities.step import SyncDestination
from stagehand.domain.ports.run_log_port import RunLogPort
from stagehand.domain.value_objects.step_outcome import (
    FailureKind,
    HostOutcome,
    OutcomeStatus,
)

logger = logging.getLogger(__name__)


def matching_files(directory: Path, extension: str) -> list[Path]:
    ext = extension.lower()
    return sorted(
        p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == ext
    )


@dataclass(frozen=True)
class SyncReport:
    source_count: int
    destination_count: Optional[int]
    copied: tuple[str, ...]
    failed: tuple[str, ...]
    recount_error: str = ""

    @property
    def counts_match(self) -> bool:
        return self.source_count == self.destination_count


class FileSyncService:
    def __init__(self, run_log: RunLogPort):
        self.run_log = run_log

    def _copy_batch(
        self, source: Path, destination: Path, extension: str
    ) -> SyncReport:
        files = matching_files(source, extension)
        copied: list[str] = []
        failed: list[str] = []
        for f in files:
            try:
                shutil.copy2(f, destination / f.name)
            except OSError as e:
                failed.append(f.name)
                self.run_log.error(f"Failed to copy {f.name} to {destination}: {e}")
                continue
            copied.append(f.name)
            self.run_log.success(f"Copied {f.name} to {destination}")

        try:
            dest_count = len(matching_files(destination, extension))
        except OSError as e:
            self.run_log.error(f"Cannot recount destination {destination}: {e}")
            return SyncReport(
                len(files), None, tuple(copied), tuple(failed), recount_error=str(e)
            )

        report = SyncReport(len(files), dest_count, tuple(copied), tuple(failed))
        if report.counts_match:
            self.run_log.info(
                f"File count verified for {destination}: "
                f"{report.source_count} = {report.destination_count}"
            )
        else:
            self.run_log.warning(
                f"File count mismatch for {destination}: source "
                f"{report.source_count}, destination {report.destination_count}"
            )
        return report

    def sync(
        self, source: str, destination: str, extension: str, label: str = ""
    ) -> HostOutcome:
        """Copy the batch and reconcile. ``label`` names the outcome (host or path)."""
        name = label or destination
        src = Path(source)
        dest = Path(destination)

        if not src.is_dir():
            self.run_log.error(f"Source directory not found: {source}")
            return HostOutcome(
                name,
                OutcomeStatus.NOT_FOUND,
                f"source {source} not found",
                FailureKind.MISSING_PATH,
            )

        try:
            files = matching_files(src, extension)
        except OSError as e:
            self.run_log.error(f"Cannot list source directory {source}: {e}")
            return HostOutcome(name, OutcomeStatus.FAILED, str(e), FailureKind.MISSING_PATH)

        if not files:
            self.run_log.warning(f"No {extension} files found in {source}")
            return HostOutcome(name, OutcomeStatus.SKIPPED, f"no {extension} files")

        try:
            dest.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.run_log.error(f"Cannot create destination {destination}: {e}")
            return HostOutcome(name, OutcomeStatus.FAILED, str(e), FailureKind.MISSING_PATH)

        logger.debug("Copying %d %s files %s -> %s", len(files), extension, src, dest)
        report = self._copy_batch(src, dest, extension)

        if report.recount_error:
            return HostOutcome(
                name,
                OutcomeStatus.FAILED,
                f"destination unreadable after copy: {report.recount_error}",
                FailureKind.MISSING_PATH,
            )
        if report.failed:
            return HostOutcome(
                name,
                OutcomeStatus.FAILED,
                f"{len(report.failed)} of {report.source_count} files failed",
                FailureKind.FILE_COPY_FAILURE,
            )
        if not report.counts_match:
            return HostOutcome(
                name,
                OutcomeStatus.FAILED,
                f"count mismatch {report.source_count} != {report.destination_count}",
                FailureKind.COUNT_MISMATCH,
            )
        return HostOutcome(
            name, OutcomeStatus.SUCCEEDED, f"{len(report.copied)} files copied"
        )

    def distribute(
        self,
        source: str,
        destinations: Sequence[SyncDestination],
        extension: str,
    ) -> list[HostOutcome]:
        """Fan the batch out to each destination in order, never in parallel."""
        outcomes = []
        for d in destinations:
            self.run_log.info(f"Distributing {extension} files to {d.host} ({d.path})")
            try:
                outcome = self.sync(source, d.path, extension, label=d.host.name)
            except OSError as e:
                self.run_log.error(f"Distribution to {d.host} ({d.path}) failed: {e}")
                outcome = HostOutcome(
                    d.host.name, OutcomeStatus.FAILED, str(e), FailureKind.MISSING_PATH
                )
            outcomes.append(outcome)
        return outcomes
