"""
Run Log (Log & Summary Aggregator)

Architectural Intent:
- Implements RunLogPort on top of stdlib logging handlers
- One append-only text file per run, named with the run timestamp
- Every entry is echoed to the console immediately and persisted to the file
- Summaries are computed from the persisted file, so what the operator sees
  matches the audit record

Lifecycle:
- RunLog.open(log_root) at run start, close() at run end (or use as a context
  manager)
- If the log directory cannot be created the run continues console-only and
  summarize() raises LogTargetUnavailableError
"""

from __future__ import annotations
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import IO, Optional

from stagehand.domain.exceptions import EmptyRunLogError, LogTargetUnavailableError
from stagehand.domain.value_objects.log_entry import (
    TIMESTAMP_FORMAT,
    LogEntry,
    LogLevel,
)
from stagehand.domain.value_objects.run_summary import RunSummary
from stagehand.infrastructure.logging import SUCCESS

logger = logging.getLogger(__name__)

LINE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

_LEVELS = {
    LogLevel.INFO: logging.INFO,
    LogLevel.SUCCESS: SUCCESS,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


def log_file_name(started_at: datetime) -> str:
    return f"stagehand_{started_at.strftime('%Y%m%d_%H%M%S')}.log"


def read_entries(path: Path) -> list[LogEntry]:
    """Parse a run log file. Raises LogTargetUnavailableError if it cannot be read."""
    try:
        with open(path, encoding="utf-8") as f:
            return [e for e in (LogEntry.parse(line) for line in f) if e is not None]
    except OSError as e:
        raise LogTargetUnavailableError(f"Cannot read run log {path}: {e}") from e


def summarize_file(
    path: str | Path, started_at: Optional[datetime] = None
) -> RunSummary:
    """Summarize an existing run log file."""
    path = Path(path)
    if not path.is_file():
        raise LogTargetUnavailableError(f"Run log not found: {path}")
    entries = read_entries(path)
    if not entries:
        raise EmptyRunLogError(f"Run log has no entries: {path}")
    return RunSummary.from_entries(entries, started_at=started_at, log_path=str(path))


class RunLog:
    def __init__(
        self,
        log_path: Optional[Path] = None,
        started_at: Optional[datetime] = None,
        echo: bool = True,
        stream: Optional[IO[str]] = None,
    ):
        self._started_at = started_at or datetime.now()
        self._log_path = log_path
        self._entries: list[LogEntry] = []
        # Unregistered logger: one per run, never shared through logging.getLogger
        self._logger = logging.Logger(f"stagehand.run.{self._started_at:%Y%m%d_%H%M%S}")
        self._logger.setLevel(logging.INFO)
        self._logger.propagate = False

        formatter = logging.Formatter(LINE_FORMAT, datefmt=TIMESTAMP_FORMAT)
        if log_path is not None:
            file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
            file_handler.setFormatter(formatter)
            self._logger.addHandler(file_handler)
        if echo:
            console = logging.StreamHandler(stream or sys.stdout)
            console.setFormatter(formatter)
            self._logger.addHandler(console)

    @classmethod
    def open(
        cls,
        log_root: str | Path,
        started_at: Optional[datetime] = None,
        echo: bool = True,
        stream: Optional[IO[str]] = None,
    ) -> "RunLog":
        started_at = started_at or datetime.now()
        root = Path(log_root)
        try:
            root.mkdir(parents=True, exist_ok=True)
            return cls(root / log_file_name(started_at), started_at, echo, stream)
        except OSError as e:
            logger.warning("Run log target %s unavailable, console only: %s", root, e)
            return cls(None, started_at, echo, stream)

    @property
    def started_at(self) -> datetime:
        return self._started_at

    @property
    def log_path(self) -> Optional[Path]:
        return self._log_path

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    def log(self, level: LogLevel, message: str) -> LogEntry:
        entry = LogEntry(datetime.now(), level, " ".join(message.splitlines()))
        self._entries.append(entry)
        self._logger.log(_LEVELS[level], "%s", entry.message)
        return entry

    def info(self, message: str) -> LogEntry:
        return self.log(LogLevel.INFO, message)

    def success(self, message: str) -> LogEntry:
        return self.log(LogLevel.SUCCESS, message)

    def warning(self, message: str) -> LogEntry:
        return self.log(LogLevel.WARNING, message)

    def error(self, message: str) -> LogEntry:
        return self.log(LogLevel.ERROR, message)

    def flush(self) -> None:
        for handler in self._logger.handlers:
            handler.flush()

    def summarize(self) -> RunSummary:
        """Reduce the persisted run log into a RunSummary.

        Raises:
            LogTargetUnavailableError: no log file for this run.
            EmptyRunLogError: the log file holds no entries.
        """
        if self._log_path is None:
            raise LogTargetUnavailableError("Run log has no file target")
        self.flush()
        if not self._log_path.is_file():
            raise LogTargetUnavailableError(f"Run log not found: {self._log_path}")
        entries = read_entries(self._log_path)
        if not entries:
            raise EmptyRunLogError(f"Run log has no entries: {self._log_path}")
        return RunSummary.from_entries(
            entries,
            started_at=self._started_at,
            finished_at=datetime.now(),
            log_path=str(self._log_path),
        )

    def close(self) -> None:
        for handler in list(self._logger.handlers):
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)

    def __enter__(self) -> "RunLog":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
