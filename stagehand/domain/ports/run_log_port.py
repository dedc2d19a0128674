"""
Run Log Port

Architectural Intent:
- Append-only, leveled record of everything that happens in one run
- Passed explicitly to every component; there is no ambient run log
- Insertion order is chronological order
"""

from datetime import datetime
from typing import Protocol, runtime_checkable
from stagehand.domain.value_objects.log_entry import LogEntry
from stagehand.domain.value_objects.run_summary import RunSummary


@runtime_checkable
class RunLogPort(Protocol):
    @property
    def started_at(self) -> datetime: ...

    @property
    def entries(self) -> tuple[LogEntry, ...]: ...

    def info(self, message: str) -> LogEntry: ...

    def success(self, message: str) -> LogEntry: ...

    def warning(self, message: str) -> LogEntry: ...

    def error(self, message: str) -> LogEntry: ...

    def summarize(self) -> RunSummary:
        """Raises LogTargetUnavailableError when there is nothing to summarize."""
        ...
