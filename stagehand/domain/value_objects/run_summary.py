"""
Run Summary Value Object

Architectural Intent:
- Reduces the full run log into counts, duration and the verbatim problem entries
- The operator reads failures here without opening the raw log

Partitioning:
- SUCCESS
- WARNING and INFO combined (everything that is neither a success nor an error)
- ERROR
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from stagehand.domain.value_objects.log_entry import LogEntry, LogLevel


def format_duration(elapsed: timedelta) -> str:
    total = max(int(elapsed.total_seconds()), 0)
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


@dataclass(frozen=True)
class RunSummary:
    success_count: int
    warning_count: int
    error_count: int
    level_counts: dict[LogLevel, int]
    duration: timedelta
    errors: tuple[LogEntry, ...]
    warnings: tuple[LogEntry, ...]
    log_path: Optional[str] = None

    @property
    def total(self) -> int:
        return sum(self.level_counts.values())

    @staticmethod
    def from_entries(
        entries: Iterable[LogEntry],
        started_at: Optional[datetime] = None,
        finished_at: Optional[datetime] = None,
        log_path: Optional[str] = None,
    ) -> "RunSummary":
        entries = list(entries)
        counts = {level: 0 for level in LogLevel}
        for entry in entries:
            counts[entry.level] += 1

        if started_at is None and entries:
            started_at = entries[0].timestamp
        if finished_at is None:
            finished_at = entries[-1].timestamp if entries else datetime.now()
        duration = finished_at - started_at if started_at else timedelta(0)

        return RunSummary(
            success_count=counts[LogLevel.SUCCESS],
            warning_count=counts[LogLevel.WARNING] + counts[LogLevel.INFO],
            error_count=counts[LogLevel.ERROR],
            level_counts=counts,
            duration=duration,
            errors=tuple(e for e in entries if e.level == LogLevel.ERROR),
            warnings=tuple(e for e in entries if e.level == LogLevel.WARNING),
            log_path=log_path,
        )

    def render(self) -> str:
        lines = [
            "=" * 60,
            "DEPLOYMENT SUMMARY",
            "=" * 60,
            f"Successful operations: {self.success_count}",
            f"Warnings/Info:         {self.warning_count}",
            f"Errors:                {self.error_count}",
            f"Duration:              {format_duration(self.duration)}",
        ]
        if self.log_path:
            lines.append(f"Log file:              {self.log_path}")
        if self.errors:
            lines.append("")
            lines.append("ERRORS:")
            lines.extend(f"  {e.format()}" for e in self.errors)
        if self.warnings:
            lines.append("")
            lines.append("WARNINGS:")
            lines.extend(f"  {e.format()}" for e in self.warnings)
        lines.append("=" * 60)
        return "\n".join(lines)
