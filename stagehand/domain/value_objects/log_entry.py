"""
Log Entry Value Object

Architectural Intent:
- One leveled, timestamped record in the append-only run log
- Owns the on-disk line format so writing and summarizing agree on it
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_LINE_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}) - (INFO|SUCCESS|WARNING|ERROR) - (.*)$"
)


class LogLevel(Enum):
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass(frozen=True)
class LogEntry:
    timestamp: datetime
    level: LogLevel
    message: str

    def format(self) -> str:
        return (
            f"{self.timestamp.strftime(TIMESTAMP_FORMAT)} - "
            f"{self.level.value} - {self.message}"
        )

    @staticmethod
    def parse(line: str) -> Optional["LogEntry"]:
        """Parse one log line. Returns None for lines not in the run log format."""
        m = _LINE_RE.match(line.rstrip("\r\n"))
        if not m:
            return None
        stamp, level, message = m.groups()
        return LogEntry(
            timestamp=datetime.strptime(stamp, TIMESTAMP_FORMAT),
            level=LogLevel(level),
            message=message,
        )
