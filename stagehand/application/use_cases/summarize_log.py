"""
Summarize Run Log Use Case

Architectural Intent:
- Re-reports a finished run from its persisted log file
"""

from pathlib import Path
from typing import Union

from stagehand.domain.value_objects.run_summary import RunSummary
from stagehand.infrastructure.run_log import summarize_file


class SummarizeRunLog:
    def execute(self, log_path: Union[str, Path]) -> RunSummary:
        return summarize_file(log_path)
