"""
Step Outcome Value Objects

Architectural Intent:
- Closed result types for every executor call; no string tags drive control flow
- A step outcome is the worst-case reduction of its per-host outcomes
- FailureKind names why a host outcome is not clean, for the audit record

Severity Ordering:
- FAILED > NOT_FOUND > SKIPPED > ALREADY_IN_DESIRED_STATE > SUCCEEDED
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional


class OutcomeStatus(Enum):
    SUCCEEDED = 0
    ALREADY_IN_DESIRED_STATE = 1
    SKIPPED = 2
    NOT_FOUND = 3
    FAILED = 4

    @property
    def severity(self) -> int:
        return self.value

    @property
    def is_clean(self) -> bool:
        return self not in (OutcomeStatus.FAILED, OutcomeStatus.NOT_FOUND)

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").lower()


class FailureKind(Enum):
    UNREACHABLE_HOST = "UnreachableHost"
    MISSING_PATH = "MissingPath"
    SERVICE_NOT_FOUND = "ServiceNotFound"
    SERVICE_STATE_MISMATCH = "ServiceStateMismatch"
    PROCESS_STILL_RUNNING = "ProcessStillRunning"
    FILE_COPY_FAILURE = "FileCopyFailure"
    COUNT_MISMATCH = "CountMismatch"
    LOG_TARGET_UNAVAILABLE = "LogTargetUnavailable"


def reduce_statuses(
    statuses: Iterable[OutcomeStatus],
    empty: OutcomeStatus = OutcomeStatus.SKIPPED,
) -> OutcomeStatus:
    """Return the most severe status, or ``empty`` when there are none."""
    statuses = list(statuses)
    if not statuses:
        return empty
    return max(statuses, key=lambda s: s.severity)


@dataclass(frozen=True)
class HostOutcome:
    """Result of one executor call against one host (or destination)."""
    host_name: str
    status: OutcomeStatus
    detail: str = ""
    failure: Optional[FailureKind] = None

    @property
    def is_clean(self) -> bool:
        return self.status.is_clean

    def __str__(self) -> str:
        text = f"{self.host_name}: {self.status.label}"
        if self.detail:
            text += f" ({self.detail})"
        return text


@dataclass(frozen=True)
class StepOutcome:
    """Reduced result of executing one StepDefinition."""
    ordinal: int
    label: str
    host_outcomes: tuple[HostOutcome, ...] = ()
    status: OutcomeStatus = field(default=OutcomeStatus.SKIPPED)
    detail: str = ""

    @staticmethod
    def from_hosts(
        ordinal: int, label: str, host_outcomes: Iterable[HostOutcome]
    ) -> "StepOutcome":
        outcomes = tuple(host_outcomes)
        return StepOutcome(
            ordinal=ordinal,
            label=label,
            host_outcomes=outcomes,
            status=reduce_statuses(o.status for o in outcomes),
        )

    @staticmethod
    def acknowledged(ordinal: int, label: str) -> "StepOutcome":
        return StepOutcome(
            ordinal=ordinal,
            label=label,
            status=OutcomeStatus.SUCCEEDED,
            detail="acknowledged",
        )

    @staticmethod
    def failed(ordinal: int, label: str, detail: str) -> "StepOutcome":
        return StepOutcome(
            ordinal=ordinal,
            label=label,
            status=OutcomeStatus.FAILED,
            detail=detail,
        )

    @property
    def is_clean(self) -> bool:
        return self.status.is_clean and all(o.is_clean for o in self.host_outcomes)

    @property
    def problems(self) -> tuple[HostOutcome, ...]:
        return tuple(o for o in self.host_outcomes if not o.is_clean)
