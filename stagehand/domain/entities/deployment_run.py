"""
Deployment Run Module

Architectural Intent:
- DeploymentRun aggregate is the consistency boundary for one update run
- The sequencer state machine is enforced through domain methods
- All state changes produce new instances to ensure auditability
- Never persisted beyond the run log file and the in-memory summary

State Machine:
- NOT_STARTED -> VALIDATION_GATE            (begin_validation)
- VALIDATION_GATE -> RUNNING | ABORTED      (start / abort)
- RUNNING -> PAUSED(stepN)                  (pause, after every step but the last)
- PAUSED(stepN) -> RUNNING                  (resume)
- RUNNING -> COMPLETED                      (complete, after the final step)
"""

from __future__ import annotations
from datetime import datetime
from enum import Enum, auto
from typing import Optional

from stagehand.domain.value_objects.step_outcome import StepOutcome


class SequencerState(Enum):
    NOT_STARTED = auto()
    VALIDATION_GATE = auto()
    RUNNING = auto()
    PAUSED = auto()
    ABORTED = auto()
    COMPLETED = auto()


class DeploymentRun:
    __slots__ = (
        "_started_at",
        "_state",
        "_paused_at",
        "_outcomes",
        "_abort_reason",
        "_log_path",
    )

    def __init__(
        self,
        started_at: Optional[datetime] = None,
        state: SequencerState = SequencerState.NOT_STARTED,
        paused_at: Optional[int] = None,
        outcomes: tuple[StepOutcome, ...] = (),
        abort_reason: Optional[str] = None,
        log_path: Optional[str] = None,
    ):
        self._started_at = started_at or datetime.now()
        self._state = state
        self._paused_at = paused_at
        self._outcomes = outcomes
        self._abort_reason = abort_reason
        self._log_path = log_path

    @property
    def started_at(self) -> datetime:
        return self._started_at

    @property
    def state(self) -> SequencerState:
        return self._state

    @property
    def paused_at(self) -> Optional[int]:
        """Ordinal of the step the run is paused after, if PAUSED."""
        return self._paused_at

    @property
    def outcomes(self) -> tuple[StepOutcome, ...]:
        return self._outcomes

    @property
    def abort_reason(self) -> Optional[str]:
        return self._abort_reason

    @property
    def log_path(self) -> Optional[str]:
        return self._log_path

    @property
    def is_finished(self) -> bool:
        return self._state in (SequencerState.ABORTED, SequencerState.COMPLETED)

    @property
    def unclean_outcomes(self) -> tuple[StepOutcome, ...]:
        return tuple(o for o in self._outcomes if not o.is_clean)

    def _evolve(self, **changes) -> "DeploymentRun":
        values = {
            "started_at": self._started_at,
            "state": self._state,
            "paused_at": self._paused_at,
            "outcomes": self._outcomes,
            "abort_reason": self._abort_reason,
            "log_path": self._log_path,
        }
        values.update(changes)
        return DeploymentRun(**values)

    def begin_validation(self) -> "DeploymentRun":
        if self._state != SequencerState.NOT_STARTED:
            raise ValueError("Run can only enter validation from NOT_STARTED state")
        return self._evolve(state=SequencerState.VALIDATION_GATE)

    def start(self) -> "DeploymentRun":
        if self._state != SequencerState.VALIDATION_GATE:
            raise ValueError("Run must pass the VALIDATION_GATE to start")
        return self._evolve(state=SequencerState.RUNNING)

    def abort(self, reason: str) -> "DeploymentRun":
        if self._state != SequencerState.VALIDATION_GATE:
            raise ValueError("Run can only abort at the VALIDATION_GATE")
        return self._evolve(state=SequencerState.ABORTED, abort_reason=reason)

    def record(self, outcome: StepOutcome) -> "DeploymentRun":
        if self._state != SequencerState.RUNNING:
            raise ValueError("Outcomes can only be recorded while RUNNING")
        return self._evolve(outcomes=self._outcomes + (outcome,))

    def pause(self, ordinal: int) -> "DeploymentRun":
        if self._state != SequencerState.RUNNING:
            raise ValueError("Run must be RUNNING to pause")
        return self._evolve(state=SequencerState.PAUSED, paused_at=ordinal)

    def resume(self) -> "DeploymentRun":
        if self._state != SequencerState.PAUSED:
            raise ValueError("Run must be PAUSED to resume")
        return self._evolve(state=SequencerState.RUNNING, paused_at=None)

    def complete(self) -> "DeploymentRun":
        if self._state != SequencerState.RUNNING:
            raise ValueError("Run must be RUNNING to complete")
        return self._evolve(state=SequencerState.COMPLETED)

    def __repr__(self) -> str:
        return (
            f"DeploymentRun(started_at={self._started_at.isoformat()}, "
            f"state={self._state}, paused_at={self._paused_at}, "
            f"outcomes={len(self._outcomes)}, abort_reason={self._abort_reason})"
        )
