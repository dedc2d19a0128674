"""
Step Sequencer

Architectural Intent:
- Owns the ordered step list and drives the DeploymentRun state machine
- Dispatches each step by its parameter type to the matching executor
- Sequencing and reporting only: a FAILED or NOT_FOUND step never aborts the run;
  the operator decides whether to continue after reading the run log
- Only a failed validation gate aborts, and an aborted run is still summarized

Execution Strategy:
- Strictly one step at a time; within a step, one host at a time
- Every step except the last is followed by a blocking operator confirmation
- No automatic retries
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Sequence

from stagehand.domain.entities.deployment_run import DeploymentRun, SequencerState
from stagehand.domain.entities.step import (
    ConfirmStoppedParams,
    DistributionParams,
    FileSyncParams,
    ManualStepParams,
    ServiceControlParams,
    StepDefinition,
)
from stagehand.domain.exceptions import LogTargetUnavailableError, OrchestrationError
from stagehand.domain.ports.operator_port import OperatorPort
from stagehand.domain.ports.run_log_port import RunLogPort
from stagehand.domain.services.file_sync import FileSyncService
from stagehand.domain.services.manual_gate import ManualStepGate
from stagehand.domain.services.service_control import ServiceControlService
from stagehand.domain.services.validator import ValidationRequest, Validator
from stagehand.domain.value_objects.run_summary import RunSummary
from stagehand.domain.value_objects.step_outcome import FailureKind, StepOutcome

logger = logging.getLogger(__name__)

StepHandler = Callable[[StepDefinition], Awaitable[StepOutcome]]


@dataclass(frozen=True)
class RunReport:
    run: DeploymentRun
    summary: Optional[RunSummary] = None
    summary_error: Optional[str] = None
    failure: Optional[FailureKind] = None

    @property
    def completed(self) -> bool:
        return self.run.state is SequencerState.COMPLETED

    @property
    def aborted(self) -> bool:
        return self.run.state is SequencerState.ABORTED


class StepSequencer:
    def __init__(
        self,
        steps: Sequence[StepDefinition],
        validator: Validator,
        service_control: ServiceControlService,
        file_sync: FileSyncService,
        manual_gate: ManualStepGate,
        operator: OperatorPort,
        run_log: RunLogPort,
    ) -> None:
        self.steps: tuple[StepDefinition, ...] = tuple(
            sorted(steps, key=lambda s: s.ordinal)
        )
        self.validator = validator
        self.service_control = service_control
        self.file_sync = file_sync
        self.manual_gate = manual_gate
        self.operator = operator
        self.run_log = run_log

        self._handlers: dict[type, StepHandler] = {
            ServiceControlParams: self._run_service_control,
            ConfirmStoppedParams: self._run_confirm_stopped,
            FileSyncParams: self._run_file_sync,
            DistributionParams: self._run_distribution,
            ManualStepParams: self._run_manual,
        }
        self._validate_steps()

        log_path = getattr(run_log, "log_path", None)
        self.run = DeploymentRun(
            started_at=run_log.started_at,
            log_path=str(log_path) if log_path else None,
        )

    def _validate_steps(self) -> None:
        ordinals = [s.ordinal for s in self.steps]
        if len(set(ordinals)) != len(ordinals):
            raise OrchestrationError(f"Duplicate step ordinals: {ordinals}")
        for step in self.steps:
            if type(step.params) not in self._handlers:
                raise OrchestrationError(
                    f"No handler for {type(step.params).__name__} in {step}"
                )

    @property
    def state(self) -> SequencerState:
        return self.run.state

    async def _run_service_control(self, step: StepDefinition) -> StepOutcome:
        p: ServiceControlParams = step.params
        outcomes = await self.service_control.ensure_state_on_hosts(
            p.hosts, p.service_name, p.desired_state
        )
        return StepOutcome.from_hosts(step.ordinal, step.label, outcomes)

    async def _run_confirm_stopped(self, step: StepDefinition) -> StepOutcome:
        p: ConfirmStoppedParams = step.params
        outcomes = await self.service_control.confirm_stopped_on_hosts(
            p.hosts, p.service_name, p.process_description
        )
        return StepOutcome.from_hosts(step.ordinal, step.label, outcomes)

    async def _run_file_sync(self, step: StepDefinition) -> StepOutcome:
        p: FileSyncParams = step.params
        outcome = self.file_sync.sync(p.source, p.destination, p.extension)
        return StepOutcome.from_hosts(step.ordinal, step.label, [outcome])

    async def _run_distribution(self, step: StepDefinition) -> StepOutcome:
        p: DistributionParams = step.params
        outcomes = self.file_sync.distribute(p.source, p.destinations, p.extension)
        return StepOutcome.from_hosts(step.ordinal, step.label, outcomes)

    async def _run_manual(self, step: StepDefinition) -> StepOutcome:
        p: ManualStepParams = step.params
        self.manual_gate.run(p.instruction)
        return StepOutcome.acknowledged(step.ordinal, step.label)

    async def _execute_step(self, step: StepDefinition) -> StepOutcome:
        handler = self._handlers[type(step.params)]
        try:
            return await handler(step)
        except Exception as e:
            logger.exception("Step %d raised", step.ordinal)
            self.run_log.error(f"Step {step.ordinal} ({step.label}) raised: {e}")
            return StepOutcome.failed(step.ordinal, step.label, str(e))

    def _log_outcome(self, step: StepDefinition, outcome: StepOutcome) -> None:
        if outcome.is_clean:
            self.run_log.success(
                f"Step {step.ordinal} completed: {step.label} ({outcome.status.label})"
            )
            return
        problems = "; ".join(str(o) for o in outcome.problems) or outcome.detail
        self.run_log.warning(
            f"Step {step.ordinal} finished with problems: {step.label} "
            f"({outcome.status.label}): {problems}"
        )

    def _finish(self) -> RunReport:
        try:
            summary = self.run_log.summarize()
        except LogTargetUnavailableError as e:
            logger.warning("Summary unavailable: %s", e)
            self.operator.show(f"[!] Summary unavailable: {e}")
            return RunReport(
                run=self.run,
                summary_error=str(e),
                failure=FailureKind.LOG_TARGET_UNAVAILABLE,
            )
        self.operator.show(summary.render())
        return RunReport(run=self.run, summary=summary)

    async def execute(self, validation: ValidationRequest) -> RunReport:
        self.run = self.run.begin_validation()
        self.run_log.info(
            f"Validating {len(validation.hosts)} hosts and {len(validation.paths)} paths"
        )
        if not await self.validator.validate(validation):
            self.run_log.error("Validation failed; no steps were executed")
            self.run = self.run.abort("validation failed")
            return self._finish()

        self.run_log.success("Validation passed")
        self.operator.acknowledge(
            f"Validation passed. Press Enter to begin {len(self.steps)} steps..."
        )
        self.run = self.run.start()

        total = len(self.steps)
        for index, step in enumerate(self.steps):
            self.run_log.info(f"Starting step {step.ordinal}/{total}: {step.label}")
            outcome = await self._execute_step(step)
            self.run = self.run.record(outcome)
            self._log_outcome(step, outcome)

            if index < total - 1:
                upcoming = self.steps[index + 1]
                self.run = self.run.pause(step.ordinal)
                self.operator.acknowledge(
                    f"Step {step.ordinal} finished. Press Enter to continue with "
                    f"step {upcoming.ordinal}: {upcoming.label}..."
                )
                self.run = self.run.resume()

        self.run = self.run.complete()
        unclean = len(self.run.unclean_outcomes)
        if unclean:
            self.run_log.warning(f"Workflow completed with {unclean} step(s) not clean")
        else:
            self.run_log.success("Workflow completed")
        return self._finish()
