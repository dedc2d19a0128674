"""
Run Tax File Update Use Case

Architectural Intent:
- Opens the run log, wires the executors to it and drives the step sequencer
- The run log is opened at run start and closed at run end, whatever happens
- Remote sessions are released when the run ends

Collaborators:
- RemoteExecutorPort for service and reachability actions
- OperatorPort for every blocking confirmation
"""

import logging
import os
from datetime import date
from typing import Callable, Optional

from stagehand.application.orchestration import RunReport, StepSequencer
from stagehand.application.workflow import (
    build_update_workflow,
    build_validation_request,
)
from stagehand.domain.entities.step import StepDefinition
from stagehand.domain.ports.operator_port import OperatorPort
from stagehand.domain.ports.remote_executor_port import RemoteExecutorPort
from stagehand.domain.services.file_sync import FileSyncService
from stagehand.domain.services.manual_gate import ManualStepGate
from stagehand.domain.services.service_control import ServiceControlService
from stagehand.domain.services.validator import Validator
from stagehand.infrastructure.config import StagehandConfig
from stagehand.infrastructure.run_log import RunLog

logger = logging.getLogger(__name__)


class RunTaxFileUpdate:
    def __init__(
        self,
        remote_executor: RemoteExecutorPort,
        operator: OperatorPort,
        config: StagehandConfig,
        path_exists: Callable[[str], bool] = os.path.exists,
    ):
        self.remote_executor = remote_executor
        self.operator = operator
        self.config = config
        self.path_exists = path_exists

    def plan(self, today: Optional[date] = None) -> tuple[StepDefinition, ...]:
        return build_update_workflow(self.config, today)

    def _sequencer(self, run_log: RunLog, today: Optional[date]) -> StepSequencer:
        return StepSequencer(
            steps=self.plan(today),
            validator=Validator(self.remote_executor, run_log, self.path_exists),
            service_control=ServiceControlService(
                self.remote_executor, run_log, self.config.service.settle_seconds
            ),
            file_sync=FileSyncService(run_log),
            manual_gate=ManualStepGate(self.operator, run_log),
            operator=self.operator,
            run_log=run_log,
        )

    async def execute(self, today: Optional[date] = None) -> RunReport:
        with RunLog.open(self.config.paths.log_root) as run_log:
            run_log.info(
                f"Tax file update started (primary {self.config.hosts.primary}, "
                f"{len(self.config.hosts.targets)} targets, "
                f"{len(self.config.fleet.members)} fleet members)"
            )
            sequencer = self._sequencer(run_log, today)
            try:
                return await sequencer.execute(build_validation_request(self.config))
            finally:
                await self.remote_executor.close()

    async def validate(self) -> bool:
        """Run only the validation gate, with its own run log."""
        with RunLog.open(self.config.paths.log_root) as run_log:
            validator = Validator(self.remote_executor, run_log, self.path_exists)
            try:
                return await validator.validate(build_validation_request(self.config))
            finally:
                await self.remote_executor.close()
