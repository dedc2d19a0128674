"""
Service Control Domain Service

Architectural Intent:
- Remote Action Executor: idempotent "ensure service stopped/running" per host
- Never assumes success; every call ends in a closed OutcomeStatus
- Transport failures are caught per host and reported, never propagated

Sequence per host (one remote round trip, see RemoteExecutorPort.ensure_service):
1. Query the service
2. Absent -> NOT_FOUND (no mutation)
3. Already in the desired state -> ALREADY_IN_DESIRED_STATE (no mutation)
4. Change, wait the settle interval, re-query -> SUCCEEDED or FAILED
"""

from __future__ import annotations
import logging
from typing import Sequence

from stagehand.domain.exceptions import RemoteExecutionError, UnreachableHostError
from stagehand.domain.ports.remote_executor_port import RemoteExecutorPort
from stagehand.domain.ports.run_log_port import RunLogPort
from stagehand.domain.value_objects.host import Host
from stagehand.domain.value_objects.service_state import ServiceState
from stagehand.domain.value_objects.step_outcome import (
    FailureKind,
    HostOutcome,
    OutcomeStatus,
)

logger = logging.getLogger(__name__)

DEFAULT_SETTLE_SECONDS = 5.0


def _transport_failure(host: Host, exc: Exception) -> HostOutcome:
    failure = (
        FailureKind.UNREACHABLE_HOST if isinstance(exc, UnreachableHostError) else None
    )
    detail = exc.detail if isinstance(exc, RemoteExecutionError) else str(exc)
    return HostOutcome(host.name, OutcomeStatus.FAILED, detail, failure)


class ServiceControlService:
    def __init__(
        self,
        remote_executor: RemoteExecutorPort,
        run_log: RunLogPort,
        settle_seconds: float = DEFAULT_SETTLE_SECONDS,
    ):
        self.remote_executor = remote_executor
        self.run_log = run_log
        self.settle_seconds = settle_seconds

    async def ensure_state(
        self, host: Host, service_name: str, desired: ServiceState
    ) -> HostOutcome:
        verb = desired.verb
        try:
            result = await self.remote_executor.ensure_service(
                host, service_name, desired, self.settle_seconds
            )
        except Exception as e:
            outcome = _transport_failure(host, e)
            self.run_log.error(
                f"Failed to ensure service {service_name} {verb} on {host}: "
                f"{outcome.detail}"
            )
            return outcome

        if result.before is None:
            self.run_log.error(f"Service {service_name} not found on {host}")
            return HostOutcome(
                host.name,
                OutcomeStatus.NOT_FOUND,
                f"service {service_name} not found",
                FailureKind.SERVICE_NOT_FOUND,
            )

        if result.before is desired:
            self.run_log.info(f"Service {service_name} already {verb} on {host}")
            return HostOutcome(
                host.name, OutcomeStatus.ALREADY_IN_DESIRED_STATE, f"already {verb}"
            )

        observed = result.after.value if result.after else "missing"
        logger.debug(
            "Changed %s on %s from %s, now %s",
            service_name, host, result.before.value, observed,
        )
        if result.after is desired:
            self.run_log.success(f"Service {service_name} {verb} on {host}")
            return HostOutcome(host.name, OutcomeStatus.SUCCEEDED, verb)

        self.run_log.error(
            f"Service {service_name} did not reach {desired.value} on {host} "
            f"(state: {observed})"
        )
        return HostOutcome(
            host.name,
            OutcomeStatus.FAILED,
            f"state {observed} after change",
            FailureKind.SERVICE_STATE_MISMATCH,
        )

    async def ensure_state_on_hosts(
        self, hosts: Sequence[Host], service_name: str, desired: ServiceState
    ) -> list[HostOutcome]:
        """Process hosts one at a time in list order; every host is attempted."""
        return [await self.ensure_state(h, service_name, desired) for h in hosts]

    async def confirm_stopped(
        self, host: Host, service_name: str, process_description: str
    ) -> HostOutcome:
        """Check the service is stopped and no matching process lingers."""
        try:
            state = await self.remote_executor.query_service(host, service_name)
            if state is None:
                self.run_log.error(f"Service {service_name} not found on {host}")
                return HostOutcome(
                    host.name,
                    OutcomeStatus.NOT_FOUND,
                    f"service {service_name} not found",
                    FailureKind.SERVICE_NOT_FOUND,
                )
            if state is not ServiceState.STOPPED:
                self.run_log.error(
                    f"Service {service_name} is not stopped on {host} "
                    f"(state: {state.value})"
                )
                return HostOutcome(
                    host.name,
                    OutcomeStatus.FAILED,
                    f"service {state.value}",
                    FailureKind.SERVICE_STATE_MISMATCH,
                )
            pids = await self.remote_executor.find_processes(host, process_description)
        except Exception as e:
            outcome = _transport_failure(host, e)
            self.run_log.error(
                f"Could not confirm {service_name} stopped on {host}: {outcome.detail}"
            )
            return outcome

        if pids:
            ids = ", ".join(str(p) for p in pids)
            self.run_log.warning(
                f"Service {service_name} stopped on {host} but process "
                f"'{process_description}' is still running (PID {ids})"
            )
            return HostOutcome(
                host.name,
                OutcomeStatus.FAILED,
                f"process still running (PID {ids})",
                FailureKind.PROCESS_STILL_RUNNING,
            )

        self.run_log.success(
            f"Service {service_name} and process '{process_description}' "
            f"fully stopped on {host}"
        )
        return HostOutcome(host.name, OutcomeStatus.SUCCEEDED, "fully stopped")

    async def confirm_stopped_on_hosts(
        self, hosts: Sequence[Host], service_name: str, process_description: str
    ) -> list[HostOutcome]:
        return [
            await self.confirm_stopped(h, service_name, process_description)
            for h in hosts
        ]
