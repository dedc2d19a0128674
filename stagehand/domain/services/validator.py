"""
Validator Domain Service

Architectural Intent:
- Pre-flight gate in front of the step sequencer
- Exhaustive, not short-circuiting: every host and every path is checked and
  logged even after a failure
- One run log entry per check (SUCCESS or ERROR); a single boolean result
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from typing import Callable

from stagehand.domain.ports.remote_executor_port import RemoteExecutorPort
from stagehand.domain.ports.run_log_port import RunLogPort
from stagehand.domain.value_objects.host import Host

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationRequest:
    hosts: tuple[Host, ...]
    paths: tuple[str, ...]


class Validator:
    def __init__(
        self,
        remote_executor: RemoteExecutorPort,
        run_log: RunLogPort,
        path_exists: Callable[[str], bool] = os.path.exists,
    ):
        self.remote_executor = remote_executor
        self.run_log = run_log
        self.path_exists = path_exists

    async def check_host(self, host: Host) -> bool:
        try:
            reachable = await self.remote_executor.is_reachable(host)
        except Exception as e:
            logger.debug("Reachability check raised for %s: %s", host, e)
            reachable = False

        if reachable:
            self.run_log.success(f"Host {host} is reachable")
        else:
            self.run_log.error(f"Host {host} is unreachable")
        return reachable

    def check_path(self, path: str) -> bool:
        try:
            exists = self.path_exists(path)
        except OSError as e:
            logger.debug("Path check raised for %s: %s", path, e)
            exists = False

        if exists:
            self.run_log.success(f"Path exists: {path}")
        else:
            self.run_log.error(f"Path missing: {path}")
        return exists

    async def validate(self, request: ValidationRequest) -> bool:
        results = [await self.check_host(h) for h in request.hosts]
        results += [self.check_path(p) for p in request.paths]
        passed = all(results)
        logger.info(
            "Validation %s: %d/%d checks passed",
            "passed" if passed else "failed", sum(results), len(results),
        )
        return passed
