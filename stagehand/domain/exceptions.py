"""
Domain Exceptions

Architectural Intent:
- Conditions that are raised across a port boundary and caught at the point of use
- Per-host and per-file problems are not raised; they are recorded as FailureKind
  on the host outcome instead
"""


class StagehandError(Exception):
    pass


class RemoteExecutionError(StagehandError):
    def __init__(self, host: str, detail: str) -> None:
        super().__init__(f"{host}: {detail}")
        self.host = host
        self.detail = detail


class UnreachableHostError(RemoteExecutionError):
    pass


class LogTargetUnavailableError(StagehandError):
    pass


class EmptyRunLogError(LogTargetUnavailableError):
    pass


class OrchestrationError(StagehandError):
    pass
