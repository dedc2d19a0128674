from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ServiceState(Enum):
    """
    Value Object for the state of a Windows service as reported by Get-Service.
    """
    RUNNING = "Running"
    STOPPED = "Stopped"
    START_PENDING = "StartPending"
    STOP_PENDING = "StopPending"
    CONTINUE_PENDING = "ContinuePending"
    PAUSE_PENDING = "PausePending"
    PAUSED = "Paused"

    @staticmethod
    def parse(value: str) -> Optional["ServiceState"]:
        value = value.strip()
        for state in ServiceState:
            if state.value.lower() == value.lower():
                return state
        return None

    @property
    def verb(self) -> str:
        return "stopped" if self is ServiceState.STOPPED else "started"


@dataclass(frozen=True)
class ServiceStateResult:
    """
    States observed by one ensure-state round trip on a host.

    ``before`` is None when the service does not exist. ``after`` equals
    ``before`` when no change was issued.
    """
    before: Optional[ServiceState]
    after: Optional[ServiceState]

    @property
    def found(self) -> bool:
        return self.before is not None
