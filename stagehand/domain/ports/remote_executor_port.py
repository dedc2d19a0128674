"""
Remote Executor Port

Architectural Intent:
- Port interface for the remote actions an update run needs on a Windows host
- ensure_service is one round trip per host (read, change, settle, re-read);
  mapping what it observed to an outcome lives in the service control
  domain service
- Implemented by adapters (Fabric over SSH, test fakes)

Error Contract:
- Transport failures raise RemoteExecutionError (UnreachableHostError when the
  host cannot be contacted at all)
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from stagehand.domain.value_objects.host import Host
from stagehand.domain.value_objects.service_state import (
    ServiceState,
    ServiceStateResult,
)


class RemoteExecutorPort(ABC):
    """
    Port interface for executing service and process actions on remote hosts.
    """

    @abstractmethod
    async def is_reachable(self, host: Host) -> bool:
        """
        Returns True if a remote session can be opened on the host.
        """
        pass

    @abstractmethod
    async def query_service(
        self, host: Host, service_name: str
    ) -> Optional[ServiceState]:
        """
        Returns the current state of the service, or None if it does not exist.
        """
        pass

    @abstractmethod
    async def ensure_service(
        self,
        host: Host,
        service_name: str,
        desired: ServiceState,
        settle_seconds: float,
    ) -> ServiceStateResult:
        """
        In one remote round trip: read the service, and unless it is absent or
        already in ``desired``, issue the change, wait ``settle_seconds`` and
        read it again.
        """
        pass

    @abstractmethod
    async def find_processes(self, host: Host, description: str) -> List[int]:
        """
        Returns the ids of running processes whose description matches.
        """
        pass

    async def close(self) -> None:
        """
        Releases any sessions held open for the run.
        """
