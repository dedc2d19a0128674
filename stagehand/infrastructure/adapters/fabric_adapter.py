"""
Fabric Adapter

Architectural Intent:
- Infrastructure adapter implementing RemoteExecutorPort via Fabric/SSH
- Targets Windows hosts running OpenSSH; every action is a PowerShell script
  passed with -EncodedCommand, so no shell quoting reaches the remote side
- One Connection per host is kept open for the run and closed at the end
- Remote output tokens are parsed into enums here, at the boundary

Security:
- Credentials are acquired once per run and only handed to Connection
- Agent and key lookup are disabled; the run's principal is the only identity
- Service names and descriptions are embedded as single-quoted PowerShell literals
"""

import base64
import logging
from typing import List, Optional
from fabric import Connection
from stagehand.domain.exceptions import RemoteExecutionError, UnreachableHostError
from stagehand.domain.ports.remote_executor_port import RemoteExecutorPort
from stagehand.domain.value_objects.credentials import Credentials
from stagehand.domain.value_objects.host import Host
from stagehand.domain.value_objects.service_state import (
    ServiceState,
    ServiceStateResult,
)

logger = logging.getLogger(__name__)

NOT_FOUND_TOKEN = "NOT_FOUND"


def ps_literal(value: str) -> str:
    """Quote a value as a single-quoted PowerShell string literal."""
    return "'" + value.replace("'", "''") + "'"


def encode_powershell(script: str) -> str:
    """Encode a script for powershell -EncodedCommand (base64 of UTF-16LE)."""
    return base64.b64encode(script.encode("utf-16-le")).decode("ascii")


def powershell_command(script: str) -> str:
    return (
        "powershell -NoProfile -NonInteractive -EncodedCommand "
        f"{encode_powershell(script)}"
    )


def query_service_script(service_name: str) -> str:
    return (
        f"$s = Get-Service -Name {ps_literal(service_name)} "
        "-ErrorAction SilentlyContinue; "
        f"if ($null -eq $s) {{ '{NOT_FOUND_TOKEN}' }} else {{ $s.Status.ToString() }}"
    )


def change_service_script(service_name: str, desired: ServiceState) -> str:
    name = ps_literal(service_name)
    if desired is ServiceState.STOPPED:
        return f"Stop-Service -Name {name} -Force -ErrorAction Stop"
    if desired is ServiceState.RUNNING:
        return f"Start-Service -Name {name} -ErrorAction Stop"
    raise ValueError(f"Cannot change a service to {desired}")


def ensure_service_script(
    service_name: str, desired: ServiceState, settle_seconds: float
) -> str:
    """
    Read, change, settle and re-read in one invocation.

    Prints NOT_FOUND, or "<before>|<after>" where after equals before when
    the service was already in the desired state.
    """
    change = change_service_script(service_name, desired)
    settle_ms = max(0, int(round(settle_seconds * 1000)))
    return (
        f"$s = Get-Service -Name {ps_literal(service_name)} "
        "-ErrorAction SilentlyContinue; "
        f"if ($null -eq $s) {{ '{NOT_FOUND_TOKEN}'; exit 0 }}; "
        "$before = $s.Status.ToString(); "
        f"if ($before -eq {ps_literal(desired.value)}) "
        "{ \"$before|$before\"; exit 0 }; "
        f"{change}; "
        f"Start-Sleep -Milliseconds {settle_ms}; "
        "$s.Refresh(); "
        "\"$before|$($s.Status.ToString())\""
    )


def find_processes_script(description: str) -> str:
    pattern = ps_literal(f"*{description}*")
    return (
        f"Get-Process | Where-Object {{ $_.Description -like {pattern} }} | "
        "ForEach-Object { $_.Id }"
    )


class FabricAdapter(RemoteExecutorPort):
    """Adapter implementing RemoteExecutorPort via Fabric/SSH and PowerShell."""

    def __init__(
        self,
        credentials: Credentials,
        port: int = 22,
        connect_timeout: int = 30,
    ):
        self._credentials = credentials
        self.port = port
        self.connect_timeout = connect_timeout
        self._connections: dict[str, Connection] = {}

    def _get_connection(self, host: Host) -> Connection:
        conn = self._connections.get(host.name)
        if conn is None:
            conn = Connection(
                host=host.name,
                user=self._credentials.username,
                port=self.port,
                connect_timeout=self.connect_timeout,
                connect_kwargs={
                    "password": self._credentials.secret,
                    "allow_agent": False,
                    "look_for_keys": False,
                },
            )
            self._connections[host.name] = conn
        return conn

    def _run(self, host: Host, script: str) -> str:
        conn = self._get_connection(host)
        try:
            result = conn.run(powershell_command(script), hide=True, warn=True)
        except OSError as e:
            raise UnreachableHostError(host.name, f"connection failed: {e}") from e
        except Exception as e:
            raise RemoteExecutionError(host.name, f"remote call failed: {e}") from e

        if result.failed:
            stderr = (result.stderr or "").strip()
            raise RemoteExecutionError(
                host.name, stderr or f"exit code {result.exited}"
            )
        return result.stdout or ""

    async def is_reachable(self, host: Host) -> bool:
        try:
            result = self._get_connection(host).run("hostname", hide=True, warn=True)
            return result.ok
        except Exception as e:
            logger.debug("Host %s unreachable: %s", host, e)
            return False

    async def query_service(
        self, host: Host, service_name: str
    ) -> Optional[ServiceState]:
        output = self._run(host, query_service_script(service_name)).strip()
        if output == NOT_FOUND_TOKEN:
            return None
        return self._parse_state(host, output)

    def _parse_state(self, host: Host, token: str) -> ServiceState:
        state = ServiceState.parse(token)
        if state is None:
            raise RemoteExecutionError(
                host.name, f"unexpected service status {token!r}"
            )
        return state

    async def ensure_service(
        self,
        host: Host,
        service_name: str,
        desired: ServiceState,
        settle_seconds: float,
    ) -> ServiceStateResult:
        script = ensure_service_script(service_name, desired, settle_seconds)
        output = self._run(host, script).strip()
        if output == NOT_FOUND_TOKEN:
            return ServiceStateResult(before=None, after=None)
        before, sep, after = output.partition("|")
        if not sep:
            raise RemoteExecutionError(
                host.name, f"unexpected ensure output {output!r}"
            )
        return ServiceStateResult(
            before=self._parse_state(host, before),
            after=self._parse_state(host, after),
        )

    async def find_processes(self, host: Host, description: str) -> List[int]:
        output = self._run(host, find_processes_script(description))
        return [int(line) for line in output.split() if line.strip().isdigit()]

    async def close(self) -> None:
        for name, conn in self._connections.items():
            try:
                conn.close()
            except Exception as e:
                logger.debug("Error closing connection to %s: %s", name, e)
        self._connections.clear()
