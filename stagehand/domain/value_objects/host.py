"""
Host Value Object

Architectural Intent:
- Immutable value object identifying one machine taking part in an update run
- Carries the role the host plays in the workflow (primary, target, fleet member)
- Validates hostname format (NetBIOS/DNS name or IPv4)
"""

import re
from dataclasses import dataclass
from enum import Enum

# RFC 1123 hostname: labels of alnum/hyphens, dot-separated
_HOSTNAME_RE = re.compile(
    r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)(\.[A-Za-z0-9-]{1,63})*$"
)

_IPV4_RE = re.compile(
    r"^(\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3})$"
)


def _is_valid_hostname(name: str) -> bool:
    """Validate host name as a DNS/NetBIOS name or IPv4 address."""
    if not name:
        return False

    m = _IPV4_RE.match(name)
    if m:
        return all(0 <= int(g) <= 255 for g in m.groups())

    return bool(_HOSTNAME_RE.match(name)) and len(name) <= 253


class HostRole(Enum):
    PRIMARY = "primary"
    TARGET = "target"
    FLEET_MEMBER = "fleet-member"


@dataclass(frozen=True)
class Host:
    """
    Value Object representing a machine in the update workflow.
    """
    name: str
    role: HostRole = HostRole.TARGET

    def __post_init__(self) -> None:
        if not _is_valid_hostname(self.name):
            raise ValueError(f"Invalid host name: {self.name!r}")

    def __str__(self) -> str:
        return self.name

    @staticmethod
    def primary(name: str) -> "Host":
        return Host(name=name.strip(), role=HostRole.PRIMARY)

    @staticmethod
    def target(name: str) -> "Host":
        return Host(name=name.strip(), role=HostRole.TARGET)

    @staticmethod
    def fleet_member(name: str) -> "Host":
        return Host(name=name.strip(), role=HostRole.FLEET_MEMBER)
