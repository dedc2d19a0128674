"""
Step Definition Module

Architectural Intent:
- A workflow is an ordered tuple of StepDefinitions, defined once and never mutated
- Each step names the executor capability it needs and carries a typed parameter
  struct for that capability (no open key/value bags)
- Frozen dataclasses enforce immutability and structural integrity

Domain Rules:
- MANUAL steps use no executor capability and carry ManualStepParams
- AUTOMATED steps use exactly one capability with a matching parameter struct
- Service control only targets the STOPPED or RUNNING end-states
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from stagehand.domain.value_objects.host import Host
from stagehand.domain.value_objects.service_state import ServiceState


class StepKind(Enum):
    AUTOMATED = "Automated"
    MANUAL = "Manual"


class Capability(Enum):
    SERVICE_CONTROL = "service-control"
    FILE_SYNC = "file-sync"
    VALIDATION = "validation"
    NONE = "none"


@dataclass(frozen=True)
class ServiceControlParams:
    hosts: tuple[Host, ...]
    service_name: str
    desired_state: ServiceState

    def __post_init__(self) -> None:
        if not self.service_name:
            raise ValueError("service_name cannot be empty")
        if self.desired_state not in (ServiceState.STOPPED, ServiceState.RUNNING):
            raise ValueError(
                f"desired_state must be STOPPED or RUNNING, got {self.desired_state}"
            )


@dataclass(frozen=True)
class ConfirmStoppedParams:
    hosts: tuple[Host, ...]
    service_name: str
    process_description: str

    def __post_init__(self) -> None:
        if not self.service_name:
            raise ValueError("service_name cannot be empty")
        if not self.process_description:
            raise ValueError("process_description cannot be empty")


@dataclass(frozen=True)
class FileSyncParams:
    source: str
    destination: str
    extension: str

    def __post_init__(self) -> None:
        if not self.source or not self.destination:
            raise ValueError("source and destination cannot be empty")
        if not self.extension.startswith("."):
            raise ValueError(f"extension must start with '.', got {self.extension!r}")


@dataclass(frozen=True)
class SyncDestination:
    host: Host
    path: str


@dataclass(frozen=True)
class DistributionParams:
    source: str
    destinations: tuple[SyncDestination, ...]
    extension: str

    def __post_init__(self) -> None:
        if not self.source:
            raise ValueError("source cannot be empty")
        if not self.extension.startswith("."):
            raise ValueError(f"extension must start with '.', got {self.extension!r}")


@dataclass(frozen=True)
class ManualInstruction:
    """Instruction block shown to the operator for a human-performed action.

    Attributes:
        title: Short name of the action (e.g. "Run Tax Update Wizard").
        context: Host or area the instructions apply to.
        lines: Ordered instruction lines, rendered as a numbered list.
    """

    title: str
    context: str
    lines: tuple[str, ...]


@dataclass(frozen=True)
class ManualStepParams:
    instruction: ManualInstruction


StepParams = Union[
    ServiceControlParams,
    ConfirmStoppedParams,
    FileSyncParams,
    DistributionParams,
    ManualStepParams,
]

_CAPABILITY_PARAMS: dict[Capability, tuple[type, ...]] = {
    Capability.SERVICE_CONTROL: (ServiceControlParams,),
    Capability.FILE_SYNC: (FileSyncParams, DistributionParams),
    Capability.VALIDATION: (ConfirmStoppedParams,),
    Capability.NONE: (ManualStepParams,),
}


@dataclass(frozen=True)
class StepDefinition:
    """One unit of work in the update workflow.

    Attributes:
        ordinal: 1-based position in the workflow.
        kind: AUTOMATED or MANUAL.
        label: Human-readable label shown in the log and summary.
        capability: Executor capability the step requires.
        params: Typed parameters for that capability.
    """

    ordinal: int
    kind: StepKind
    label: str
    capability: Capability
    params: StepParams

    def __post_init__(self) -> None:
        if self.ordinal < 1:
            raise ValueError(f"ordinal must be >= 1, got {self.ordinal}")
        if not self.label:
            raise ValueError("label cannot be empty")
        if (self.kind is StepKind.MANUAL) != (self.capability is Capability.NONE):
            raise ValueError(
                f"Step {self.ordinal}: MANUAL steps use capability NONE and "
                "AUTOMATED steps require an executor capability"
            )
        if not isinstance(self.params, _CAPABILITY_PARAMS[self.capability]):
            raise ValueError(
                f"Step {self.ordinal}: {type(self.params).__name__} does not match "
                f"capability {self.capability.value}"
            )

    @property
    def is_manual(self) -> bool:
        return self.kind is StepKind.MANUAL

    def __str__(self) -> str:
        return f"Step {self.ordinal}: {self.label} [{self.kind.value}]"


def automated(ordinal: int, label: str, params: StepParams) -> StepDefinition:
    """Build an AUTOMATED step, inferring the capability from the params type."""
    for capability, types in _CAPABILITY_PARAMS.items():
        if capability is not Capability.NONE and isinstance(params, types):
            return StepDefinition(ordinal, StepKind.AUTOMATED, label, capability, params)
    raise ValueError(f"No executor capability handles {type(params).__name__}")


def manual(ordinal: int, label: str, instruction: ManualInstruction) -> StepDefinition:
    return StepDefinition(
        ordinal, StepKind.MANUAL, label, Capability.NONE, ManualStepParams(instruction)
    )
