"""
Update Workflow

Architectural Intent:
- The fixed, ordered tax file update procedure, built from read-only settings
- Steps carry typed parameters; backup and distribution paths are derived here
  from run metadata and never stored
- Fleet members are file distribution targets only; service control covers the
  primary and target hosts

Order:
1. Stop service (primary + targets)
2. Confirm service and process stopped
3. Back up current data (pre-update month folder)
4. Manual: run the update wizard on the primary
5. Back up updated data (current month folder)
6. Distribute updated data to targets
7. Distribute updated data to the fleet (when configured)
8. Start service (primary + targets)
9. Manual: verify the client on the target hosts
"""

from __future__ import annotations
import re
from datetime import date
from typing import Optional

from stagehand.application.instructions import (
    client_verification_instruction,
    update_wizard_instruction,
)
from stagehand.domain.entities.step import (
    ConfirmStoppedParams,
    DistributionParams,
    FileSyncParams,
    ManualInstruction,
    ServiceControlParams,
    StepDefinition,
    StepParams,
    SyncDestination,
    automated,
    manual,
)
from stagehand.domain.services.validator import ValidationRequest
from stagehand.domain.value_objects.backup_manifest import (
    backup_months,
    deployment_label,
    derive_backup_path,
    to_admin_share,
)
from stagehand.domain.value_objects.host import Host
from stagehand.domain.value_objects.service_state import ServiceState
from stagehand.infrastructure.config import StagehandConfig


def _remote_path(host: Host, path: str) -> str:
    """Admin-share address for a drive-letter path.

    Anything else (UNC share, mounted directory) is used as given, with
    ``{host}`` replaced by the host name.
    """
    if re.match(r"^[A-Za-z]:", path):
        return to_admin_share(host.name, path)
    return path.replace("{host}", host.name)


def primary_host(config: StagehandConfig) -> Host:
    return Host.primary(config.hosts.primary)


def target_hosts(config: StagehandConfig) -> tuple[Host, ...]:
    return tuple(Host.target(t) for t in config.hosts.targets)


def fleet_destinations(config: StagehandConfig) -> tuple[SyncDestination, ...]:
    destinations = []
    for member in config.fleet.members:
        host = Host.fleet_member(member.host)
        paths = member.destinations or (config.paths.target_data_dir,)
        destinations.extend(SyncDestination(host, _remote_path(host, p)) for p in paths)
    return tuple(destinations)


def target_destinations(config: StagehandConfig) -> tuple[SyncDestination, ...]:
    return tuple(
        SyncDestination(h, _remote_path(h, config.paths.target_data_dir))
        for h in target_hosts(config)
    )


def backup_paths(config: StagehandConfig, today: date) -> tuple[str, str]:
    """Return (pre_update, post_update) backup destinations for a run on ``today``."""
    pre_month, post_month = backup_months(today)
    label = deployment_label(config.paths.label_prefix, post_month, today.year)
    root = config.paths.backup_root
    sub_area = config.paths.sub_area
    return (
        derive_backup_path(root, label, pre_month, sub_area),
        derive_backup_path(root, label, post_month, sub_area),
    )


def build_update_workflow(
    config: StagehandConfig, today: Optional[date] = None
) -> tuple[StepDefinition, ...]:
    today = today or date.today()
    primary = primary_host(config)
    targets = target_hosts(config)
    service_hosts = (primary,) + targets
    service = config.service
    paths = config.paths
    pre_backup, post_backup = backup_paths(config, today)

    plan: list[tuple[str, StepParams | ManualInstruction]] = [
        (
            f"Stop {service.name} on primary and targets",
            ServiceControlParams(service_hosts, service.name, ServiceState.STOPPED),
        ),
        (
            f"Confirm {service.name} and its process are stopped",
            ConfirmStoppedParams(
                service_hosts, service.name, service.process_description
            ),
        ),
        (
            "Back up current data (pre-update)",
            FileSyncParams(paths.data_dir, pre_backup, paths.sync_extension),
        ),
        (
            "Run the update wizard on the primary",
            update_wizard_instruction(primary, paths.data_dir),
        ),
        (
            "Back up updated data (post-update)",
            FileSyncParams(paths.data_dir, post_backup, paths.sync_extension),
        ),
    ]
    if targets:
        plan.append((
            "Distribute updated data to target hosts",
            DistributionParams(
                paths.data_dir, target_destinations(config), paths.sync_extension
            ),
        ))
    fleet = fleet_destinations(config)
    if fleet:
        fleet_name = config.fleet.name or "fleet"
        plan.append((
            f"Distribute updated data to {fleet_name}",
            DistributionParams(paths.data_dir, fleet, paths.sync_extension),
        ))
    plan.append((
        f"Start {service.name} on primary and targets",
        ServiceControlParams(service_hosts, service.name, ServiceState.RUNNING),
    ))
    if targets:
        plan.append((
            "Verify the client on target hosts",
            client_verification_instruction(targets),
        ))

    steps = []
    for ordinal, (label, params) in enumerate(plan, 1):
        if isinstance(params, ManualInstruction):
            steps.append(manual(ordinal, label, params))
        else:
            steps.append(automated(ordinal, label, params))
    return tuple(steps)


def build_validation_request(config: StagehandConfig) -> ValidationRequest:
    primary = primary_host(config)
    targets = target_hosts(config)
    fleet = fleet_destinations(config)

    hosts: list[Host] = [primary, *targets]
    for d in fleet:
        if d.host.name not in {h.name for h in hosts}:
            hosts.append(d.host)

    paths = [config.paths.data_dir, config.paths.backup_root]
    paths.extend(config.paths.required_paths)
    paths.extend(d.path for d in target_destinations(config))
    paths.extend(d.path for d in fleet)
    return ValidationRequest(hosts=tuple(hosts), paths=tuple(dict.fromkeys(paths)))
