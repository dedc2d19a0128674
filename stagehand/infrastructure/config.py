"""
Configuration Module

Architectural Intent:
- Centralized configuration loading from a JSON settings document
- Provides typed, read-only access to hosts, service, paths and fleet settings
- Falls back to defaults when the config file is absent or invalid
- Environment variables override file-based config

Design Decisions:
- Config is a frozen dataclass for immutability after load
- Nested config sections map to sub-dataclasses
- Schema validation beyond types is left to the caller; the core only reads
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import dataclasses
import json
import logging
import os

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HostsConfig:
    """Primary host and the target hosts that receive propagated files."""
    primary: str = "localhost"
    targets: tuple[str, ...] = ()


@dataclass(frozen=True)
class ServiceConfig:
    """Windows service stopped for the update and the process that backs it."""
    name: str = "TaxService"
    process_description: str = "Tax Engine"
    settle_seconds: float = 5.0


@dataclass(frozen=True)
class PathsConfig:
    """Local-style paths on the primary host, plus the target-side data dir."""
    data_dir: str = "D:\\TaxApp\\Data"
    target_data_dir: str = "D:\\TaxApp\\Data"
    backup_root: str = "D:\\Backup"
    log_root: str = "D:\\Backup\\Logs"
    sub_area: str = "TaxData"
    label_prefix: str = "TaxFileupdate"
    sync_extension: str = ".dat"
    required_paths: tuple[str, ...] = ()


@dataclass(frozen=True)
class SSHConfig:
    """Transport settings for the remote executor."""
    port: int = 22
    connect_timeout: int = 30


@dataclass(frozen=True)
class FleetMemberConfig:
    """One additional host with its own destination-path overrides."""
    host: str
    destinations: tuple[str, ...] = ()


@dataclass(frozen=True)
class FleetConfig:
    """Independently configured group of hosts processed after the targets."""
    name: str = ""
    members: tuple[FleetMemberConfig, ...] = ()


@dataclass(frozen=True)
class StagehandConfig:
    """Root configuration for the Stagehand application."""
    hosts: HostsConfig = field(default_factory=HostsConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    ssh: SSHConfig = field(default_factory=SSHConfig)
    fleet: FleetConfig = field(default_factory=FleetConfig)
    log_level: str = "WARNING"


def _env_override(data: dict, prefix: str = "STAGEHAND") -> dict:
    """Override config values with environment variables.

    Environment variables follow the pattern STAGEHAND_SECTION_KEY.
    For example: STAGEHAND_SERVICE_NAME=TaxSvc, STAGEHAND_HOSTS_TARGETS=WS01,WS02
    Top-level keys use their full name: STAGEHAND_LOG_LEVEL=DEBUG
    """
    top_level = {f.name for f in dataclasses.fields(StagehandConfig)}
    for key, value in os.environ.items():
        if not key.startswith(f"{prefix}_"):
            continue
        name = key[len(prefix) + 1:].lower()
        if name in top_level and not isinstance(data.get(name, ""), dict):
            data[name] = value
            continue
        parts = name.split("_", 1)
        if len(parts) == 2:
            section, field_name = parts
            if not isinstance(data.get(section), dict):
                data[section] = {}
            data[section][field_name] = value
    return data


def _parse_config_file(path: Path) -> dict:
    """Parse a JSON config file. Returns empty dict on failure."""
    try:
        with open(path) as f:
            return json.load(f)
    except FileNotFoundError:
        logger.debug("Config file not found: %s", path)
        return {}
    except json.JSONDecodeError as e:
        logger.warning("Invalid config file %s: %s", path, e)
        return {}


def _build_sub_config(cls, data: dict):
    """Build a sub-config dataclass from a dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}

    for f in dataclasses.fields(cls):
        if f.name not in filtered:
            continue
        val = filtered[f.name]

        # Convert comma-separated strings to tuples for tuple fields
        if f.type == "tuple[str, ...]":
            if isinstance(val, str):
                filtered[f.name] = tuple(v.strip() for v in val.split(",") if v.strip())
            elif isinstance(val, list):
                filtered[f.name] = tuple(val)

        # Convert string numbers to int/float/bool
        if isinstance(val, str):
            if f.type == "int":
                filtered[f.name] = int(val)
            elif f.type == "float":
                filtered[f.name] = float(val)
            elif f.type == "bool":
                filtered[f.name] = val.lower() in ("true", "1", "yes")

    return cls(**filtered)


def _build_fleet(data: dict) -> FleetConfig:
    raw_members = data.get("members") or []
    if not isinstance(raw_members, list):
        logger.warning("Fleet members must be a list, got %r", raw_members)
        raw_members = []

    members = []
    for raw in raw_members:
        if not isinstance(raw, dict) or not raw.get("host"):
            logger.warning("Skipping fleet member without host: %r", raw)
            continue
        members.append(_build_sub_config(FleetMemberConfig, raw))
    return FleetConfig(name=data.get("name", ""), members=tuple(members))


def load_config(
    path: Optional[str] = None,
    env_prefix: str = "STAGEHAND",
) -> StagehandConfig:
    """Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables (STAGEHAND_SECTION_KEY)
    2. Config file values
    3. Defaults

    Args:
        path: Path to config file (JSON). Defaults to stagehand.json in CWD.
        env_prefix: Environment variable prefix. Defaults to STAGEHAND.
    """
    config_path = Path(path) if path else Path("stagehand.json")
    data = _parse_config_file(config_path)
    data = _env_override(data, env_prefix)

    return StagehandConfig(
        hosts=_build_sub_config(HostsConfig, data.get("hosts", {})),
        service=_build_sub_config(ServiceConfig, data.get("service", {})),
        paths=_build_sub_config(PathsConfig, data.get("paths", {})),
        ssh=_build_sub_config(SSHConfig, data.get("ssh", {})),
        fleet=_build_fleet(data.get("fleet", {})),
        log_level=data.get("log_level", "WARNING"),
    )
