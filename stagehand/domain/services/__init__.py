"""
Domain Services Package

Architectural Intent:
- Contains the executors the step sequencer dispatches to
- Every executor writes through the run log it is given
"""

from stagehand.domain.services.service_control import ServiceControlService
from stagehand.domain.services.validator import Validator, ValidationRequest
from stagehand.domain.services.file_sync import FileSyncService, SyncReport
from stagehand.domain.services.manual_gate import ManualStepGate, render_instruction

__all__ = [
    "ServiceControlService",
    "Validator",
    "ValidationRequest",
    "FileSyncService",
    "SyncReport",
    "ManualStepGate",
    "render_instruction",
]
