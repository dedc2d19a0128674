"""
Application Orchestration Package

Architectural Intent:
- Contains the step sequencer that drives an update run end to end
"""

from stagehand.application.orchestration.step_sequencer import (
    StepSequencer,
    RunReport,
)

__all__ = ["StepSequencer", "RunReport"]
