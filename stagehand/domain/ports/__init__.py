"""
Domain Ports Package

Architectural Intent:
- Contains port interfaces (abstract contracts) for external dependencies
- Ports define what the domain needs, adapters implement how
- Follows Hexagonal Architecture principles
"""

from stagehand.domain.ports.remote_executor_port import RemoteExecutorPort
from stagehand.domain.ports.operator_port import OperatorPort
from stagehand.domain.ports.run_log_port import RunLogPort

__all__ = [
    "RemoteExecutorPort",
    "OperatorPort",
    "RunLogPort",
]
