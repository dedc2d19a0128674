"""
Composition Root

Architectural Intent:
- Dependency injection composition root for the Stagehand application
- Single place where adapters and use cases are wired together
- Credentials are handed to the remote executor here and nowhere else

Design Decisions:
- Uses a simple dataclass container instead of a DI framework
- The run log is not wired here; each run opens its own
"""

from dataclasses import dataclass
from stagehand.application.use_cases.run_update import RunTaxFileUpdate
from stagehand.application.use_cases.summarize_log import SummarizeRunLog
from stagehand.domain.value_objects.credentials import Credentials
from stagehand.infrastructure.adapters.console_operator import ConsoleOperator
from stagehand.infrastructure.adapters.fabric_adapter import FabricAdapter
from stagehand.infrastructure.config import StagehandConfig


@dataclass
class StagehandContainer:
    """DI container holding all wired dependencies."""

    config: StagehandConfig
    fabric_adapter: FabricAdapter
    operator: ConsoleOperator
    run_update: RunTaxFileUpdate
    summarize_log: SummarizeRunLog


def create_container(
    config: StagehandConfig, credentials: Credentials
) -> StagehandContainer:
    """Create and wire all dependencies."""
    fabric_adapter = FabricAdapter(
        credentials,
        port=config.ssh.port,
        connect_timeout=config.ssh.connect_timeout,
    )
    operator = ConsoleOperator()

    run_update = RunTaxFileUpdate(fabric_adapter, operator, config)
    summarize_log = SummarizeRunLog()

    return StagehandContainer(
        config=config,
        fabric_adapter=fabric_adapter,
        operator=operator,
        run_update=run_update,
        summarize_log=summarize_log,
    )
