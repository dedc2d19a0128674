"""
Manual Step Gate

Architectural Intent:
- Renders instructions for a human-performed action (GUI tool runs)
- Blocks the workflow on an explicit operator acknowledgment, no timeout
- No automated verification; the operator's confirmation is trusted
"""

from stagehand.domain.entities.step import ManualInstruction
from stagehand.domain.ports.operator_port import OperatorPort
from stagehand.domain.ports.run_log_port import RunLogPort


def render_instruction(instruction: ManualInstruction) -> str:
    bar = "-" * 60
    lines = [
        bar,
        f"MANUAL STEP: {instruction.title}",
        f"Applies to: {instruction.context}",
        bar,
    ]
    lines.extend(f"  {i}. {text}" for i, text in enumerate(instruction.lines, 1))
    lines.append(bar)
    return "\n".join(lines)


class ManualStepGate:
    def __init__(self, operator: OperatorPort, run_log: RunLogPort):
        self.operator = operator
        self.run_log = run_log

    def run(self, instruction: ManualInstruction) -> None:
        self.operator.show(render_instruction(instruction))
        self.run_log.info(
            f"Awaiting operator: {instruction.title} ({instruction.context})"
        )
        self.operator.acknowledge(
            f"Press Enter once '{instruction.title}' is complete on "
            f"{instruction.context}..."
        )
        self.run_log.info(f"Operator confirmed: {instruction.title}")
