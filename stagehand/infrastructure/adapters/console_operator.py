"""
Console Operator Adapter

Architectural Intent:
- OperatorPort on the terminal: print instruction blocks, block on Enter
- No timeout and no default answer; Ctrl+C (process termination) is the only
  way out of a pending acknowledgment
"""

import sys
from typing import Callable, IO, Optional

from stagehand.domain.ports.operator_port import OperatorPort


class ConsoleOperator(OperatorPort):
    def __init__(
        self,
        read: Callable[[str], str] = input,
        out: Optional[IO[str]] = None,
    ):
        self._read = read
        self._out = out

    def show(self, text: str) -> None:
        print(text, file=self._out or sys.stdout, flush=True)

    def acknowledge(self, prompt: str) -> None:
        self._read(f"{prompt} ")
