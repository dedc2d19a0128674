"""
Operator Port

Architectural Intent:
- The human operator is an external collaborator the workflow blocks on
- acknowledge() has no timeout and no default; returning means "confirmed"
"""

from abc import ABC, abstractmethod


class OperatorPort(ABC):

    @abstractmethod
    def show(self, text: str) -> None:
        """Display a block of text to the operator."""

    @abstractmethod
    def acknowledge(self, prompt: str) -> None:
        """Block until the operator explicitly confirms."""
