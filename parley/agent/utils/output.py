from __future__ import annotations

from abc import ABC, abstractmethod


class OutputManager(ABC):
    """Abstract output surface for user-visible messages."""

    @abstractmethod
    def emit_text(self, text: str) -> None:
        """Emit a complete line of text to the user."""
        raise NotImplementedError

    @abstractmethod
    def emit_status(self, text: str) -> None:
        """Emit a non-final status/debug line to the user."""
        raise NotImplementedError


class ConsoleOutputManager(OutputManager):
    """Console output implementation used by the CLI runtime."""

    def emit_text(self, text: str) -> None:
        if not text:
            return
        print(text)

    def emit_status(self, text: str) -> None:
        if not text:
            return
        print(f"  [{text}]")


output_manager = ConsoleOutputManager()
