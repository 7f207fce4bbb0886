"""Structured diagnostic events for failures that are absorbed instead of raised.

Components such as the intent resolver never let a collaborator failure abort a
turn. They report it here instead, so callers can log it, collect it in tests,
or forward it somewhere else.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from parley.agent.utils.logging import get_logger


logger = get_logger("parley")


class DiagnosticKind(str, Enum):
    """Kinds of absorbed failures."""
    HANDLER_FAILURE = "handler_failure"
    TEMPLATE_NOT_FOUND = "template_not_found"
    TURN_FAILURE = "turn_failure"


@dataclass(frozen=True)
class DiagnosticEvent:
    """A single absorbed failure.

    Attributes:
        kind: What went wrong.
        source: Name of the component or collaborator that failed.
        message: Human-readable summary.
        error: The original exception, when there is one.
    """
    kind: DiagnosticKind
    source: str
    message: str
    error: BaseException | None = None


class DiagnosticObserver(ABC):
    """Receives diagnostic events."""

    @abstractmethod
    def on_event(self, event: DiagnosticEvent) -> None:
        raise NotImplementedError


class LoggingObserver(DiagnosticObserver):
    """Default observer: writes events to the parley logger."""

    def on_event(self, event: DiagnosticEvent) -> None:
        if event.kind == DiagnosticKind.TEMPLATE_NOT_FOUND:
            logger.debug(f"source={event.source} event={event.kind.value} message={event.message}")
            return
        logger.warning(
            f"source={event.source} event={event.kind.value} message={event.message}",
            exc_info=event.error,
        )
