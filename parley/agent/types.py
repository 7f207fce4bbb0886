from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Role(str, Enum):
    """Author of a conversation record."""
    USER = "user"
    AGENT = "agent"
    SYSTEM = "system"


class IntentKind(str, Enum):
    """Decision kinds the agent knows how to dispatch.

    Attributes:
        CALL_TOOL: Invoke a named tool with the decision's parameters.
        CONTINUE_FLOW: Supply missing parameters to the interrupted tool.
        CLARIFY: Ask the user for more detail.
        CHIT_CHAT: Reply with a canned greeting.
    """
    CALL_TOOL = "call_tool"
    CONTINUE_FLOW = "continue_flow"
    CLARIFY = "clarify"
    CHIT_CHAT = "chit_chat"


@dataclass(frozen=True)
class TurnRecord:
    """Immutable entry of the conversation log.

    Attributes:
        role: Who produced the content.
        content: The text itself.
        timestamp: Milliseconds since the epoch when the record was created.
        metadata: Optional extra data (intent, tool name, ...).
    """
    role: Role
    content: str
    timestamp: int
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class IntentDecision:
    """Ranked intent produced fresh for every turn.

    Attributes:
        kind: Which branch the agent should take.
        confidence: Score in [0, 1] compared against the resolver threshold.
        tool_name: Tool to call, for CALL_TOOL decisions.
        parameters: Arguments extracted from the input.
    """
    kind: IntentKind
    confidence: float
    tool_name: str | None = None
    parameters: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")


@dataclass(frozen=True)
class ExecutionOutcome:
    """Result of one tool invocation attempt.

    Attributes:
        succeeded: True when the tool returned normally.
        text: The tool's output on success.
        error_message: Why the attempt failed.
        missing_params: Every required parameter absent from the arguments, in schema order.
    """
    succeeded: bool
    text: str | None = None
    error_message: str | None = None
    missing_params: list[str] = field(default_factory=list)

    @classmethod
    def success(cls, text: str) -> ExecutionOutcome:
        return cls(succeeded=True, text=text)

    @classmethod
    def failure(cls, error_message: str, missing_params: list[str] | None = None) -> ExecutionOutcome:
        return cls(succeeded=False, error_message=error_message, missing_params=list(missing_params or []))


@dataclass(frozen=True)
class LastToolCall:
    """Arguments most recently sent to a tool, kept for merging on continuation."""
    tool_name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolMatch:
    """Heuristic relevance of a tool to an input."""
    name: str
    confidence: float


@dataclass
class AgentResponse:
    """What a turn returns to the caller.

    Attributes:
        content: User-facing reply text.
        intent: The decision kind that produced the reply, if one was resolved.
        tool_name: The tool involved, if any.
        tool_result: The tool's raw output on success.
    """
    content: str
    intent: IntentKind | None = None
    tool_name: str | None = None
    tool_result: str | None = None
