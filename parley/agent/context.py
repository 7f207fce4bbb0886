"""Append-only conversation log and the remembered tool call."""

from __future__ import annotations

from typing import Any

from parley.agent.types import LastToolCall, Role, TurnRecord
from parley.agent.utils.helpers import now_ms
from parley.agent.utils.logging import get_logger


logger = get_logger("parley")


class ConversationLog:
    """Ordered record of the conversation, source of truth for context.

    Records are only ever appended; clear() is the single way to drop them.
    The log also keeps the last tool call so that arguments supplied on earlier
    turns can be merged into a resumed call.
    """

    def __init__(self) -> None:
        self._records: list[TurnRecord] = []
        self._last_tool_call: LastToolCall | None = None

    def append(self, role: Role, content: str, metadata: dict[str, Any] | None = None) -> TurnRecord:
        """Create a record stamped with the current time and append it."""
        record = TurnRecord(role=Role(role), content=content, timestamp=now_ms(), metadata=dict(metadata or {}))
        self._records.append(record)
        return record

    def records(self, limit: int | None = None) -> list[TurnRecord]:
        """Return a copy of the log, or only its last `limit` records.

        Raises:
            ValueError: If `limit` is negative.
        """
        if limit is not None and limit < 0:
            raise ValueError(f"limit must not be negative, got {limit}")
        if not limit:
            return list(self._records)
        return self._records[-limit:]

    def clear(self) -> None:
        """Drop every record and the remembered tool call."""
        self._records.clear()
        self._last_tool_call = None
        logger.debug("Conversation log cleared")

    def remember_tool_call(self, tool_name: str, arguments: dict[str, Any]) -> None:
        self._last_tool_call = LastToolCall(tool_name=tool_name, arguments=dict(arguments))

    @property
    def last_tool_call(self) -> LastToolCall | None:
        return self._last_tool_call

    def last_arguments_for(self, tool_name: str) -> dict[str, Any]:
        """Arguments of the remembered call when it belongs to `tool_name`, else {}."""
        if self._last_tool_call is None or self._last_tool_call.tool_name != tool_name:
            return {}
        return dict(self._last_tool_call.arguments)

    def __len__(self) -> int:
        return len(self._records)
