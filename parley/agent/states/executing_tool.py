"""ExecutingTool state: a tool invocation is in flight."""

from __future__ import annotations

from dataclasses import dataclass

from parley.agent.states.base import State


@dataclass(frozen=True)
class ExecutingTool(State):

    @property
    def name(self) -> str:
        return "executing_tool"
