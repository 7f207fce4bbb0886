"""AwaitingInput state: the agent asked the user to clarify."""

from __future__ import annotations

from dataclasses import dataclass

from parley.agent.states.base import State


@dataclass(frozen=True)
class AwaitingInput(State):

    @property
    def name(self) -> str:
        return "awaiting_input"
