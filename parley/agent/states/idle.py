"""Idle state: nothing in progress, the next input is a fresh request."""

from __future__ import annotations

from dataclasses import dataclass

from parley.agent.states.base import State


@dataclass(frozen=True)
class Idle(State):
    """Quiescent ('at rest') state of the agent."""

    @property
    def name(self) -> str:
        return "idle"
