"""WaitingFor state: a tool call paused because a required parameter was missing.

The parameter name is an explicit payload. An empty name is a legal payload;
the continuation then maps the user's input under the empty key.
"""

from __future__ import annotations

from dataclasses import dataclass

from parley.agent.states.base import State


@dataclass(frozen=True)
class WaitingFor(State):
    """State that expects the next input to supply `param`.

    Attributes:
        param: Name of the missing tool parameter.
    """
    param: str

    @property
    def name(self) -> str:
        return "waiting_for"

    @property
    def expected_param(self) -> str:
        return self.param

    def __str__(self) -> str:
        return f"waiting_for({self.param})"
