"""Turn state tracker: the current state plus the interrupted tool name."""

from __future__ import annotations

from parley.agent.states.base import State
from parley.agent.states.idle import Idle
from parley.agent.utils.logging import get_logger


logger = get_logger("parley")


class TurnState:
    """Passive record of where the agent is between turns.

    No transition is validated here: any state may follow any other. The Agent
    alone drives the sequence, which keeps the whole state machine in one place.
    """

    def __init__(self) -> None:
        self._state: State = Idle()
        self._interrupted_tool: str | None = None

    def get_state(self) -> State:
        return self._state

    def set_state(self, state: State) -> None:
        if state != self._state:
            logger.debug(f"Transition: {self._state} -> {state}")
        self._state = state

    def get_interrupted_tool(self) -> str | None:
        return self._interrupted_tool

    def set_interrupted_tool(self, tool_name: str) -> None:
        self._interrupted_tool = tool_name

    def get_expected_param(self) -> str | None:
        """Parameter name when waiting for one, else None."""
        return self._state.expected_param

    def reset(self) -> None:
        """Return to Idle and forget the interrupted tool."""
        self._state = Idle()
        self._interrupted_tool = None
