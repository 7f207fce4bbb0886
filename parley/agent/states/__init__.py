from parley.agent.states.base import State
from parley.agent.states.idle import Idle
from parley.agent.states.awaiting_input import AwaitingInput
from parley.agent.states.executing_tool import ExecutingTool
from parley.agent.states.waiting_for import WaitingFor
from parley.agent.states.tracker import TurnState

__all__ = [
    "State",
    "Idle",
    "AwaitingInput",
    "ExecutingTool",
    "WaitingFor",
    "TurnState",
]
