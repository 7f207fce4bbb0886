from parley.agent.agent import Agent
from parley.agent.config import AgentConfig
from parley.agent.types import AgentResponse, IntentDecision, IntentKind, Role, TurnRecord

__all__ = [
    "Agent",
    "AgentConfig",
    "AgentResponse",
    "IntentDecision",
    "IntentKind",
    "Role",
    "TurnRecord",
]
