from parley.agent.intents.base import IntentHandler
from parley.agent.intents.resolver import IntentResolver

__all__ = [
    "IntentHandler",
    "IntentResolver",
]
