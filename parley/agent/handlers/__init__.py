from parley.agent.handlers.weather_intent import WeatherIntentHandler
from parley.agent.handlers.llm_intent import IntentClassification, LLMIntentHandler

__all__ = [
    "WeatherIntentHandler",
    "IntentClassification",
    "LLMIntentHandler",
]
