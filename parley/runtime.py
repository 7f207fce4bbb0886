"""Runtime helpers for process-level configuration and agent wiring."""

from __future__ import annotations

import os

from parley.agent import Agent
from parley.agent.config import Settings, build_agent_config
from parley.agent.handlers import LLMIntentHandler, WeatherIntentHandler
from parley.agent.tools import WeatherTool
from parley.agent.utils.logging import get_logger

logger = get_logger("parley")


def configure_ollama_endpoint() -> None:
    """Configure Ollama SDK endpoint from OLLAMA_BASE_URL.

    The ollama Python SDK reads OLLAMA_HOST. Parley standardizes on OLLAMA_BASE_URL
    as the user-facing variable and maps it once at startup.
    """
    base_url = os.getenv("OLLAMA_BASE_URL", "").strip()
    if base_url:
        os.environ["OLLAMA_HOST"] = base_url


def build_agent(settings: Settings) -> Agent:
    """Create an Agent with the built-in weather tool and intent handlers."""
    agent = Agent(build_agent_config(settings))
    agent.register_tool(WeatherTool())
    agent.register_intent_handler("weather", WeatherIntentHandler())

    if settings.llm.enabled:
        # Registered after the keyword handler, so it loses confidence ties.
        agent.register_intent_handler(
            "llm",
            LLMIntentHandler(
                list_tools=lambda: agent.tools,
                model=settings.llm.model,
                think=settings.llm.think,
                max_context_messages=settings.agent.max_context_messages,
            ),
        )
        logger.info(f"LLM intent handler enabled: model={settings.llm.model}")

    return agent
