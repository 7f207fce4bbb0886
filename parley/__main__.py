"""
Entry point for running Parley:

    python -m parley          # interactive chat
    python -m parley demo     # scripted weather conversation

Configuration is loaded from:
1. Environment variables (PARLEY_* prefix)
2. config/local.toml (if it exists)
3. config/default.toml (default settings)
"""

from __future__ import annotations

import asyncio
import sys

from parley.runtime import configure_ollama_endpoint as _configure_ollama_endpoint

# Configure Ollama endpoint before importing modules that import ollama.
_configure_ollama_endpoint()

from parley.agent import Agent, AgentResponse
from parley.agent.config import load_settings
from parley.agent.utils.logging import configure_logging, get_logger
from parley.agent.utils.output import OutputManager, output_manager
from parley.runtime import build_agent


logger = get_logger("parley")

DEMO_INPUTS = [
    "Hello",
    "What's the weather like?",
    "Beijing",
    "What about tomorrow?",
    "Weather in Shanghai today",
    "Thanks",
]

EXIT_WORDS = {"exit", "quit"}


def _emit_response(output: OutputManager, agent: Agent, response: AgentResponse) -> None:
    output.emit_text(f"{agent.name}: {response.content}")
    if response.intent:
        output.emit_status(f"intent: {response.intent.value}")
    if response.tool_name:
        output.emit_status(f"tool: {response.tool_name}")
    output.emit_status(f"state: {agent.state}")


async def run_demo(agent: Agent, output: OutputManager, inputs: list[str] | None = None) -> None:
    """Play a scripted conversation through the agent."""
    output.emit_text(f"===== {agent.name} v{agent.version} demo =====")
    if agent.description:
        output.emit_text(agent.description)
    output.emit_text("")

    for text in inputs or DEMO_INPUTS:
        output.emit_text(f"You: {text}")
        response = await agent.handle_turn(text)
        _emit_response(output, agent, response)
        output.emit_text("")

    output.emit_text("===== demo finished =====")


async def run_chat(agent: Agent, output: OutputManager) -> None:
    """Read user input line by line until EOF or an exit word."""
    output.emit_text(f"{agent.name} (type 'exit' to quit, 'reset' to start over)")
    output.emit_text("")

    while True:
        try:
            text = await asyncio.to_thread(input, "You: ")
        except (EOFError, KeyboardInterrupt):
            break

        text = text.strip()
        if not text:
            continue
        if text.lower() in EXIT_WORDS:
            break
        if text.lower() == "reset":
            agent.reset()
            output.emit_status("conversation reset")
            continue

        response = await agent.handle_turn(text)
        _emit_response(output, agent, response)


def main(argv: list[str] | None = None) -> int:
    """Load configuration, build the agent and run the chosen mode."""
    args = sys.argv[1:] if argv is None else argv

    try:
        settings = load_settings()
    except (RuntimeError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        output_manager.emit_text(f"Configuration error: {e}")
        return 1

    configure_logging(debug=settings.agent.debug)
    agent = build_agent(settings)

    try:
        if args[:1] == ["demo"]:
            asyncio.run(run_demo(agent, output_manager))
        else:
            asyncio.run(run_chat(agent, output_manager))
    except KeyboardInterrupt:
        pass
    logger.info("Parley shutdown complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
