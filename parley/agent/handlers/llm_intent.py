"""Optional intent handler backed by an Ollama model.

The model is shown the registered tools (with their parameter schemas) and the
recent conversation, and must answer with a structured classification that is
validated against IntentClassification. Anything that does not validate is
treated as "does not apply".
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, Literal

from pydantic import BaseModel, Field

from parley.agent.intents.base import IntentHandler
from parley.agent.states.base import State
from parley.agent.tools.base import Tool
from parley.agent.tools.schema import ParameterSchema
from parley.agent.types import IntentDecision, IntentKind, Role, TurnRecord
from parley.agent.utils.json_utils import call_llm_with_format, safe_parse_json
from parley.agent.utils.logging import get_logger


logger = get_logger("parley")

_ROLE_TO_CHAT = {Role.USER: "user", Role.AGENT: "assistant", Role.SYSTEM: "system"}

CLASSIFIER_INSTRUCTIONS = """You classify the user's latest message for a tool-using assistant.
Answer with one of these kinds:
- call_tool: the user wants one of the tools below to run. Set tool_name and put every argument you can
  read from the message into parameters. Leave out arguments the user did not give.
- clarify: the user wants something but it is too vague to act on.
- chit_chat: greetings, thanks and small talk.
Give a confidence between 0 and 1.

Available tools:
{tools}"""


class IntentClassification(BaseModel):
    """Structured output expected from the model."""
    kind: Literal["call_tool", "clarify", "chit_chat"]
    tool_name: str | None = None
    parameters: dict[str, Any] = Field(default_factory=dict)
    confidence: float = Field(ge=0.0, le=1.0)


class LLMIntentHandler(IntentHandler):
    """Ask an Ollama model to classify the input."""

    def __init__(
        self,
        list_tools: Callable[[], list[Tool]],
        model: str,
        think: bool = False,
        max_context_messages: int = 20,
    ):
        """
        Args:
            list_tools: Returns the tools currently available (e.g. lambda: agent.tools).
            model: Ollama model name.
            think: Enable thinking mode for models that support it.
            max_context_messages: How many recent log records to show the model.
        """
        self.list_tools = list_tools
        self.model = model
        self.think = think
        self.max_context_messages = max_context_messages

    async def handle(self, text: str, log: list[TurnRecord], state: State) -> IntentDecision | None:
        messages = self._build_messages(text, log)
        classification = await asyncio.to_thread(
            call_llm_with_format,
            self.model,
            messages,
            IntentClassification,
            self.think,
        )
        if classification is None:
            logger.warning(f"model={self.model} event=classification_invalid")
            return None

        tool_names = {tool.name for tool in self.list_tools()}
        if classification.kind == "call_tool" and classification.tool_name not in tool_names:
            logger.info(f"model={self.model} event=unknown_tool tool={classification.tool_name}")
            return None

        logger.debug(f"model={self.model} event=classified kind={classification.kind}")
        return IntentDecision(
            kind=IntentKind(classification.kind),
            tool_name=classification.tool_name if classification.kind == "call_tool" else None,
            parameters=safe_parse_json(classification.parameters),
            confidence=classification.confidence,
        )

    def _build_messages(self, text: str, log: list[TurnRecord]) -> list[dict[str, Any]]:
        messages: list[dict[str, Any]] = [{"role": "system", "content": CLASSIFIER_INSTRUCTIONS.format(tools=self._describe_tools())}]

        history = log[-self.max_context_messages:]
        # The latest user input is already the last record of the log.
        if history and history[-1].role == Role.USER and history[-1].content == text:
            history = history[:-1]
        for record in history:
            messages.append({"role": _ROLE_TO_CHAT[record.role], "content": record.content})

        messages.append({"role": "user", "content": text})
        return messages

    def _describe_tools(self) -> str:
        lines = []
        for tool in self.list_tools():
            schema = tool.parameter_schema
            if isinstance(schema, ParameterSchema):
                schema = schema.model_dump(exclude_none=True)
            schema_text = json.dumps(schema or {})
            lines.append(f"- {tool.name}: {tool.description}. Parameters: {schema_text}")
        return "\n".join(lines) or "(none)"
