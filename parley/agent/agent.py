"""Core Agent class for Parley turn orchestration.

The Agent owns one conversation: its log, its turn state and its tools. Each
call to handle_turn() records the input, asks the intent resolver for a
decision and dispatches on it. A tool call that lacks required parameters is
paused in the WaitingFor state; the next input is then taken as the missing
value and the call resumes with the arguments merged across turns.

Example usage:
    from parley.agent import Agent, AgentConfig
    from parley.agent.tools import WeatherTool

    agent = Agent(AgentConfig(name="Parley", version="1.0.0"))
    agent.register_tool(WeatherTool())
    agent.register_intent_handler("weather", WeatherIntentHandler())

    response = await agent.handle_turn("What's the weather like?")
    # -> asks for "city"; the agent is now waiting for it
    response = await agent.handle_turn("Beijing")
    # -> runs the weather tool with {"city": "Beijing"}

One Agent serves one logical conversation, and at most one handle_turn() may be
in flight at a time. Callers that share an Agent across tasks must serialize
turns themselves.
"""

from __future__ import annotations

from typing import Any

from parley.agent.config import AgentConfig
from parley.agent.context import ConversationLog
from parley.agent.errors import TemplateNotFoundError
from parley.agent.intents.base import IntentHandler
from parley.agent.intents.resolver import IntentResolver
from parley.agent.prompts import PromptRenderer
from parley.agent.states import AwaitingInput, ExecutingTool, State, TurnState, WaitingFor
from parley.agent.tools.base import Tool
from parley.agent.tools.registry import ToolRegistry
from parley.agent.types import AgentResponse, IntentDecision, IntentKind, Role, TurnRecord
from parley.agent.utils.diagnostics import (
    DiagnosticEvent,
    DiagnosticKind,
    DiagnosticObserver,
    LoggingObserver,
)
from parley.agent.utils.logging import get_logger


logger = get_logger("parley")

CLARIFICATION_TEMPLATE = "need_clarification"
GREETING_TEMPLATE = "greeting"

APOLOGY_REPLY = "Sorry, I ran into a problem and couldn't complete your request."
WHICH_TOOL_REPLY = "Which tool would you like me to use?"
NOTHING_TO_CONTINUE_REPLY = "I'm not sure what you'd like me to continue."
DEFAULT_CLARIFICATION_REPLY = "Please give me a few more details so I can understand what you need."
DEFAULT_DESCRIPTION = "a helpful assistant"


class Agent:
    """Turn-by-turn orchestrator for a single conversation.

    The Agent is the only component that changes the turn state. TurnState is a
    passive record, so every transition of the waiting-for-parameter machine is
    visible in this class:

        idle --call, all params--> idle
        idle --call, missing P--> waiting_for(P), interrupted tool recorded
        waiting_for(P) --continuation, still missing P'--> waiting_for(P')
        waiting_for(P) --continuation, complete--> idle
        any --reset--> idle
    """

    def __init__(
        self,
        config: AgentConfig,
        observer: DiagnosticObserver | None = None,
        intent_handlers: dict[str, IntentHandler] | None = None,
    ):
        """Initialize the Agent.

        Args:
            config: Name, version, description, threshold and default prompts.
            observer: Receives absorbed failures (failing intent handlers, failed turns).
                      Defaults to an observer that logs them.
            intent_handlers: Handlers to register up front, keyed by name.
        """
        if not isinstance(config, AgentConfig):
            raise TypeError(f"config must be an AgentConfig, got {type(config).__name__}")

        self.config = config
        self._observer = observer or LoggingObserver()

        self._log = ConversationLog()
        self._turn_state = TurnState()
        self._tools = ToolRegistry()
        self._prompts = PromptRenderer(config.default_prompts)
        self._resolver = IntentResolver(
            min_confidence=config.effective_min_confidence,
            handlers=intent_handlers,
            observer=self._observer,
        )

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def version(self) -> str:
        return self.config.version

    @property
    def description(self) -> str:
        return self.config.description or ""

    @property
    def state(self) -> State:
        return self._turn_state.get_state()

    @property
    def interrupted_tool(self) -> str | None:
        return self._turn_state.get_interrupted_tool()

    @property
    def history(self) -> list[TurnRecord]:
        return self._log.records()

    @property
    def tools(self) -> list[Tool]:
        return self._tools.list_all()

    def register_tool(self, tool: Tool) -> None:
        self._tools.register(tool)

    def register_tools(self, tools: list[Tool]) -> None:
        for tool in tools:
            self._tools.register(tool)

    def register_intent_handler(self, name: str, handler: IntentHandler) -> None:
        """Add (or replace) an intent handler consulted on every fresh turn."""
        self._resolver.register_handler(name, handler)

    def add_prompt_template(self, name: str, template: str, description: str | None = None) -> None:
        self._prompts.add_template(name, template, description)

    def reset(self) -> None:
        """Clear the conversation log and return the turn state to idle."""
        self._log.clear()
        self._turn_state.reset()
        logger.debug("Agent reset")

    async def handle_turn(self, text: str) -> AgentResponse:
        """Process one user input and return the reply.

        Never raises: any unexpected failure is reported to the observer and
        turned into a fixed apology.
        """
        try:
            self._log.append(Role.USER, text)

            decision = await self._resolver.detect_intent(text, self._log.records(), self._turn_state.get_state())
            logger.debug(f"Dispatching {decision.kind.value} (state={self._turn_state.get_state()})")

            if decision.kind == IntentKind.CALL_TOOL:
                response = await self._handle_tool_call(decision)
            elif decision.kind == IntentKind.CONTINUE_FLOW:
                response = await self._handle_continue_flow(decision)
            elif decision.kind == IntentKind.CLARIFY:
                response = self._handle_clarification(decision)
            else:
                response = self._handle_chit_chat(decision)
        except Exception as exc:
            logger.exception("Turn failed")
            event = DiagnosticEvent(
                kind=DiagnosticKind.TURN_FAILURE,
                source=self.name,
                message=str(exc) or type(exc).__name__,
                error=exc,
            )
            self._notify(event)
            return AgentResponse(content=APOLOGY_REPLY)

        self._log.append(
            Role.AGENT,
            response.content,
            {"intent": response.intent.value if response.intent else None, "tool_name": response.tool_name},
        )
        return response

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def _handle_tool_call(self, decision: IntentDecision) -> AgentResponse:
        tool_name = decision.tool_name
        if not tool_name:
            self._turn_state.set_state(AwaitingInput())
            return AgentResponse(content=WHICH_TOOL_REPLY, intent=decision.kind)

        arguments = dict(decision.parameters)
        self._log.remember_tool_call(tool_name, arguments)
        return await self._invoke(tool_name, arguments, decision.kind)

    async def _handle_continue_flow(self, decision: IntentDecision) -> AgentResponse:
        tool_name = self._turn_state.get_interrupted_tool()
        if not tool_name:
            self._turn_state.reset()
            return AgentResponse(content=NOTHING_TO_CONTINUE_REPLY, intent=decision.kind)

        arguments = {**self._log.last_arguments_for(tool_name), **decision.parameters}
        self._log.remember_tool_call(tool_name, arguments)
        return await self._invoke(tool_name, arguments, decision.kind)

    async def _invoke(self, tool_name: str, arguments: dict[str, Any], intent: IntentKind) -> AgentResponse:
        """Run a tool and move the turn state according to the outcome."""
        self._turn_state.set_state(ExecutingTool())
        outcome = await self._tools.invoke(tool_name, arguments)

        if outcome.succeeded:
            self._turn_state.reset()
            self._log.append(
                Role.SYSTEM,
                f"Tool {tool_name} result: {outcome.text}",
                {"tool_name": tool_name},
            )
            return AgentResponse(content=outcome.text, intent=intent, tool_name=tool_name, tool_result=outcome.text)

        if outcome.missing_params:
            missing = outcome.missing_params[0]
            self._turn_state.set_state(WaitingFor(missing))
            self._turn_state.set_interrupted_tool(tool_name)
            return AgentResponse(
                content=f"Please provide the {missing} parameter.",
                intent=intent,
                tool_name=tool_name,
            )

        # Neither complete nor resumable: drop the pending call.
        self._turn_state.reset()
        return AgentResponse(
            content=f"Tool execution failed: {outcome.error_message}",
            intent=intent,
            tool_name=tool_name,
        )

    def _handle_clarification(self, decision: IntentDecision) -> AgentResponse:
        self._turn_state.set_state(AwaitingInput())
        content = self._render_or_default(CLARIFICATION_TEMPLATE, None, DEFAULT_CLARIFICATION_REPLY)
        return AgentResponse(content=content, intent=decision.kind)

    def _handle_chit_chat(self, decision: IntentDecision) -> AgentResponse:
        variables = {"name": self.name, "description": self.config.description or DEFAULT_DESCRIPTION}
        content = self._render_or_default(
            GREETING_TEMPLATE,
            variables,
            f"Hello, I'm {self.name}. How can I help you?",
        )
        return AgentResponse(content=content, intent=decision.kind)

    def _render_or_default(self, template_name: str, variables: dict[str, Any] | None, default: str) -> str:
        try:
            return self._prompts.render(template_name, variables)
        except TemplateNotFoundError as exc:
            self._notify(DiagnosticEvent(kind=DiagnosticKind.TEMPLATE_NOT_FOUND, source=template_name, message=str(exc)))
            return default

    def _notify(self, event: DiagnosticEvent) -> None:
        try:
            self._observer.on_event(event)
        except Exception:
            logger.exception(f"Diagnostic observer failed on {event.kind.value} from {event.source}")
