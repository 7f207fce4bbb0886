"""Intent resolution: continuation first, then ranked handler results."""

from __future__ import annotations

import inspect

from parley.agent.errors import HandlerFailure
from parley.agent.intents.base import IntentHandler
from parley.agent.states.base import State
from parley.agent.states.waiting_for import WaitingFor
from parley.agent.tools.base import Tool
from parley.agent.types import IntentDecision, IntentKind, ToolMatch, TurnRecord
from parley.agent.utils.diagnostics import (
    DiagnosticEvent,
    DiagnosticKind,
    DiagnosticObserver,
    LoggingObserver,
)
from parley.agent.utils.logging import get_logger


logger = get_logger("parley")

DEFAULT_MIN_CONFIDENCE = 0.7
CONTINUATION_CONFIDENCE = 0.9
FALLBACK_CONFIDENCE = 0.5

NAME_MATCH_CONFIDENCE = 0.8
DESCRIPTION_MATCH_CONFIDENCE = 0.6
NO_MATCH_CONFIDENCE = 0.1


class IntentResolver:
    """Turns an input into a single IntentDecision.

    While the turn state is WaitingFor(p), the input is taken as the value of p
    and resumes the interrupted tool. Otherwise every registered handler is
    asked in registration order; results below the threshold are dropped, the
    rest are ranked by confidence with ties going to the earlier handler. When
    nothing qualifies the resolver still answers, with a low-confidence
    chit_chat decision.
    """

    def __init__(
        self,
        min_confidence: float = DEFAULT_MIN_CONFIDENCE,
        handlers: dict[str, IntentHandler] | None = None,
        observer: DiagnosticObserver | None = None,
    ) -> None:
        self.min_confidence = min_confidence
        self._handlers: dict[str, IntentHandler] = {}
        self._observer = observer or LoggingObserver()
        for name, handler in (handlers or {}).items():
            self.register_handler(name, handler)

    def register_handler(self, name: str, handler: IntentHandler) -> None:
        """Register a handler; re-registering a name replaces it in place."""
        self._handlers[name] = handler
        logger.debug(f"Registered intent handler: {name}")

    def handler_names(self) -> list[str]:
        return list(self._handlers)

    async def detect_intent(self, text: str, log: list[TurnRecord], state: State) -> IntentDecision:
        continuation = self._check_continue_flow(text, state)
        if continuation is not None and continuation.confidence >= self.min_confidence:
            logger.debug(f"Continuation for parameter {state.expected_param!r}")
            return continuation

        results: list[IntentDecision] = []
        for name, handler in self._handlers.items():
            try:
                result = handler.handle(text, log, state)
                if inspect.isawaitable(result):
                    result = await result
                if result is not None and not isinstance(result, IntentDecision):
                    raise TypeError(f"expected IntentDecision or None, got {type(result).__name__}")
            except Exception as exc:
                self._report_failure(HandlerFailure(name, exc))
                continue

            if result is not None and result.confidence >= self.min_confidence:
                results.append(result)

        if results:
            # sorted() is stable, so equal confidences keep registration order.
            ranked = sorted(results, key=lambda decision: decision.confidence, reverse=True)
            best = ranked[0]
            logger.info(f"Intent resolved: {best.kind.value} (confidence: {best.confidence:.2f})")
            return best

        logger.debug("No intent handler cleared the threshold; falling back to chit_chat")
        return IntentDecision(kind=IntentKind.CHIT_CHAT, confidence=FALLBACK_CONFIDENCE)

    def get_tool_matches(self, text: str, tools: list[Tool]) -> list[ToolMatch]:
        """Rank tools by a substring heuristic on name and description."""
        matches = []
        for tool in tools:
            name_score = NAME_MATCH_CONFIDENCE if tool.name in text else NO_MATCH_CONFIDENCE
            description_score = DESCRIPTION_MATCH_CONFIDENCE if tool.description in text else NO_MATCH_CONFIDENCE
            matches.append(ToolMatch(name=tool.name, confidence=max(name_score, description_score)))
        return sorted(matches, key=lambda match: match.confidence, reverse=True)

    @staticmethod
    def _check_continue_flow(text: str, state: State) -> IntentDecision | None:
        """Map the raw input under the awaited parameter name, whatever it says."""
        if not isinstance(state, WaitingFor):
            return None
        return IntentDecision(
            kind=IntentKind.CONTINUE_FLOW,
            parameters={state.param: text.strip()},
            confidence=CONTINUATION_CONFIDENCE,
        )

    def _report_failure(self, failure: HandlerFailure) -> None:
        event = DiagnosticEvent(
            kind=DiagnosticKind.HANDLER_FAILURE,
            source=failure.handler_name,
            message=str(failure),
            error=failure.cause,
        )
        try:
            self._observer.on_event(event)
        except Exception:
            # A broken observer must not stop the remaining handlers.
            logger.exception(f"Diagnostic observer failed on {event.kind.value} from {event.source}")
