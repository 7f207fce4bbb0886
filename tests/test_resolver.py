import unittest
from typing import Any

from parley.agent.intents import IntentHandler, IntentResolver
from parley.agent.states import AwaitingInput, Idle, WaitingFor
from parley.agent.tools import Tool
from parley.agent.types import IntentDecision, IntentKind
from parley.agent.utils.diagnostics import DiagnosticKind, DiagnosticObserver


class _FixedHandler(IntentHandler):
    def __init__(self, confidence: float, tool_name: str = "tool"):
        self.confidence = confidence
        self.tool_name = tool_name
        self.calls = 0

    def handle(self, text, log, state):
        self.calls += 1
        return IntentDecision(kind=IntentKind.CALL_TOOL, tool_name=self.tool_name, confidence=self.confidence)


class _AsyncHandler(IntentHandler):
    async def handle(self, text, log, state):
        return IntentDecision(kind=IntentKind.CLARIFY, confidence=0.75)


class _NoneHandler(IntentHandler):
    def handle(self, text, log, state):
        return None


class _FailingHandler(IntentHandler):
    def handle(self, text, log, state):
        raise RuntimeError("handler exploded")


class _WrongTypeHandler(IntentHandler):
    def handle(self, text, log, state):
        return {"kind": "call_tool"}


class _CollectingObserver(DiagnosticObserver):
    def __init__(self):
        self.events = []

    def on_event(self, event):
        self.events.append(event)


class _RaisingObserver(DiagnosticObserver):
    def on_event(self, event):
        raise RuntimeError("observer down")


class _NamedTool(Tool):
    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description

    def invoke(self, args: dict[str, Any]) -> str:
        return ""


class TestDetectIntent(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.observer = _CollectingObserver()
        self.resolver = IntentResolver(observer=self.observer)

    async def test_highest_confidence_wins(self):
        # Verifies handlers returning 0.4, 0.9 and 0.6 resolve to the 0.9 decision.
        self.resolver.register_handler("low", _FixedHandler(0.4, "low"))
        self.resolver.register_handler("high", _FixedHandler(0.9, "high"))
        self.resolver.register_handler("mid", _FixedHandler(0.6, "mid"))

        decision = await self.resolver.detect_intent("x", [], Idle())

        self.assertEqual(decision.tool_name, "high")
        self.assertEqual(decision.confidence, 0.9)

    async def test_tie_goes_to_first_registered(self):
        # Verifies equal confidences keep handler registration order.
        self.resolver.register_handler("first", _FixedHandler(0.8, "first"))
        self.resolver.register_handler("second", _FixedHandler(0.8, "second"))

        decision = await self.resolver.detect_intent("x", [], Idle())

        self.assertEqual(decision.tool_name, "first")

    async def test_below_threshold_falls_back_to_chit_chat(self):
        # Verifies a lone sub-threshold result is dropped in favour of chit_chat.
        self.resolver.register_handler("low", _FixedHandler(0.69))

        decision = await self.resolver.detect_intent("x", [], Idle())

        self.assertEqual(decision.kind, IntentKind.CHIT_CHAT)
        self.assertEqual(decision.confidence, 0.5)
        self.assertIsNone(decision.tool_name)

    async def test_threshold_is_inclusive(self):
        # Verifies a result exactly at the threshold qualifies.
        self.resolver.register_handler("edge", _FixedHandler(0.7))
        decision = await self.resolver.detect_intent("x", [], Idle())
        self.assertEqual(decision.kind, IntentKind.CALL_TOOL)

    async def test_no_handlers_falls_back(self):
        # Verifies the resolver always answers, even with nothing registered.
        decision = await self.resolver.detect_intent("hello", [], Idle())
        self.assertEqual(decision.kind, IntentKind.CHIT_CHAT)

    async def test_async_and_none_handlers(self):
        # Verifies awaitable results are awaited and None results are skipped.
        self.resolver.register_handler("none", _NoneHandler())
        self.resolver.register_handler("async", _AsyncHandler())

        decision = await self.resolver.detect_intent("x", [], AwaitingInput())

        self.assertEqual(decision.kind, IntentKind.CLARIFY)

    async def test_failing_handler_is_reported_and_skipped(self):
        # Verifies a raising handler does not abort resolution and is reported.
        self.resolver.register_handler("bad", _FailingHandler())
        self.resolver.register_handler("good", _FixedHandler(0.8, "good"))

        decision = await self.resolver.detect_intent("x", [], Idle())

        self.assertEqual(decision.tool_name, "good")
        self.assertEqual(len(self.observer.events), 1)
        event = self.observer.events[0]
        self.assertEqual(event.kind, DiagnosticKind.HANDLER_FAILURE)
        self.assertEqual(event.source, "bad")
        self.assertIsInstance(event.error, RuntimeError)

    async def test_raising_observer_does_not_stop_other_handlers(self):
        # Verifies handlers after a failing one are still evaluated when reporting raises.
        resolver = IntentResolver(observer=_RaisingObserver())
        resolver.register_handler("bad", _FailingHandler())
        resolver.register_handler("good", _FixedHandler(0.8, "good"))

        decision = await resolver.detect_intent("x", [], Idle())

        self.assertEqual(decision.tool_name, "good")

    async def test_wrong_result_type_is_reported(self):
        # Verifies a handler returning something other than a decision counts as a failure.
        self.resolver.register_handler("wrong", _WrongTypeHandler())

        decision = await self.resolver.detect_intent("x", [], Idle())

        self.assertEqual(decision.kind, IntentKind.CHIT_CHAT)
        self.assertIsInstance(self.observer.events[0].error, TypeError)

    async def test_waiting_state_short_circuits_handlers(self):
        # Verifies continuation wins while waiting and handlers are never asked.
        handler = _FixedHandler(1.0)
        self.resolver.register_handler("eager", handler)

        decision = await self.resolver.detect_intent("  Beijing ", [], WaitingFor("city"))

        self.assertEqual(decision.kind, IntentKind.CONTINUE_FLOW)
        self.assertEqual(decision.parameters, {"city": "Beijing"})
        self.assertEqual(decision.confidence, 0.9)
        self.assertEqual(handler.calls, 0)

    async def test_continuation_accepts_any_text(self):
        # Verifies even an off-topic input becomes the awaited value.
        decision = await self.resolver.detect_intent("never mind", [], WaitingFor("city"))
        self.assertEqual(decision.parameters, {"city": "never mind"})

    async def test_empty_param_name_maps_under_empty_key(self):
        # Verifies waiting for an empty name stores the input under "".
        decision = await self.resolver.detect_intent("value", [], WaitingFor(""))
        self.assertEqual(decision.kind, IntentKind.CONTINUE_FLOW)
        self.assertEqual(decision.parameters, {"": "value"})

    async def test_continuation_respects_raised_threshold(self):
        # Verifies a threshold above 0.9 skips continuation and consults handlers.
        resolver = IntentResolver(min_confidence=0.95, observer=self.observer)
        resolver.register_handler("sure", _FixedHandler(1.0, "sure"))

        decision = await resolver.detect_intent("Beijing", [], WaitingFor("city"))

        self.assertEqual(decision.kind, IntentKind.CALL_TOOL)
        self.assertEqual(decision.tool_name, "sure")

    async def test_reregistering_replaces_handler(self):
        # Verifies registering an existing name replaces the handler.
        self.resolver.register_handler("h", _FixedHandler(0.8, "old"))
        self.resolver.register_handler("h", _FixedHandler(0.8, "new"))

        decision = await self.resolver.detect_intent("x", [], Idle())

        self.assertEqual(self.resolver.handler_names(), ["h"])
        self.assertEqual(decision.tool_name, "new")


class TestToolMatches(unittest.TestCase):
    def setUp(self):
        self.resolver = IntentResolver()
        self.tools = [
            _NamedTool("calculator", "do arithmetic"),
            _NamedTool("weather", "look up the weather"),
        ]

    def test_name_match_scores_highest(self):
        # Verifies a tool named in the text scores 0.8 and sorts first.
        matches = self.resolver.get_tool_matches("use weather please", self.tools)
        self.assertEqual(matches[0].name, "weather")
        self.assertEqual(matches[0].confidence, 0.8)
        self.assertEqual(matches[1].confidence, 0.1)

    def test_description_match(self):
        # Verifies a description contained in the text scores 0.6.
        matches = self.resolver.get_tool_matches("please do arithmetic", self.tools)
        self.assertEqual(matches[0].name, "calculator")
        self.assertEqual(matches[0].confidence, 0.6)

    def test_every_tool_is_scored(self):
        # Verifies unmatched tools still appear with the floor score.
        matches = self.resolver.get_tool_matches("nothing relevant", self.tools)
        self.assertEqual(len(matches), 2)
        self.assertTrue(all(match.confidence == 0.1 for match in matches))

    def test_match_is_case_sensitive(self):
        # Verifies matching is plain substring containment.
        matches = self.resolver.get_tool_matches("WEATHER", self.tools)
        self.assertTrue(all(match.confidence == 0.1 for match in matches))
