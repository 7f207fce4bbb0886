import unittest
from typing import Any
from unittest.mock import patch

from parley.agent.handlers import IntentClassification, LLMIntentHandler, WeatherIntentHandler
from parley.agent.states import Idle
from parley.agent.tools import Tool, WeatherTool
from parley.agent.types import IntentKind, Role, TurnRecord


def _record(role: Role, content: str) -> TurnRecord:
    return TurnRecord(role=role, content=content, timestamp=0)


class TestWeatherIntentHandler(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.handler = WeatherIntentHandler()

    async def test_keyword_without_city(self):
        # Verifies a bare weather question is a call at the base confidence.
        decision = await self.handler.handle("What's the weather like?", [], Idle())
        self.assertEqual(decision.kind, IntentKind.CALL_TOOL)
        self.assertEqual(decision.tool_name, "weather")
        self.assertEqual(decision.parameters, {})
        self.assertEqual(decision.confidence, 0.7)

    async def test_city_and_date_raise_confidence(self):
        # Verifies city and date are extracted and raise the score.
        decision = await self.handler.handle("Weather in Shanghai tomorrow", [], Idle())
        self.assertEqual(decision.parameters, {"city": "Shanghai", "date": "tomorrow"})
        self.assertEqual(decision.confidence, 0.95)

    async def test_iso_date(self):
        # Verifies explicit dates are picked up.
        decision = await self.handler.handle("forecast for Beijing on 2025-03-01", [], Idle())
        self.assertEqual(decision.parameters, {"city": "Beijing", "date": "2025-03-01"})

    async def test_unrelated_input_returns_none(self):
        # Verifies the handler ignores inputs without weather words.
        self.assertIsNone(await self.handler.handle("Hello", [], Idle()))

    async def test_follow_up_uses_previous_city(self):
        # Verifies short follow-ups reuse the city from the last weather result.
        log = [_record(Role.SYSTEM, "Tool weather result: Weather for Chengdu on today: sunny, 20°C")]
        decision = await self.handler.handle("What about tomorrow?", log, Idle())
        self.assertEqual(decision.parameters, {"city": "Chengdu", "date": "tomorrow"})
        self.assertEqual(decision.confidence, 0.85)

    async def test_follow_up_without_history_is_ignored(self):
        # Verifies follow-ups need a previous weather result.
        self.assertIsNone(await self.handler.handle("What about tomorrow?", [], Idle()))


class TestWeatherTool(unittest.IsolatedAsyncioTestCase):
    async def test_defaults_to_today(self):
        # Verifies the date defaults to today and the city is echoed.
        result = await WeatherTool(latency=0).invoke({"city": "Wuhan"})
        self.assertTrue(result.startswith("Weather for Wuhan on today: "))
        self.assertTrue(result.endswith("°C"))


class _EchoTool(Tool):
    name = "echo"
    description = "Echo text"
    parameter_schema = {"type": "object", "properties": {"text": {"type": "string"}}, "required": ["text"]}

    def invoke(self, args: dict[str, Any]) -> str:
        return args["text"]


class TestLLMIntentHandler(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.handler = LLMIntentHandler(list_tools=lambda: [_EchoTool()], model="test-model", max_context_messages=3)

    @patch("parley.agent.handlers.llm_intent.call_llm_with_format")
    async def test_call_tool_classification(self, llm_mock):
        # Verifies a valid classification becomes an intent decision.
        llm_mock.return_value = IntentClassification(
            kind="call_tool",
            tool_name="echo",
            parameters={"text": "hi"},
            confidence=0.9,
        )

        decision = await self.handler.handle("echo hi", [_record(Role.USER, "echo hi")], Idle())

        self.assertEqual(decision.kind, IntentKind.CALL_TOOL)
        self.assertEqual(decision.tool_name, "echo")
        self.assertEqual(decision.parameters, {"text": "hi"})
        self.assertEqual(decision.confidence, 0.9)

        model, messages, schema_class, think = llm_mock.call_args.args
        self.assertEqual(model, "test-model")
        self.assertIs(schema_class, IntentClassification)
        self.assertFalse(think)
        self.assertEqual(messages[0]["role"], "system")
        self.assertIn("- echo: Echo text", messages[0]["content"])
        self.assertEqual(messages[1:], [{"role": "user", "content": "echo hi"}])

    @patch("parley.agent.handlers.llm_intent.call_llm_with_format", return_value=None)
    async def test_invalid_output_returns_none(self, _llm_mock):
        # Verifies unparseable model output means "does not apply".
        self.assertIsNone(await self.handler.handle("echo hi", [], Idle()))

    @patch("parley.agent.handlers.llm_intent.call_llm_with_format")
    async def test_unknown_tool_returns_none(self, llm_mock):
        # Verifies the model cannot route to a tool that is not registered.
        llm_mock.return_value = IntentClassification(kind="call_tool", tool_name="ghost", confidence=0.9)
        self.assertIsNone(await self.handler.handle("summon", [], Idle()))

    @patch("parley.agent.handlers.llm_intent.call_llm_with_format")
    async def test_chit_chat_drops_tool_name(self, llm_mock):
        # Verifies non-call kinds never carry a tool name.
        llm_mock.return_value = IntentClassification(kind="chit_chat", tool_name="echo", confidence=0.8)
        decision = await self.handler.handle("thanks", [], Idle())
        self.assertEqual(decision.kind, IntentKind.CHIT_CHAT)
        self.assertIsNone(decision.tool_name)

    @patch("parley.agent.handlers.llm_intent.call_llm_with_format")
    async def test_history_window(self, llm_mock):
        # Verifies only the most recent records are sent, with agent mapped to assistant.
        llm_mock.return_value = None
        log = [
            _record(Role.USER, "one"),
            _record(Role.AGENT, "two"),
            _record(Role.SYSTEM, "three"),
            _record(Role.USER, "four"),
        ]

        await self.handler.handle("four", log, Idle())

        messages = llm_mock.call_args.args[1]
        self.assertEqual(
            messages[1:],
            [
                {"role": "assistant", "content": "two"},
                {"role": "system", "content": "three"},
                {"role": "user", "content": "four"},
            ],
        )
