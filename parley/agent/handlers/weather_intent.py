"""Example intent handler: keyword-based weather request detection."""

from __future__ import annotations

import re

from parley.agent.intents.base import IntentHandler
from parley.agent.states.base import State
from parley.agent.types import IntentDecision, IntentKind, Role, TurnRecord


WEATHER_KEYWORDS = ("weather", "temperature", "forecast", "rain", "sunny", "cloudy", "overcast")
KNOWN_CITIES = (
    "Beijing", "Shanghai", "Guangzhou", "Shenzhen", "Hangzhou",
    "Nanjing", "Chengdu", "Chongqing", "Wuhan", "Xi'an",
)
RELATIVE_DAYS = ("day after tomorrow", "tomorrow", "today")
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_FOLLOW_UP = re.compile(
    r"^(?:and |what about |how about )?"
    r"(today|tomorrow|the day after tomorrow|day after tomorrow|"
    r"monday|tuesday|wednesday|thursday|friday|saturday|sunday|the weekend)\s*\??$"
)
_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")
_PREVIOUS_CITY = re.compile(r"Tool weather result: Weather for (.+?) on ")


class WeatherIntentHandler(IntentHandler):
    """Detect weather questions and extract city and date.

    Confidence starts at 0.7 for a weather keyword, +0.2 when a known city is
    named and +0.05 when a date is given. Short follow-ups such as "what about
    tomorrow?" reuse the city of the last weather result in the log.
    """

    tool_name = "weather"

    async def handle(self, text: str, log: list[TurnRecord], state: State) -> IntentDecision | None:
        lowered = text.strip().lower()

        if self._is_follow_up(lowered, log):
            previous_city = self._find_previous_city(log)
            if previous_city:
                parameters = {"city": previous_city}
                date = self._extract_date(text)
                if date:
                    parameters["date"] = date
                return IntentDecision(
                    kind=IntentKind.CALL_TOOL,
                    tool_name=self.tool_name,
                    parameters=parameters,
                    confidence=0.85,
                )

        if not any(keyword in lowered for keyword in WEATHER_KEYWORDS):
            return None

        confidence = 0.7
        parameters: dict[str, str] = {}

        city = self._extract_city(text)
        if city:
            parameters["city"] = city
            confidence += 0.2

        date = self._extract_date(text)
        if date:
            parameters["date"] = date
            confidence += 0.05

        return IntentDecision(
            kind=IntentKind.CALL_TOOL,
            tool_name=self.tool_name,
            parameters=parameters,
            confidence=round(confidence, 2),
        )

    @staticmethod
    def _is_follow_up(lowered: str, log: list[TurnRecord]) -> bool:
        if not _FOLLOW_UP.match(lowered):
            return False
        return any(record.role == Role.SYSTEM and "weather" in record.content.lower() for record in log)

    @staticmethod
    def _find_previous_city(log: list[TurnRecord]) -> str | None:
        for record in reversed(log):
            if record.role != Role.SYSTEM:
                continue
            match = _PREVIOUS_CITY.search(record.content)
            if match:
                return match.group(1).strip()
        return None

    @staticmethod
    def _extract_city(text: str) -> str | None:
        lowered = text.lower()
        for city in KNOWN_CITIES:
            if city.lower() in lowered:
                return city
        return None

    @staticmethod
    def _extract_date(text: str) -> str | None:
        lowered = text.lower()
        for day in RELATIVE_DAYS + WEEKDAYS:
            if day in lowered:
                return day
        match = _ISO_DATE.search(text)
        return match.group(0) if match else None
