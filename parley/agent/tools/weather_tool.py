"""Example tool: simulated weather lookup."""

from __future__ import annotations

import asyncio
import random
from typing import Any

from parley.agent.tools.base import Tool
from parley.agent.tools.schema import ParameterSchema, PropertySchema


class WeatherTool(Tool):
    """Return a made-up forecast for a city.

    Stands in for a real weather API: it waits `latency` seconds, then picks a
    random condition and temperature.
    """

    name = "weather"
    description = "Look up the weather for a given city"
    parameter_schema = ParameterSchema(
        properties={
            "city": PropertySchema(type="string", description='City name, e.g. "Beijing" or "Shanghai"'),
            "date": PropertySchema(
                type="string",
                description="Day to look up: today, tomorrow, day after tomorrow or YYYY-MM-DD. Defaults to today.",
            ),
        },
        required=["city"],
    )

    CONDITIONS = ["sunny", "cloudy", "overcast", "light rain", "heavy rain", "thunderstorms", "haze"]

    def __init__(self, latency: float = 0.5, rng: random.Random | None = None) -> None:
        self.latency = latency
        self._rng = rng or random.Random()

    async def invoke(self, args: dict[str, Any]) -> str:
        city = str(args["city"]).strip()
        date = str(args.get("date") or "today").strip()
        if self.latency > 0:
            await asyncio.sleep(self.latency)

        condition = self._rng.choice(self.CONDITIONS)
        temperature = self._rng.randint(5, 34)
        return f"Weather for {city} on {date}: {condition}, {temperature}°C"
