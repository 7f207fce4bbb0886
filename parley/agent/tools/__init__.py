from parley.agent.tools.base import Tool
from parley.agent.tools.schema import ParameterSchema, PropertySchema
from parley.agent.tools.registry import ToolRegistry
from parley.agent.tools.weather_tool import WeatherTool

__all__ = [
    "Tool",
    "ParameterSchema",
    "PropertySchema",
    "ToolRegistry",
    "WeatherTool",
]
