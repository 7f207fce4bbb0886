from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Awaitable

from parley.agent.tools.schema import ParameterSchema


class Tool(ABC):
    """Abstract base class for all tools.

    Subclasses must define:
    - name: unique key the registry stores the tool under (str)
    - description: what the tool does, also used for heuristic matching (str)
    - parameter_schema: declared parameters, or None when the tool takes any arguments

    invoke() may be a plain method or a coroutine; the registry awaits it when needed.
    """

    name: str
    description: str
    parameter_schema: ParameterSchema | dict[str, Any] | None = None

    @abstractmethod
    def invoke(self, args: dict[str, Any]) -> str | Awaitable[str]:
        """Run the tool and return its text output."""
        raise NotImplementedError
