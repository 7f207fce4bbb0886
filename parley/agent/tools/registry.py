from __future__ import annotations

import inspect
from typing import Any

from pydantic import ValidationError

from parley.agent.errors import MissingRequiredParametersError, ToolExecutionError, ToolNotFoundError
from parley.agent.tools.base import Tool
from parley.agent.tools.schema import ParameterSchema
from parley.agent.types import ExecutionOutcome
from parley.agent.utils.logging import get_logger


logger = get_logger("parley")


class ToolRegistry:
    """Registry and execution wrapper for tools.

    invoke() never raises: unknown tools, missing parameters and tool failures
    all come back as a failed ExecutionOutcome.
    """

    def __init__(self, tools: list[Tool] | None = None) -> None:
        self._tools: dict[str, Tool] = {}
        self._schemas: dict[str, ParameterSchema | None] = {}
        if tools:
            for tool in tools:
                self.register(tool)

    def register(self, tool: Tool) -> None:
        """Register a tool instance by name."""
        if tool.name in self._tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self._schemas[tool.name] = self._coerce_schema(tool)
        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def unregister(self, name: str) -> None:
        """Remove a tool; unknown names are ignored."""
        self._tools.pop(name, None)
        self._schemas.pop(name, None)

    def get_tool(self, name: str) -> Tool | None:
        """Fetch a tool by name."""
        return self._tools.get(name)

    def schema_of(self, name: str) -> ParameterSchema | None:
        """Declared parameter schema of a tool, or None if unknown or undeclared."""
        return self._schemas.get(name)

    def list_all(self) -> list[Tool]:
        """All registered tools, in registration order."""
        return list(self._tools.values())

    async def invoke(self, name: str, args: dict[str, Any] | None = None) -> ExecutionOutcome:
        """Validate and run a tool, mapping every failure onto the outcome."""
        args = args or {}
        try:
            text = await self._run(name, args)
        except ToolNotFoundError as exc:
            logger.warning(f"tool={name} event=not_found")
            return ExecutionOutcome.failure(str(exc))
        except MissingRequiredParametersError as exc:
            logger.info(f"tool={name} event=missing_params params={exc.missing_params}")
            return ExecutionOutcome.failure(str(exc), exc.missing_params)
        except ToolExecutionError as exc:
            logger.error(f"tool={name} event=execution_failed error={exc}")
            return ExecutionOutcome.failure(str(exc))

        logger.info(f"tool={name} event=completed")
        return ExecutionOutcome.success(text)

    async def _run(self, name: str, args: dict[str, Any]) -> str:
        tool = self.get_tool(name)
        if tool is None:
            raise ToolNotFoundError(name)

        schema = self._schemas.get(name)
        if schema is not None:
            missing = schema.missing_from(args)
            if missing:
                raise MissingRequiredParametersError(name, missing)

        try:
            result = tool.invoke(args)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            raise ToolExecutionError(name, str(exc)) from exc
        return "" if result is None else str(result)

    @staticmethod
    def _coerce_schema(tool: Tool) -> ParameterSchema | None:
        schema = tool.parameter_schema
        if schema is None or isinstance(schema, ParameterSchema):
            return schema
        try:
            return ParameterSchema.model_validate(schema)
        except ValidationError as exc:
            raise ValueError(f"Invalid parameter schema for tool {tool.name}: {exc}") from exc
