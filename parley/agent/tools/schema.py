"""Parameter schemas for tools: a restricted JSON-Schema subset."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PropertySchema(BaseModel):
    """Declaration of a single tool parameter.

    Only presence of required keys is enforced at invocation time; the remaining
    fields describe the parameter to humans and to LLM-backed handlers.
    """
    model_config = ConfigDict(extra="allow")

    type: str | list[str] | None = None
    description: str | None = None
    enum: list[Any] | None = None
    minimum: float | None = None
    maximum: float | None = None
    pattern: str | None = None


class ParameterSchema(BaseModel):
    """Object schema for a tool's arguments."""
    model_config = ConfigDict(extra="allow")

    type: str | list[str] = "object"
    description: str | None = None
    properties: dict[str, PropertySchema] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)

    def missing_from(self, args: dict[str, Any]) -> list[str]:
        """Return every required name absent from `args`, in declaration order."""
        return [name for name in self.required if name not in args]
