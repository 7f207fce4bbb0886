"""Error taxonomy for the agent core.

None of these escape Agent.handle_turn(); they are raised below the agent and
mapped onto outcomes, diagnostic events or fallback replies.
"""

from __future__ import annotations


class ParleyError(Exception):
    """Base class for all parley errors."""


class ToolNotFoundError(ParleyError):
    """Raised when a requested tool is not registered."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"tool {tool_name} not found")


class MissingRequiredParametersError(ParleyError):
    """Raised when a tool call lacks required parameters.

    Recoverable: the agent waits for the first missing name and resumes the call
    on the next turn.
    """

    def __init__(self, tool_name: str, missing_params: list[str]) -> None:
        self.tool_name = tool_name
        self.missing_params = list(missing_params)
        super().__init__("missing required parameters")


class ToolExecutionError(ParleyError):
    """Raised when a tool's own invocation fails."""

    def __init__(self, tool_name: str, message: str | None = None) -> None:
        self.tool_name = tool_name
        super().__init__(message or "unknown error")


class HandlerFailure(ParleyError):
    """An intent handler raised while the resolver was evaluating it."""

    def __init__(self, handler_name: str, cause: BaseException) -> None:
        self.handler_name = handler_name
        self.cause = cause
        super().__init__(f"intent handler {handler_name} failed: {cause}")


class TemplateNotFoundError(ParleyError, KeyError):
    """Raised when rendering a template name that was never registered."""

    def __init__(self, template_name: str) -> None:
        self.template_name = template_name
        super().__init__(f'prompt template "{template_name}" does not exist')

    def __str__(self) -> str:
        return self.args[0]
