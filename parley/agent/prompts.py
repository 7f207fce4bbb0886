"""Named prompt templates with {{dotted.path}} substitution.

This is plain string substitution, not a template language: there are no
conditionals, loops or filters.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable

from parley.agent.errors import TemplateNotFoundError
from parley.agent.utils.json_utils import to_json_text


_PLACEHOLDER = re.compile(r"\{\{([^}]+)\}\}")
_MISSING = object()


@dataclass(frozen=True)
class PromptTemplate:
    """A named template string."""
    name: str
    template: str
    description: str | None = None


class PromptRenderer:
    """Registry of prompt templates and their renderer."""

    def __init__(self, templates: Iterable[PromptTemplate] | None = None) -> None:
        self._templates: dict[str, PromptTemplate] = {}
        if templates:
            self.add_templates(templates)

    def add_template(self, name: str, template: str, description: str | None = None) -> None:
        self._templates[name] = PromptTemplate(name=name, template=template, description=description)

    def add_templates(self, templates: Iterable[PromptTemplate]) -> None:
        for template in templates:
            self._templates[template.name] = template

    def template_names(self) -> list[str]:
        return list(self._templates)

    def remove_template(self, name: str) -> None:
        self._templates.pop(name, None)

    def render(self, name: str, variables: dict[str, Any] | None = None) -> str:
        """Render a template, leaving unresolved placeholders verbatim.

        Raises:
            TemplateNotFoundError: If no template is registered under `name`.
        """
        template = self._templates.get(name)
        if template is None:
            raise TemplateNotFoundError(name)

        if not variables:
            return template.template

        def _substitute(match: re.Match) -> str:
            value = _lookup(variables, match.group(1).strip())
            if value is _MISSING:
                return match.group(0)
            if isinstance(value, str):
                return value
            if isinstance(value, (dict, list, tuple, bool)) or value is None:
                return to_json_text(value)
            return str(value)

        return _PLACEHOLDER.sub(_substitute, template.template)


def _lookup(variables: dict[str, Any], path: str) -> Any:
    """Walk a dotted path through nested mappings and sequences.

    Digit keys index into lists and tuples. Returns _MISSING when any step is absent.
    """
    current: Any = variables
    for key in path.split("."):
        if isinstance(current, dict):
            if key not in current:
                return _MISSING
            current = current[key]
        elif isinstance(current, (list, tuple)) and key.isdecimal():
            index = int(key)
            if index >= len(current):
                return _MISSING
            current = current[index]
        else:
            return _MISSING
    return current
