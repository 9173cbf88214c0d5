"""
Base classes for the GA4 Tool Registry.

Defines the core data structure used across all tool modules:
- ToolDefinition: Tool specification with input model and handler
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from errors import ValidationError
from registry.schemas import tool_input_schema

logger = logging.getLogger(__name__)


def _format_validation_error(tool_name: str, error: PydanticValidationError) -> str:
    problems = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ())) or "arguments"
        problems.append(f"{location}: {detail.get('msg', 'invalid value')}")
    return f"Invalid arguments for {tool_name}: " + "; ".join(problems)


@dataclass(frozen=True)
class ToolDefinition:
    """
    Definition of a gateway tool.

    Attributes:
        name: Internal registry key, dotted namespace (e.g. "ga4.run_report")
        title: Short human-readable title
        description: Human-readable description
        input_model: Pydantic model validating and defaulting arguments
        handler: Async function (validated args, client) -> result dict
        aliases: Extra names callers may use for this tool
    """

    name: str
    title: str
    description: str
    input_model: type[BaseModel]
    handler: Callable[[Any, Any], Awaitable[dict[str, Any]]]
    aliases: tuple[str, ...] = field(default_factory=tuple)

    @property
    def public_name(self) -> str:
        """Advertised name; many assistant clients reject dots in tool names."""
        return self.name.replace(".", "_")

    @property
    def input_schema(self) -> dict[str, Any]:
        return tool_input_schema(self.input_model)

    def validate(self, arguments: dict[str, Any]) -> BaseModel:
        """
        Validate raw arguments and apply defaults.

        Raises:
            ValidationError: Naming every offending field
        """
        try:
            return self.input_model.model_validate(arguments)
        except PydanticValidationError as e:
            message = _format_validation_error(self.public_name, e)
            logger.warning(message)
            raise ValidationError(message) from e

    def describe(self) -> dict[str, Any]:
        """Enumeration entry for this tool."""
        return {
            "name": self.public_name,
            "title": self.title,
            "description": self.description,
            "inputSchema": self.input_schema,
            "annotations": {"readOnlyHint": True},
        }
