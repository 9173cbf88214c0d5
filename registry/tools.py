"""
GA4 Tool Registry.

Registers the two read-only GA4 tools with their definitions, input
models and handler implementations. Each tool has:
- name: Internal dotted key (ga4.run_report, ga4.realtime)
- public name: Advertised underscore form (ga4_run_report, ga4_realtime)
- title / description: Human-readable text for assistant clients
- input_model: Pydantic validator, exported as the tool's inputSchema
- handler: Async function that executes the tool

The tool table is built once when the registry is constructed and is
read-only afterwards.
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from clients.ga4_data import get_ga4_client
from errors import NotFoundError
from .base import ToolDefinition
from .schemas import RealtimeInput, RunReportInput
from .tool_handlers import handle_realtime, handle_run_report

logger = logging.getLogger(__name__)

__all__ = ["ToolDefinition", "ToolRegistry", "build_tool_definitions"]


def build_tool_definitions() -> list[ToolDefinition]:
    """Return the fixed set of GA4 tool definitions."""
    return [
        ToolDefinition(
            name="ga4.run_report",
            title="GA4 runReport",
            description=(
                "Run a GA4 Core report with dimensions, metrics and date ranges. "
                "Supports pagination (limit/offset), ordering by a metric, a "
                "dimension filter expression, and property quota reporting."
            ),
            input_model=RunReportInput,
            handler=handle_run_report,
            aliases=("runReport", "run_report"),
        ),
        ToolDefinition(
            name="ga4.realtime",
            title="GA4 realtime",
            description="Get realtime active users by dimension (last 30 minutes).",
            input_model=RealtimeInput,
            handler=handle_realtime,
            aliases=("runRealtime", "realtime", "ga4.run_realtime"),
        ),
    ]


def _lookup_key(name: str) -> str:
    return name.strip().casefold()


class ToolRegistry:
    """
    Central registry for the GA4 tools.

    Manages tool discovery, name aliasing and execution. Callers may use
    the internal dotted name, the advertised underscore name, or any
    declared alias; lookup ignores case and surrounding whitespace.

    Usage:
        registry = ToolRegistry()
        tools = registry.list_tools()
        result = await registry.execute_tool("ga4_realtime", {"limit": 5})
    """

    def __init__(
        self,
        client_factory: Optional[Callable[[], Any]] = None,
        tools: Optional[list[ToolDefinition]] = None
    ) -> None:
        """
        Initialize the registry and register all tools.

        Args:
            client_factory: Returns the GA4 client handle; called only after
                            arguments validate (defaults to get_ga4_client).
            tools: Tool definitions (defaults to the GA4 tool set).
        """
        self._client_factory = client_factory or get_ga4_client

        definitions: dict[str, ToolDefinition] = {}
        aliases: dict[str, str] = {}
        for tool in tools if tools is not None else build_tool_definitions():
            definitions[tool.name] = tool
            for alias in (tool.name, tool.public_name, *tool.aliases):
                aliases[_lookup_key(alias)] = tool.name
            logger.debug(f"Registered tool: {tool.name}")

        self._tools: Mapping[str, ToolDefinition] = MappingProxyType(definitions)
        self._aliases: Mapping[str, str] = MappingProxyType(aliases)

    @property
    def tools(self) -> Mapping[str, ToolDefinition]:
        return self._tools

    def list_tools(self) -> list[dict[str, Any]]:
        """Return enumeration entries for all registered tools."""
        return [tool.describe() for tool in self._tools.values()]

    def get_tool(self, name: str) -> Optional[ToolDefinition]:
        """Get a tool definition by any accepted name."""
        if not isinstance(name, str):
            return None
        key = self._aliases.get(_lookup_key(name))
        return self._tools.get(key) if key else None

    def resolve(self, name: str) -> ToolDefinition:
        """
        Resolve a tool by any accepted name.

        Raises:
            NotFoundError: If no tool matches
        """
        tool = self.get_tool(name)
        if tool is None:
            raise NotFoundError(f"unknown tool: {name}")
        return tool

    async def execute_tool(
        self,
        tool_name: str,
        input_data: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Execute a tool by name.

        Arguments are validated before the GA4 client is obtained, so a
        rejected call never reaches the remote API.

        Args:
            tool_name: Any accepted name of the tool
            input_data: Raw arguments from the request envelope

        Returns:
            The tool's result dict

        Raises:
            NotFoundError: Unknown tool
            ValidationError: Arguments rejected by the input model
            ConfigError: GA4 credentials or property id not configured
            UpstreamError: The GA4 call failed
        """
        tool = self.resolve(tool_name)
        args = tool.validate(input_data)
        client = self._client_factory()

        logger.info(f"Executing tool: {tool.name}")
        return await tool.handler(args, client)
