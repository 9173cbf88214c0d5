"""
Registry module initialization.

This module contains tool definitions, input schemas and handlers.
"""

from registry.tools import ToolRegistry, ToolDefinition
from registry.schemas import RunReportInput, RealtimeInput

__all__ = [
    "ToolRegistry",
    "ToolDefinition",
    "RunReportInput",
    "RealtimeInput",
]
