"""
Pydantic schemas for the GA4 MCP gateway.

Defines tool input models (the validators behind each tool's
inputSchema) and the HTTP response models of the service endpoints.
"""

import copy
from typing import Any, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Service Response Schemas
# =============================================================================

class HealthResponse(BaseModel):
    """Response schema for health check endpoint."""

    status: str = Field(
        ...,
        description="Server health status"
    )

    version: str = Field(
        ...,
        description="API version"
    )

    property_configured: bool = Field(
        ...,
        description="Whether GA4_PROPERTY_ID is set"
    )


# =============================================================================
# Tool Input Schemas
# =============================================================================

class ToolInputBase(BaseModel):
    """
    Base schema for tool inputs.

    Fields are published under their camelCase alias; the snake_case
    field name is accepted too. Unknown keys are dropped. Integer and
    boolean fields are strict: "50", 5.0 and true are not integers, and
    "yes" or 1 is not a boolean.
    """

    class Config:
        populate_by_name = True
        extra = "ignore"


class DateRange(ToolInputBase):
    """A GA4 date range. Dates are YYYY-MM-DD or relative (today, 7daysAgo)."""

    start_date: str = Field(
        ...,
        alias="startDate",
        description="Inclusive start date, e.g. 2024-01-01 or 30daysAgo"
    )

    end_date: str = Field(
        ...,
        alias="endDate",
        description="Inclusive end date, e.g. 2024-01-31 or today"
    )


def _default_date_ranges() -> list[DateRange]:
    return [DateRange(startDate="7daysAgo", endDate="today")]


class RunReportInput(ToolInputBase):
    """Input schema for the windowed GA4 report tool."""

    date_ranges: list[DateRange] = Field(
        default_factory=_default_date_ranges,
        alias="dateRanges",
        description="Date ranges to report on (default: 7daysAgo through today)"
    )

    dimensions: list[str] = Field(
        default_factory=lambda: ["pagePath"],
        description="GA4 dimension names (default: pagePath)"
    )

    metrics: list[str] = Field(
        default_factory=lambda: ["activeUsers"],
        description="GA4 metric names (default: activeUsers)"
    )

    limit: int = Field(
        default=100,
        ge=1,
        le=10000,
        strict=True,
        description="Maximum rows to return, 1-10000 (default: 100)"
    )

    offset: int = Field(
        default=0,
        ge=0,
        strict=True,
        description="Row offset for pagination (default: 0)"
    )

    order_by_metric: Optional[str] = Field(
        default=None,
        alias="orderByMetric",
        description="Metric name to sort rows by"
    )

    order_descending: bool = Field(
        default=True,
        alias="orderDescending",
        strict=True,
        description="Sort descending when orderByMetric is set (default: true)"
    )

    filter_expression: Optional[dict[str, Any]] = Field(
        default=None,
        alias="filterExpression",
        description="GA4 FilterExpression applied as the dimension filter, passed through as-is"
    )

    include_quota: bool = Field(
        default=True,
        alias="includeQuota",
        strict=True,
        description="Return property quota usage (default: true)"
    )


class RealtimeInput(ToolInputBase):
    """Input schema for the GA4 realtime tool."""

    dimensions: list[str] = Field(
        default_factory=lambda: ["country"],
        description="GA4 realtime dimension names (default: country)"
    )

    metrics: list[str] = Field(
        default_factory=lambda: ["activeUsers"],
        description="GA4 realtime metric names (default: activeUsers)"
    )

    limit: int = Field(
        default=100,
        ge=1,
        le=10000,
        strict=True,
        description="Maximum rows to return, 1-10000 (default: 100)"
    )


# =============================================================================
# JSON Schema Export
# =============================================================================

def _inline_refs(node: Any, defs: dict[str, Any]) -> Any:
    """Replace local $ref pointers with the referenced definition."""
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str) and ref.startswith("#/$defs/"):
            target = copy.deepcopy(defs[ref.split("/")[-1]])
            return _inline_refs(target, defs)
        return {key: _inline_refs(value, defs) for key, value in node.items()}
    if isinstance(node, list):
        return [_inline_refs(item, defs) for item in node]
    return node


def tool_input_schema(model: type[BaseModel]) -> dict[str, Any]:
    """
    Export a tool input model as a self-contained JSON Schema.

    Some assistant clients do not resolve $ref, so nested models are
    inlined and $defs is dropped.
    """
    schema = model.model_json_schema(by_alias=True)
    defs = schema.pop("$defs", {})
    schema = _inline_refs(schema, defs)
    schema.setdefault("required", [])
    schema["type"] = "object"
    return schema
