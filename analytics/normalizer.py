"""
GA4 Data API Response Normalizer.

Converts raw GA4 report responses (REST camelCase form) into the flat
headers + rows result returned to tool callers.
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)


def build_headers(response: dict[str, Any]) -> list[dict[str, str]]:
    """
    Build the header list: dimension headers then metric headers.

    Order is the order the server returned them in, not the order
    the caller requested.

    Example return value:
        [
            {"type": "dimension", "name": "country"},
            {"type": "metric", "name": "activeUsers"}
        ]
    """
    dimension_headers = response.get("dimensionHeaders") or []
    metric_headers = response.get("metricHeaders") or []

    return [
        {"type": "dimension", "name": header.get("name", "")}
        for header in dimension_headers
    ] + [
        {"type": "metric", "name": header.get("name", "")}
        for header in metric_headers
    ]


def build_rows(response: dict[str, Any]) -> list[list[str]]:
    """
    Flatten each row into dimension values followed by metric values.

    Values are already strings on the wire; str() keeps that format for
    any value that arrives otherwise.
    """
    rows = []
    for row in response.get("rows") or []:
        values = (row.get("dimensionValues") or []) + (row.get("metricValues") or [])
        rows.append([str(value.get("value", "")) for value in values])
    return rows


def normalize_report_response(
    response: dict[str, Any],
    include_quota: bool = True
) -> dict[str, Any]:
    """
    Normalize a runReport response.

    Args:
        response: Raw RunReportResponse dict.
        include_quota: Whether to carry the property quota through.

    Returns:
        Dictionary with headers, rows, rowCount, sampled and quota.
    """
    headers = build_headers(response)
    rows = build_rows(response)

    # The server's rowCount is the total matching rows, not this page
    total = response.get("rowCount")
    sampled = total is not None and int(total) > len(rows)

    quota = response.get("propertyQuota") if include_quota else None

    logger.info(f"Normalized report: {len(rows)} rows, sampled={sampled}")

    return {
        "headers": headers,
        "rows": rows,
        "rowCount": len(rows),
        "sampled": sampled,
        "quota": quota or None,
    }


def normalize_realtime_response(response: dict[str, Any]) -> dict[str, Any]:
    """
    Normalize a runRealtimeReport response.

    Returns:
        Dictionary with headers, rows and rowCount.
    """
    rows = build_rows(response)
    logger.info(f"Normalized realtime report: {len(rows)} rows")
    return {
        "headers": build_headers(response),
        "rows": rows,
        "rowCount": len(rows),
    }
