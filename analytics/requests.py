"""
GA4 Data API request builders.

Build REST-shaped request bodies from validated tool arguments.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from registry.schemas import RealtimeInput, RunReportInput


def build_report_request(args: "RunReportInput", property_path: str) -> dict[str, Any]:
    """
    Build a RunReportRequest body.

    limit and offset are int64 fields, which the REST representation
    carries as strings.
    """
    request: dict[str, Any] = {
        "property": property_path,
        "dateRanges": [
            date_range.model_dump(by_alias=True, exclude_none=True)
            for date_range in args.date_ranges
        ],
        "dimensions": [{"name": name} for name in args.dimensions],
        "metrics": [{"name": name} for name in args.metrics],
        "limit": str(args.limit),
        "offset": str(args.offset),
        "returnPropertyQuota": args.include_quota,
    }

    if args.order_by_metric:
        request["orderBys"] = [{
            "metric": {"metricName": args.order_by_metric},
            "desc": args.order_descending,
        }]

    if args.filter_expression is not None:
        request["dimensionFilter"] = args.filter_expression

    return request


def build_realtime_request(args: "RealtimeInput", property_path: str) -> dict[str, Any]:
    """Build a RunRealtimeReportRequest body."""
    return {
        "property": property_path,
        "dimensions": [{"name": name} for name in args.dimensions],
        "metrics": [{"name": name} for name in args.metrics],
        "limit": str(args.limit),
    }
