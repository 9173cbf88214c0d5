"""
ga4.run_report tool.

Runs a windowed GA4 Core report and flattens the response into
headers + rows.
"""

import logging
from typing import Any

from analytics.normalizer import normalize_report_response
from analytics.requests import build_report_request
from registry.schemas import RunReportInput

logger = logging.getLogger(__name__)


async def handle_run_report(args: RunReportInput, client: Any) -> dict[str, Any]:
    """
    Handle the ga4.run_report tool execution.

    Args:
        args: Validated report arguments (defaults applied).
        client: GA4 client exposing async run_report(request) -> dict.

    Returns:
        Dict with headers, rows, rowCount, sampled and quota.

    Raises:
        UpstreamError: If the GA4 call fails.
    """
    request = build_report_request(args, client.property)
    logger.info(
        f"Running report: dimensions={args.dimensions} metrics={args.metrics} "
        f"limit={args.limit} offset={args.offset}"
    )

    response = await client.run_report(request)
    return normalize_report_response(response, include_quota=args.include_quota)
