"""
ga4.realtime tool.

Fetches a snapshot of current activity from the GA4 realtime API.
"""

import logging
from typing import Any

from analytics.normalizer import normalize_realtime_response
from analytics.requests import build_realtime_request
from registry.schemas import RealtimeInput

logger = logging.getLogger(__name__)


async def handle_realtime(args: RealtimeInput, client: Any) -> dict[str, Any]:
    """Handle the ga4.realtime tool execution."""
    request = build_realtime_request(args, client.property)
    logger.info(f"Running realtime report: dimensions={args.dimensions} metrics={args.metrics}")

    response = await client.run_realtime_report(request)
    return normalize_realtime_response(response)
