"""
GA4 Data API Client.

Provides service-account authenticated access to the Google Analytics
Data API (v1beta) for one GA4 property.

Requests and responses cross this boundary as REST-shaped (camelCase)
dicts, so request building and response shaping stay plain-data and can
be exercised without the network.
"""

import json
import logging
from typing import Any, Optional

from google.analytics.data_v1beta import (
    BetaAnalyticsDataAsyncClient,
    RunRealtimeReportRequest,
    RunReportRequest,
)
from google.oauth2 import service_account

from clients.credentials import ConnectionDescriptor, resolve_credentials
from config import config
from errors import ConfigError, UpstreamError

logger = logging.getLogger(__name__)


class GA4DataClient:
    """
    GA4 Data API client bound to a single property.

    Wraps BetaAnalyticsDataAsyncClient. Every failure raised by the remote
    call surfaces as UpstreamError carrying the original message.
    """

    SCOPES = ["https://www.googleapis.com/auth/analytics.readonly"]

    def __init__(
        self,
        descriptor: ConnectionDescriptor,
        api_client: Optional[BetaAnalyticsDataAsyncClient] = None
    ) -> None:
        """
        Initialize the GA4 client.

        Args:
            descriptor: Resolved connection descriptor.
            api_client: Optional pre-built Data API client (defaults to one
                        built from the descriptor's service account).

        Raises:
            ConfigError: If the property id is missing or the service
                         account cannot be loaded.
        """
        self.property = descriptor.property_path()
        self._api_client = api_client or self._build_api_client(descriptor)
        logger.info(f"GA4DataClient initialized for {self.property}")

    def _build_api_client(
        self, descriptor: ConnectionDescriptor
    ) -> BetaAnalyticsDataAsyncClient:
        try:
            credentials = service_account.Credentials.from_service_account_info(
                descriptor.service_account_info(),
                scopes=self.SCOPES,
            )
        except (ValueError, KeyError) as e:
            raise ConfigError(f"invalid service account credentials: {e}") from e

        return BetaAnalyticsDataAsyncClient(credentials=credentials)

    async def run_report(self, request: dict[str, Any]) -> dict[str, Any]:
        """
        Run a windowed GA4 report.

        Args:
            request: RunReportRequest body in REST (camelCase) form.

        Returns:
            RunReportResponse in REST (camelCase) form.

        Raises:
            UpstreamError: If the API request fails.
        """
        logger.info(
            f"Calling GA4 runReport: property={self.property}, "
            f"dimensions={len(request.get('dimensions', []))}, "
            f"metrics={len(request.get('metrics', []))}"
        )
        try:
            proto_request = RunReportRequest.from_json(json.dumps(request))
            response = await self._api_client.run_report(request=proto_request)
        except Exception as e:
            logger.error(f"GA4 runReport error: {e}")
            raise UpstreamError(str(e)) from e

        result = _to_rest_dict(response)
        logger.debug(f"GA4 runReport response received: {len(result.get('rows', []))} rows")
        return result

    async def run_realtime_report(self, request: dict[str, Any]) -> dict[str, Any]:
        """
        Run a GA4 realtime report.

        Args:
            request: RunRealtimeReportRequest body in REST (camelCase) form.

        Returns:
            RunRealtimeReportResponse in REST (camelCase) form.

        Raises:
            UpstreamError: If the API request fails.
        """
        logger.info(f"Calling GA4 runRealtimeReport: property={self.property}")
        try:
            proto_request = RunRealtimeReportRequest.from_json(json.dumps(request))
            response = await self._api_client.run_realtime_report(request=proto_request)
        except Exception as e:
            logger.error(f"GA4 runRealtimeReport error: {e}")
            raise UpstreamError(str(e)) from e

        result = _to_rest_dict(response)
        logger.debug(
            f"GA4 runRealtimeReport response received: {len(result.get('rows', []))} rows"
        )
        return result


def _to_rest_dict(response: Any) -> dict[str, Any]:
    """Convert a proto-plus response message to its camelCase JSON dict."""
    return json.loads(type(response).to_json(response))


def make_client(descriptor: ConnectionDescriptor) -> GA4DataClient:
    """Build a GA4 client from a resolved descriptor."""
    return GA4DataClient(descriptor)


# Process-wide handle, built on first tool call. Two overlapping first
# calls may both build one; the later assignment wins and both are usable.
_client: Optional[GA4DataClient] = None


def get_ga4_client() -> GA4DataClient:
    """
    Return the memoized GA4 client, building it on first use.

    Raises:
        ConfigError: If credentials or the property id are not configured.
    """
    global _client
    if _client is None:
        descriptor = resolve_credentials(config.ga4)
        _client = make_client(descriptor)
    return _client


def reset_ga4_client() -> None:
    """Drop the memoized client so the next call rebuilds it."""
    global _client
    _client = None
