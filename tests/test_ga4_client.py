"""
Unit tests for the GA4 Data API client wrapper (clients/ga4_data.py).

The Data API async client is replaced by an AsyncMock returning real
proto-plus response messages, so request/response conversion is
exercised without network access.
"""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from google.analytics.data_v1beta import (
    RunRealtimeReportResponse,
    RunReportRequest,
    RunReportResponse,
)
from google.api_core import exceptions as google_exceptions

from clients import ga4_data
from clients.credentials import resolve_credentials
from clients.ga4_data import GA4DataClient, get_ga4_client, reset_ga4_client
from config import Config, GA4Config
from errors import ConfigError, UpstreamError


def make_descriptor(property_id="123456"):
    return resolve_credentials(GA4Config(
        property_id=property_id,
        credentials_json=None,
        client_email="reader@example.iam.gserviceaccount.com",
        private_key="unused",
        project_id=None,
    ))


@pytest.fixture
def api_client(report_response, realtime_response):
    """Mock BetaAnalyticsDataAsyncClient returning proto responses."""
    mock = MagicMock()
    mock.run_report = AsyncMock(
        return_value=RunReportResponse.from_json(
            json.dumps(report_response), ignore_unknown_fields=True
        )
    )
    mock.run_realtime_report = AsyncMock(
        return_value=RunRealtimeReportResponse.from_json(
            json.dumps(realtime_response), ignore_unknown_fields=True
        )
    )
    return mock


@pytest.fixture(autouse=True)
def fresh_client():
    """Clear the memoized process-wide client around each test."""
    reset_ga4_client()
    yield
    reset_ga4_client()


class TestGA4DataClient:
    """Tests for GA4DataClient."""

    def test_property_path(self, api_client):
        client = GA4DataClient(make_descriptor(), api_client=api_client)
        assert client.property == "properties/123456"

    def test_missing_property_id(self, api_client):
        with pytest.raises(ConfigError, match="missing property id"):
            GA4DataClient(make_descriptor(property_id=None), api_client=api_client)

    def test_project_id_reaches_credentials(self):
        descriptor = resolve_credentials(GA4Config(
            property_id="123456",
            credentials_json=None,
            client_email="reader@example.iam.gserviceaccount.com",
            private_key="unused",
            project_id="analytics-prod",
        ))

        with patch.object(
            ga4_data.service_account.Credentials, "from_service_account_info"
        ) as from_info, patch.object(ga4_data, "BetaAnalyticsDataAsyncClient") as api_cls:
            GA4DataClient(descriptor)

        info = from_info.call_args.args[0]
        assert info["project_id"] == "analytics-prod"
        assert info["client_email"] == "reader@example.iam.gserviceaccount.com"
        assert from_info.call_args.kwargs["scopes"] == GA4DataClient.SCOPES
        api_cls.assert_called_once_with(credentials=from_info.return_value)

    def test_invalid_private_key(self):
        with pytest.raises(ConfigError, match="invalid service account credentials"):
            GA4DataClient(make_descriptor())

    @pytest.mark.asyncio
    async def test_run_report_converts_request_and_response(self, api_client):
        client = GA4DataClient(make_descriptor(), api_client=api_client)

        result = await client.run_report({
            "property": "properties/123456",
            "dateRanges": [{"startDate": "7daysAgo", "endDate": "today"}],
            "dimensions": [{"name": "pagePath"}],
            "metrics": [{"name": "activeUsers"}],
            "limit": "100",
            "offset": "0",
            "returnPropertyQuota": True,
            "dimensionFilter": {"filter": {"fieldName": "country",
                                           "stringFilter": {"value": "Japan"}}},
        })

        sent = api_client.run_report.call_args.kwargs["request"]
        assert isinstance(sent, RunReportRequest)
        assert sent.property == "properties/123456"
        assert sent.limit == 100
        assert sent.date_ranges[0].start_date == "7daysAgo"
        assert sent.dimension_filter.filter.field_name == "country"

        assert result["dimensionHeaders"] == [{"name": "pagePath"}]
        assert result["rows"][0]["metricValues"][0]["value"] == "42"
        assert int(result["rowCount"]) == 5
        assert "propertyQuota" in result

    @pytest.mark.asyncio
    async def test_run_realtime_report(self, api_client):
        client = GA4DataClient(make_descriptor(), api_client=api_client)

        result = await client.run_realtime_report({
            "property": "properties/123456",
            "dimensions": [{"name": "country"}],
            "metrics": [{"name": "activeUsers"}],
            "limit": "10",
        })

        sent = api_client.run_realtime_report.call_args.kwargs["request"]
        assert sent.limit == 10
        assert len(result["rows"]) == 3

    @pytest.mark.asyncio
    async def test_api_error_is_wrapped(self, api_client):
        api_client.run_report.side_effect = google_exceptions.PermissionDenied(
            "User does not have sufficient permissions for this property."
        )
        client = GA4DataClient(make_descriptor(), api_client=api_client)

        with pytest.raises(UpstreamError, match="sufficient permissions") as exc_info:
            await client.run_report({"property": "properties/123456"})
        assert isinstance(exc_info.value.__cause__, google_exceptions.PermissionDenied)

    @pytest.mark.asyncio
    async def test_malformed_request_is_upstream_error(self, api_client):
        client = GA4DataClient(make_descriptor(), api_client=api_client)

        with pytest.raises(UpstreamError):
            await client.run_report({"property": "properties/123456", "dimensionFilter": {"bogus": 1}})
        api_client.run_report.assert_not_called()


class TestGetGA4Client:
    """Tests for the memoized process-wide client."""

    def test_not_configured(self):
        unconfigured = Config(ga4=GA4Config(
            property_id=None, credentials_json=None,
            client_email=None, private_key=None, project_id=None,
        ))
        with patch.object(ga4_data, "config", unconfigured):
            with pytest.raises(ConfigError, match="credentials not configured"):
                get_ga4_client()

    def test_memoized(self, api_client):
        configured = Config(ga4=GA4Config(
            property_id="123456", credentials_json=None,
            client_email="reader@example.iam.gserviceaccount.com",
            private_key="unused", project_id=None,
        ))

        def build(descriptor):
            return GA4DataClient(descriptor, api_client=api_client)

        with patch.object(ga4_data, "config", configured), \
                patch.object(ga4_data, "make_client", side_effect=build) as make_client:
            first = get_ga4_client()
            second = get_ga4_client()

        assert first is second
        make_client.assert_called_once()
