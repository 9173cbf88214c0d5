"""
Shared pytest fixtures for the gateway test suite.

Provides reusable fixtures for:
- Raw GA4 report/realtime responses
- A deterministic stub GA4 client that records every request
- A ToolRegistry and Dispatcher wired to the stub
"""

import copy

import pytest
from unittest.mock import MagicMock

from config import ProtocolConfig
from executor.execute import Dispatcher
from registry.tools import ToolRegistry


# =============================================================================
# GA4 Response Fixtures
# =============================================================================

REPORT_RESPONSE = {
    "dimensionHeaders": [{"name": "pagePath"}],
    "metricHeaders": [{"name": "activeUsers", "type": "TYPE_INTEGER"}],
    "rows": [
        {"dimensionValues": [{"value": "/"}], "metricValues": [{"value": "42"}]},
        {"dimensionValues": [{"value": "/blog"}], "metricValues": [{"value": "17"}]},
    ],
    "rowCount": 5,
    "propertyQuota": {
        "tokensPerDay": {"consumed": 3, "remaining": 24997},
        "tokensPerHour": {"consumed": 3, "remaining": 4997},
    },
    "kind": "analyticsData#runReport",
}

REALTIME_RESPONSE = {
    "dimensionHeaders": [{"name": "country"}],
    "metricHeaders": [{"name": "activeUsers", "type": "TYPE_INTEGER"}],
    "rows": [
        {"dimensionValues": [{"value": "United States"}], "metricValues": [{"value": "12"}]},
        {"dimensionValues": [{"value": "India"}], "metricValues": [{"value": "7"}]},
        {"dimensionValues": [{"value": "Germany"}], "metricValues": [{"value": "2"}]},
    ],
    "rowCount": 3,
    "kind": "analyticsData#runRealtimeReport",
}


@pytest.fixture
def report_response():
    """Raw runReport response: 2 rows returned out of 5 matching."""
    return copy.deepcopy(REPORT_RESPONSE)


@pytest.fixture
def realtime_response():
    """Raw runRealtimeReport response with 3 countries."""
    return copy.deepcopy(REALTIME_RESPONSE)


# =============================================================================
# Stub Client / Registry / Dispatcher Fixtures
# =============================================================================

class StubGA4Client:
    """Deterministic stand-in for GA4DataClient that records requests."""

    property = "properties/123456"

    def __init__(self, report_response=None, realtime_response=None, error=None):
        self.report_response = report_response or REPORT_RESPONSE
        self.realtime_response = realtime_response or REALTIME_RESPONSE
        self.error = error
        self.calls: list[tuple[str, dict]] = []

    async def run_report(self, request):
        self.calls.append(("run_report", request))
        if self.error:
            raise self.error
        return copy.deepcopy(self.report_response)

    async def run_realtime_report(self, request):
        self.calls.append(("run_realtime_report", request))
        if self.error:
            raise self.error
        return copy.deepcopy(self.realtime_response)


@pytest.fixture
def stub_client():
    """Fresh stub GA4 client."""
    return StubGA4Client()


@pytest.fixture
def client_factory(stub_client):
    """Client factory returning the stub; a MagicMock so calls can be counted."""
    return MagicMock(return_value=stub_client)


@pytest.fixture
def registry(client_factory):
    """ToolRegistry wired to the stub client."""
    return ToolRegistry(client_factory=client_factory)


@pytest.fixture
def protocol():
    """Fixed handshake settings, independent of the environment."""
    return ProtocolConfig(
        default_version="2024-11-05",
        server_name="ga4-mcp-gateway",
        server_version="1.0.0",
    )


@pytest.fixture
def dispatcher(registry, protocol):
    """Dispatcher over the stub-backed registry."""
    return Dispatcher(registry, protocol=protocol)


@pytest.fixture
def make_dispatcher(protocol):
    """Build a dispatcher over a new stub client, optionally failing every call."""
    def _make(error=None, factory=None):
        client = StubGA4Client(error=error)
        registry = ToolRegistry(client_factory=factory or (lambda: client))
        return Dispatcher(registry, protocol=protocol), client
    return _make
