"""
GA4 API Clients.

Provides service-account authenticated access to the GA4 Data API.
"""

from .credentials import ConnectionDescriptor, resolve_credentials, property_path
from .ga4_data import GA4DataClient, get_ga4_client, make_client

__all__ = [
    "ConnectionDescriptor",
    "resolve_credentials",
    "property_path",
    "GA4DataClient",
    "get_ga4_client",
    "make_client",
]
