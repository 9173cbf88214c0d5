"""
Analytics module for the GA4 gateway.

Provides GA4 request building and response normalization.
"""

from .normalizer import (
    build_headers,
    build_rows,
    normalize_realtime_response,
    normalize_report_response,
)
from .requests import build_realtime_request, build_report_request

__all__ = [
    "build_headers",
    "build_rows",
    "normalize_realtime_response",
    "normalize_report_response",
    "build_realtime_request",
    "build_report_request",
]
