"""
GA4 Tool Handlers Module.

Contains individual tool handler implementations for the registry.
"""

from .run_report import handle_run_report
from .realtime import handle_realtime

__all__ = ["handle_run_report", "handle_realtime"]
