"""
Executor module initialization.

This module contains the request planning, dispatch and response
formatting logic of the gateway.
"""

from executor.execute import Dispatcher, DispatchResponse
from executor.planner import CallPlan, MethodKind, create_plan

__all__ = [
    "Dispatcher",
    "DispatchResponse",
    "CallPlan",
    "MethodKind",
    "create_plan",
]
