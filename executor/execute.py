"""
Request dispatcher for the gateway.

Takes one parsed envelope, plans it, runs the planned verb and returns
the response body together with the HTTP status to send.

Flow:
1. Plan the envelope (verb, framing, tool name, arguments)
2. Answer handshake and enumeration directly
3. For calls: resolve the tool, validate arguments, run the GA4 query
4. Wrap the payload or error to mirror the request's framing
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from config import ProtocolConfig, config
from errors import GatewayError, ValidationError
from executor.formatter import (
    INTERNAL_ERROR_CODE,
    INTERNAL_ERROR_MESSAGE,
    format_call_result,
    format_initialize,
    format_tool_list,
    wrap_error,
    wrap_result,
)
from executor.planner import CallPlan, EnvelopeMeta, MethodKind, create_plan
from registry.tools import ToolRegistry

logger = logging.getLogger(__name__)


@dataclass
class DispatchResponse:
    """Response body plus the HTTP status the transport should use."""

    body: dict[str, Any]
    status_code: int = 200


class Dispatcher:
    """
    Maps any supported client dialect onto the tool registry.

    Every error raised while handling a request is rendered as an error
    envelope; nothing propagates to the transport.

    Usage:
        dispatcher = Dispatcher(ToolRegistry())
        response = await dispatcher.dispatch({"method": "tools/list"})
    """

    def __init__(
        self,
        registry: ToolRegistry,
        protocol: Optional[ProtocolConfig] = None
    ) -> None:
        self.registry = registry
        self.protocol = protocol or config.protocol

    async def dispatch(self, envelope: Any) -> DispatchResponse:
        """
        Handle one request envelope.

        Args:
            envelope: Parsed JSON body; anything but an object is
                      handled as an empty envelope

        Returns:
            DispatchResponse with the framed body and HTTP status
        """
        if not isinstance(envelope, dict):
            envelope = {}

        meta = EnvelopeMeta.from_envelope(envelope)
        try:
            plan = create_plan(envelope)
            logger.info(f"Dispatch: method={plan.method!r} kind={plan.kind.value}")
            payload = await self._run(plan)
            return DispatchResponse(body=wrap_result(meta, payload))

        except GatewayError as e:
            logger.warning(f"{type(e).__name__}: {e.message}")
            status_code = 200 if meta.is_rpc else e.http_status
            return DispatchResponse(
                body=wrap_error(meta, e.code, e.message),
                status_code=status_code,
            )
        except Exception as e:
            logger.exception(f"Unexpected dispatch error: {e}")
            message = INTERNAL_ERROR_MESSAGE if meta.is_rpc else "Internal server error"
            return DispatchResponse(
                body=wrap_error(meta, INTERNAL_ERROR_CODE, message),
                status_code=500,
            )

    async def _run(self, plan: CallPlan) -> dict[str, Any]:
        if plan.kind == MethodKind.INITIALIZE:
            return format_initialize(
                protocol_version=plan.protocol_version or self.protocol.default_version,
                server_name=self.protocol.server_name,
                server_version=self.protocol.server_version,
            )

        if plan.kind == MethodKind.INITIALIZED:
            return {}

        if plan.kind == MethodKind.CALL:
            return await self._call_tool(plan)

        tools = self.registry.list_tools()
        if plan.kind == MethodKind.UNKNOWN:
            logger.info(f"Unrecognized method {plan.method!r}, returning tool list")
            return format_tool_list(tools, unrecognized_method=plan.method)
        return format_tool_list(tools)

    async def _call_tool(self, plan: CallPlan) -> dict[str, Any]:
        if plan.tool_name is None:
            raise ValidationError("Missing tool name")

        if not isinstance(plan.arguments, dict):
            raise ValidationError("Invalid arguments: expected a JSON object")

        result = await self.registry.execute_tool(plan.tool_name, plan.arguments)
        logger.info(f"Tool {plan.tool_name} returned {result.get('rowCount', 0)} rows")
        return format_call_result(result)
