"""
Response formatter for gateway outputs.

Builds the protocol payloads (handshake, enumeration, call results) and
wraps them in the response envelope matching the request's framing.
"""

from typing import Any, Optional

from executor.planner import EnvelopeMeta

# Both capability spellings are advertised; clients read whichever they know
CAPABILITIES: dict[str, Any] = {
    "tools": {"list": True, "call": True, "listChanged": False},
    "actions": {"list": True, "call": True},
}

INTERNAL_ERROR_CODE = -32603
INTERNAL_ERROR_MESSAGE = "Internal error"


def format_initialize(
    protocol_version: str,
    server_name: str,
    server_version: str
) -> dict[str, Any]:
    """Handshake acknowledgment."""
    return {
        "protocolVersion": protocol_version,
        "capabilities": CAPABILITIES,
        "serverInfo": {"name": server_name, "version": server_version},
    }


def format_tool_list(
    tools: list[dict[str, Any]],
    unrecognized_method: Optional[Any] = None
) -> dict[str, Any]:
    """
    Enumeration result.

    The same entries are listed under "tools" and "actions" so either
    client dialect finds its expected field.
    """
    payload: dict[str, Any] = {
        "tools": tools,
        "actions": [dict(tool) for tool in tools],
    }
    if unrecognized_method is not None:
        payload["unrecognizedMethod"] = unrecognized_method
    return payload


def format_call_result(result: dict[str, Any]) -> dict[str, Any]:
    """Wrap a tool's structured result with a short text summary."""
    return {
        "content": [{"type": "text", "text": f"Returned {result.get('rowCount', 0)} rows."}],
        "structuredContent": result,
        "isError": False,
    }


def wrap_result(meta: EnvelopeMeta, payload: dict[str, Any]) -> dict[str, Any]:
    """Success envelope: JSON-RPC framed or bare, mirroring the request."""
    if meta.is_rpc:
        return {"jsonrpc": meta.jsonrpc, "id": meta.id, "result": payload}
    return payload


def wrap_error(meta: EnvelopeMeta, code: int, message: str) -> dict[str, Any]:
    """Error envelope: JSON-RPC framed or bare, mirroring the request."""
    if meta.is_rpc:
        return {
            "jsonrpc": meta.jsonrpc,
            "id": meta.id,
            "error": {"code": code, "message": message},
        }
    return {"error": message}
