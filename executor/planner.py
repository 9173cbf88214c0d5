"""
Request planner for the gateway.

Turns one incoming envelope into a CallPlan: which protocol verb the
client meant, which tool it named and with what arguments. Clients
spell the same call in several dialects (method names, argument
locations, JSON-RPC or not); planning is rule-based and never calls a
tool or raises for an unrecognized method.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)


class MethodKind(str, Enum):
    """Protocol verbs the dispatcher understands."""

    INITIALIZE = "initialize"
    INITIALIZED = "initialized"
    LIST = "list"
    CALL = "call"
    UNKNOWN = "unknown"


# Handshake methods are matched before normalization
INITIALIZE_METHOD = "initialize"
INITIALIZED_METHOD = "notifications/initialized"

# Post-normalization spellings (casefolded, "." replaced by "/")
LIST_METHODS: frozenset[str] = frozenset({
    "",
    "tools/list",
    "actions/list",
    "list",
    "get/actions",
})

CALL_METHODS: frozenset[str] = frozenset({
    "tools/call",
    "actions/call",
    "call",
    "invoke",
})

# Lookup order for the tool name and its arguments
NAME_LOCATIONS: tuple[tuple[str, ...], ...] = (
    ("name",),
    ("tool_name",),
    ("params", "name"),
    ("params", "tool_name"),
)

ARGUMENT_LOCATIONS: tuple[tuple[str, ...], ...] = (
    ("arguments",),
    ("params", "arguments"),
    ("args",),
)


@dataclass(frozen=True)
class EnvelopeMeta:
    """
    JSON-RPC framing of a request, mirrored onto its response.

    A request is JSON-RPC framed when it carries a string "jsonrpc"
    field or an "id" key.
    """

    is_rpc: bool = False
    jsonrpc: str = "2.0"
    id: Any = None

    @classmethod
    def from_envelope(cls, envelope: dict[str, Any]) -> "EnvelopeMeta":
        version = envelope.get("jsonrpc")
        has_version = isinstance(version, str)
        if not has_version and "id" not in envelope:
            return cls()
        return cls(
            is_rpc=True,
            jsonrpc=version if has_version else "2.0",
            id=envelope.get("id"),
        )


@dataclass
class CallPlan:
    """A planned response to one envelope."""

    kind: MethodKind
    method: Any = None
    meta: EnvelopeMeta = field(default_factory=EnvelopeMeta)
    tool_name: Optional[str] = None
    arguments: Any = None
    protocol_version: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert plan to dictionary representation."""
        return {
            "kind": self.kind.value,
            "method": self.method,
            "rpc": self.meta.is_rpc,
            "tool": self.tool_name,
        }


def normalize_method(method: Any) -> str:
    """
    Normalize a raw method name for verb matching.

    Casefolds, trims whitespace and treats "." as the "/" namespace
    separator. A missing or non-string method normalizes to "".
    """
    if not isinstance(method, str):
        return ""
    return method.strip().casefold().replace(".", "/")


def classify_method(method: Any) -> MethodKind:
    """Map a raw method name onto a protocol verb."""
    if method == INITIALIZE_METHOD:
        return MethodKind.INITIALIZE
    if method == INITIALIZED_METHOD:
        return MethodKind.INITIALIZED

    normalized = normalize_method(method)
    if normalized in LIST_METHODS:
        return MethodKind.LIST
    if normalized in CALL_METHODS:
        return MethodKind.CALL
    return MethodKind.UNKNOWN


def _lookup(envelope: dict[str, Any], path: tuple[str, ...]) -> Any:
    node: Any = envelope
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def resolve_tool_name(envelope: dict[str, Any]) -> Optional[str]:
    """Return the first non-empty tool name, in NAME_LOCATIONS order."""
    for path in NAME_LOCATIONS:
        value = _lookup(envelope, path)
        if isinstance(value, str) and value.strip():
            return value
    return None


def resolve_arguments(envelope: dict[str, Any]) -> Any:
    """Return the first present arguments value, defaulting to {}."""
    for path in ARGUMENT_LOCATIONS:
        value = _lookup(envelope, path)
        if value is not None:
            return value
    return {}


def _requested_protocol_version(envelope: dict[str, Any]) -> Optional[str]:
    version = _lookup(envelope, ("params", "protocolVersion"))
    if isinstance(version, str) and version.strip():
        return version
    return None


def create_plan(envelope: dict[str, Any]) -> CallPlan:
    """
    Plan the response to one envelope.

    Args:
        envelope: Parsed request body (any dialect)

    Returns:
        CallPlan describing the verb and, for calls, tool and arguments
    """
    method = envelope.get("method")
    plan = CallPlan(
        kind=classify_method(method),
        method=method,
        meta=EnvelopeMeta.from_envelope(envelope),
    )

    if plan.kind == MethodKind.INITIALIZE:
        plan.protocol_version = _requested_protocol_version(envelope)
    elif plan.kind == MethodKind.CALL:
        plan.tool_name = resolve_tool_name(envelope)
        plan.arguments = resolve_arguments(envelope)

    logger.debug(f"Plan: {plan.to_dict()}")
    return plan
