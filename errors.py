"""
Error taxonomy for the gateway.

Every error raised on purpose by the dispatch path derives from
GatewayError and carries the JSON-RPC error code and the HTTP status used
when the response is not JSON-RPC wrapped.
"""


class GatewayError(Exception):
    """Base class for errors rendered as an error envelope."""

    code: int = -32000
    http_status: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigError(GatewayError):
    """Missing or malformed credentials or property id."""

    code = -32002
    http_status = 503


class ValidationError(GatewayError):
    """Tool arguments violate the schema, or the tool name is missing."""

    code = -32602
    http_status = 400


class NotFoundError(GatewayError):
    """No registered tool matches the requested name."""

    code = -32601
    http_status = 404


class UpstreamError(GatewayError):
    """The GA4 Data API call failed (network, auth, quota, bad request)."""

    code = -32000
    http_status = 502
