"""Exception hierarchy for the snowflake-mcp protocol bridge.

Every error that can reach a caller maps to a stable JSON-RPC error code via the
class-level ``code`` attribute. The bridge converts these into error envelopes;
anything outside this hierarchy is treated as an internal error.

Exception Categories:
- Protocol errors detected before any tool dispatch
- Tool lookup and argument validation errors
- Tool execution errors (policy rejections and warehouse failures)
- Configuration errors raised at startup
"""

from __future__ import annotations

from typing import Any, ClassVar


class ErrorCode:
    """JSON-RPC error codes used by the bridge."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_ARGUMENTS = -32602
    INTERNAL_ERROR = -32603
    TOOL_EXECUTION_FAILED = -32000
    TOOL_NOT_FOUND = -32001


class BridgeError(Exception):
    """Base exception for errors surfaced to callers as error envelopes."""

    code: ClassVar[int] = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ProtocolError(BridgeError):
    """Raised when the inbound envelope itself is unusable."""


class ParseError(ProtocolError):
    """Raised when the request body is not valid JSON."""

    code = ErrorCode.PARSE_ERROR


class InvalidRequestError(ProtocolError):
    """Raised when the body is JSON but not a usable request envelope.

    Carries whatever request id could be read so it can still be echoed.
    """

    code = ErrorCode.INVALID_REQUEST

    def __init__(self, message: str, request_id: Any = None) -> None:
        super().__init__(message)
        self.request_id = request_id


class MethodNotFoundError(ProtocolError):
    """Raised when the envelope names a method the bridge does not serve."""

    code = ErrorCode.METHOD_NOT_FOUND


class ToolNotFoundError(BridgeError):
    """Raised when no tool is registered under the requested name."""

    code = ErrorCode.TOOL_NOT_FOUND


class InvalidArgumentsError(BridgeError):
    """Raised when tool arguments fail the tool's declared schema."""

    code = ErrorCode.INVALID_ARGUMENTS


class ToolExecutionError(BridgeError):
    """Raised by a tool handler when the tool ran but could not succeed."""

    code = ErrorCode.TOOL_EXECUTION_FAILED


class PolicyError(ToolExecutionError):
    """Raised when SQL is rejected by the statement safety filter."""


class BackendError(ToolExecutionError):
    """Raised when the warehouse fails to connect or to run a statement."""


class WarehouseConnectionError(BackendError):
    """Raised when a warehouse session cannot be opened."""


class QueryExecutionError(BackendError):
    """Raised when the warehouse rejects or fails a submitted statement."""


class InternalBridgeError(BridgeError):
    """Generic stand-in for unexpected failures caught at the bridge boundary."""

    code = ErrorCode.INTERNAL_ERROR


class ConfigurationError(ValueError):
    """Raised at startup when required configuration is missing or invalid."""
