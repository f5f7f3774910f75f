"""Protocol bridge: dispatch a decoded invocation request to a registered tool.

The bridge never raises. Every call produces exactly one
:class:`ResponseEnvelope` carrying the request id unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from fastmcp.utilities.logging import get_logger
from pydantic import ValidationError

from snowflake_mcp.exceptions import (
    BridgeError,
    InternalBridgeError,
    InvalidArgumentsError,
    MethodNotFoundError,
)
from snowflake_mcp.protocol.models import InvocationRequest, ResponseEnvelope
from snowflake_mcp.protocol.registry import ToolDescriptor, ToolRegistry

_logger = get_logger(__name__)

CALL_TOOL_METHODS: frozenset[str] = frozenset({"callTool", "tools/call"})


def _format_validation_error(exc: ValidationError) -> str:
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "arguments"
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


class ProtocolBridge:
    """Validates, dispatches and encodes tool invocations."""

    def __init__(
        self,
        registry: ToolRegistry,
        *,
        methods: Iterable[str] = CALL_TOOL_METHODS,
    ) -> None:
        self._registry = registry
        self._methods = frozenset(methods)

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def handle(self, request: InvocationRequest) -> ResponseEnvelope:
        """Produce the response envelope for one invocation request."""
        request_id = request.id

        if request.method not in self._methods:
            _logger.info("Unknown method %r (id=%r)", request.method, request_id)
            err = MethodNotFoundError("Method not found")
            return ResponseEnvelope.failure(request_id, err.code, err.message)

        try:
            descriptor, arguments = self._prepare(request)
            _logger.info("callTool %s (id=%r)", descriptor.name, request_id)
            result = await descriptor.handler(arguments)
        except BridgeError as exc:
            return ResponseEnvelope.failure(request_id, exc.code, exc.message or "Tool failed")
        except Exception:
            _logger.exception("Unhandled error while handling request id=%r", request_id)
            err = InternalBridgeError("Internal error")
            return ResponseEnvelope.failure(request_id, err.code, err.message)

        return ResponseEnvelope.success(request_id, result)

    def _prepare(self, request: InvocationRequest) -> tuple[ToolDescriptor, Any]:
        """Resolve the tool and validate its arguments."""
        params = request.params
        if params is None or not params.name:
            msg = "Invalid params: tool name is required"
            raise InvalidArgumentsError(msg)

        descriptor = self._registry.resolve(params.name)
        try:
            arguments = descriptor.arguments_model.model_validate(params.arguments)
        except ValidationError as exc:
            msg = f"Invalid arguments for tool {descriptor.name}: {_format_validation_error(exc)}"
            raise InvalidArgumentsError(msg) from exc
        return descriptor, arguments
