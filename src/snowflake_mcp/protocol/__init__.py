"""Tool-invocation protocol: envelope models, tool registry, bridge and HTTP transport."""

from __future__ import annotations

from .bridge import CALL_TOOL_METHODS, ProtocolBridge
from .models import (
    CallToolParams,
    ErrorObject,
    InvocationRequest,
    ResponseEnvelope,
    TextContent,
    ToolResult,
)
from .registry import ToolDescriptor, ToolHandler, ToolRegistry
from .transport import create_app, decode_request, encode_event, event_stream_response

__all__ = [
    "CALL_TOOL_METHODS",
    "CallToolParams",
    "ErrorObject",
    "InvocationRequest",
    "ProtocolBridge",
    "ResponseEnvelope",
    "TextContent",
    "ToolDescriptor",
    "ToolHandler",
    "ToolRegistry",
    "ToolResult",
    "create_app",
    "decode_request",
    "encode_event",
    "event_stream_response",
]
