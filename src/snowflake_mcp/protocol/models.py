"""Typed Pydantic models for the tool-invocation envelope.

Requests follow the JSON-RPC shape ``{jsonrpc, id, method, params}``; responses
are either a result or an error envelope, never both.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr, model_validator

JSONRPC_VERSION = "2.0"


class CallToolParams(BaseModel):
    """Parameters of a tool invocation: tool name and untyped arguments."""

    name: StrictStr | None = Field(default=None, description="Registered tool name")
    arguments: dict[str, Any] = Field(
        default_factory=dict, description="Tool arguments, validated later per tool"
    )


class InvocationRequest(BaseModel):
    """Decoded inbound request envelope."""

    model_config = ConfigDict(extra="ignore")

    jsonrpc: Any = Field(default=None, description="Protocol version marker")
    id: Any = Field(default=None, description="Opaque request id, echoed unchanged")
    method: StrictStr = Field(description="Protocol method name")
    params: CallToolParams | None = Field(default=None, description="Tool call parameters")


class TextContent(BaseModel):
    """A text content block inside a tool result."""

    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Result of a successful tool invocation."""

    content: list[TextContent] = Field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> ToolResult:
        return cls(content=[TextContent(text=text)])


class ErrorObject(BaseModel):
    """JSON-RPC error member."""

    code: int
    message: str


class ResponseEnvelope(BaseModel):
    """Outbound envelope carrying exactly one of ``result`` or ``error``."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: Any = None
    result: ToolResult | None = None
    error: ErrorObject | None = None

    @model_validator(mode="after")
    def _exactly_one_variant(self) -> ResponseEnvelope:
        if (self.result is None) == (self.error is None):
            msg = "ResponseEnvelope requires exactly one of result or error"
            raise ValueError(msg)
        return self

    @classmethod
    def success(cls, request_id: Any, result: ToolResult) -> ResponseEnvelope:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: Any, code: int, message: str) -> ResponseEnvelope:
        return cls(id=request_id, error=ErrorObject(code=code, message=message))

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-ready dict, keeping ``id`` even when it is null."""
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.model_dump()
        else:
            assert self.result is not None  # noqa: S101 - guaranteed by validator
            payload["result"] = self.result.model_dump()
        return payload
