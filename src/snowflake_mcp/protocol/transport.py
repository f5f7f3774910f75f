"""HTTP transport for the protocol bridge.

Requests arrive as JSON-RPC bodies on a POST route; every dispatched request is
answered with a single ``text/event-stream`` frame::

    event: message
    data: {"jsonrpc": "2.0", "id": ..., "result": ...}

Bodies that cannot be decoded into a request never reach the bridge and are
answered with HTTP 400 and a JSON error envelope.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
import json
from typing import Any

from fastmcp.utilities.logging import get_logger
from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response, StreamingResponse
from starlette.routing import Route

from snowflake_mcp.exceptions import InvalidRequestError, ParseError, ProtocolError
from snowflake_mcp.protocol.bridge import ProtocolBridge
from snowflake_mcp.protocol.models import InvocationRequest, ResponseEnvelope

_logger = get_logger(__name__)

EVENT_STREAM_MEDIA_TYPE = "text/event-stream"
DEFAULT_INVOCATION_PATH = "/mcp"
SERVICE_NAME = "snowflake-mcp"


def encode_event(envelope: ResponseEnvelope) -> str:
    """Serialize an envelope as one event-stream frame."""
    data = json.dumps(envelope.to_wire(), separators=(",", ":"))
    return f"event: message\ndata: {data}\n\n"


def event_stream_response(envelope: ResponseEnvelope) -> StreamingResponse:
    """Wrap an envelope in a streaming response that emits one frame then ends."""

    async def _frames() -> AsyncIterator[str]:
        yield encode_event(envelope)

    return StreamingResponse(
        _frames(),
        status_code=200,
        media_type=EVENT_STREAM_MEDIA_TYPE,
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )


def decode_request(body: Any) -> InvocationRequest:
    """Turn a decoded JSON body into an :class:`InvocationRequest`.

    Raises:
        InvalidRequestError: If the body is not a usable request envelope
    """
    if not isinstance(body, dict):
        msg = "Invalid request"
        raise InvalidRequestError(msg)

    request_id = body.get("id")
    if not isinstance(body.get("method"), str):
        msg = "Invalid request"
        raise InvalidRequestError(msg, request_id=request_id)

    try:
        return InvocationRequest.model_validate(body)
    except ValidationError as exc:
        msg = "Invalid request: malformed params"
        raise InvalidRequestError(msg, request_id=request_id) from exc


def _protocol_error_response(exc: ProtocolError) -> JSONResponse:
    request_id = exc.request_id if isinstance(exc, InvalidRequestError) else None
    envelope = ResponseEnvelope.failure(request_id, exc.code, exc.message)
    return JSONResponse(envelope.to_wire(), status_code=400)


def create_app(
    bridge: ProtocolBridge,
    *,
    path: str = DEFAULT_INVOCATION_PATH,
) -> Starlette:
    """Build the Starlette application serving ``bridge`` on ``path``."""

    async def invoke(request: Request) -> Response:
        raw = await request.body()
        try:
            try:
                body = json.loads(raw)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                msg = "Parse error"
                raise ParseError(msg) from exc
            invocation = decode_request(body)
        except ProtocolError as exc:
            _logger.warning("Rejected request before dispatch: %s", exc.message)
            return _protocol_error_response(exc)

        envelope = await bridge.handle(invocation)
        return event_stream_response(envelope)

    async def status(_request: Request) -> JSONResponse:
        return JSONResponse({"status": "MCP running"})

    async def health_check(_request: Request) -> JSONResponse:
        return JSONResponse({"status": "healthy", "service": SERVICE_NAME})

    return Starlette(
        routes=[
            Route(path, invoke, methods=["POST"]),
            Route(path, status, methods=["GET"]),
            Route("/health", health_check, methods=["GET"]),
        ]
    )
