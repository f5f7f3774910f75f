"""Server assembly for snowflake-mcp.

Wires configuration, the run_query tool, the tool registry and the protocol
bridge into either transport: the JSON-RPC/event-stream bridge app, or a
FastMCP server for standard MCP clients.
"""

from __future__ import annotations

import dotenv
from fastmcp import FastMCP
from fastmcp.utilities.logging import get_logger
import sqlalchemy as sa
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse

from snowflake_mcp.execute import (
    QueryExecutionGateway,
    RunQueryTool,
    StatementSafetyFilter,
    register_run_query_mcp_tool,
    register_run_query_tool,
)
from snowflake_mcp.protocol import ProtocolBridge, ToolRegistry, create_app
from snowflake_mcp.protocol.transport import SERVICE_NAME
from snowflake_mcp.services.config_service import ConfigService

# Load environment variables
dotenv.load_dotenv()

_logger = get_logger(__name__)


def build_run_query_tool(engine: sa.Engine | None = None) -> RunQueryTool:
    """Create the run_query tool; validates warehouse configuration."""
    warehouse = engine if engine is not None else ConfigService.create_warehouse_engine()
    safety = StatementSafetyFilter(reject_multi_statement=ConfigService.reject_multi_statement())
    return RunQueryTool(QueryExecutionGateway.from_engine(warehouse), safety)


def build_registry(tool: RunQueryTool) -> ToolRegistry:
    registry = ToolRegistry()
    register_run_query_tool(registry, tool)
    return registry.freeze()


def build_app(tool: RunQueryTool | None = None, *, path: str | None = None) -> Starlette:
    """Build the bridge HTTP application."""
    run_query = tool if tool is not None else build_run_query_tool()
    bridge = ProtocolBridge(build_registry(run_query))
    invocation_path = path or ConfigService.invocation_path()
    _logger.info("Bridge ready on %s (tools: %s)", invocation_path, ", ".join(bridge.registry.names()))
    return create_app(bridge, path=invocation_path)


def build_mcp(tool: RunQueryTool | None = None) -> FastMCP:
    """Build a FastMCP server exposing the same run_query tool."""
    run_query = tool if tool is not None else build_run_query_tool()
    mcp = FastMCP(
        name=SERVICE_NAME,
        instructions=(
            "Runs read-only SQL against a Snowflake warehouse. "
            "Use run_query with a single SELECT statement."
        ),
    )
    register_run_query_mcp_tool(mcp, run_query)

    @mcp.custom_route("/health", methods=["GET"])
    async def health_check(_request: Request) -> JSONResponse:  # pyright: ignore[reportUnusedFunction]
        return JSONResponse({"status": "healthy", "service": SERVICE_NAME})

    _ = health_check
    return mcp
