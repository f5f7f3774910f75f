"""snowflake-mcp package: read-only Snowflake SQL over a tool-invocation protocol.

Exposes a single ``run_query`` tool through a JSON-RPC bridge that answers with
event-stream frames, and through a FastMCP server for standard MCP clients.
"""

from snowflake_mcp.execute import QueryExecutionGateway, RunQueryTool, StatementSafetyFilter
from snowflake_mcp.protocol import (
    InvocationRequest,
    ProtocolBridge,
    ResponseEnvelope,
    ToolDescriptor,
    ToolRegistry,
    ToolResult,
    create_app,
)
from snowflake_mcp.services import ConfigService

__all__ = [  # noqa: RUF022
    # Protocol
    "InvocationRequest",
    "ProtocolBridge",
    "ResponseEnvelope",
    "ToolDescriptor",
    "ToolRegistry",
    "ToolResult",
    "create_app",
    # Execution
    "QueryExecutionGateway",
    "RunQueryTool",
    "StatementSafetyFilter",
    # Services
    "ConfigService",
]
