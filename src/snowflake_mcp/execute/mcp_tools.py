"""Tool registration for read-only SQL execution (run_query).

The same ``RunQueryTool`` backs both transports: it is registered as a
:class:`ToolDescriptor` on the bridge's registry and, for standard MCP clients,
as a FastMCP tool.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.utilities.logging import get_logger
from pydantic import Field

from snowflake_mcp.builders import QueryResultBuilder
from snowflake_mcp.exceptions import ToolExecutionError
from snowflake_mcp.execute.gateway import QueryExecutionGateway, Row
from snowflake_mcp.execute.models import RunQueryArguments
from snowflake_mcp.execute.safety import StatementSafetyFilter
from snowflake_mcp.protocol.models import ToolResult
from snowflake_mcp.protocol.registry import ToolDescriptor, ToolRegistry

_logger = get_logger(__name__)
MAX_QUERY_DISPLAY = 100
RUN_QUERY_TOOL_NAME = "run_query"
RUN_QUERY_DESCRIPTION = (
    "Run a read-only SQL query on Snowflake and return all rows as JSON. "
    "Statements containing UPDATE, DELETE, INSERT, MERGE, DROP, ALTER or TRUNCATE are rejected."
)


def _preview(sql: str) -> str:
    return sql[:MAX_QUERY_DISPLAY] + ("..." if len(sql) > MAX_QUERY_DISPLAY else "")


class RunQueryTool:
    """Safety filter followed by the execution gateway."""

    def __init__(self, gateway: QueryExecutionGateway, safety: StatementSafetyFilter) -> None:
        self.gateway = gateway
        self.safety = safety

    async def rows(self, sql: str) -> list[Row]:
        """Check ``sql`` against the policy, then run it.

        Raises:
            PolicyError: If the statement is rejected (the gateway is never called)
            BackendError: If the warehouse fails to connect or execute
        """
        _logger.info("run_query: %s", _preview(sql))
        self.safety.enforce(sql)
        rows = await self.gateway.execute(sql)
        _logger.info("run_query succeeded (rows=%d)", len(rows))
        return rows

    async def __call__(self, arguments: RunQueryArguments) -> ToolResult:
        rows = await self.rows(arguments.sql)
        return QueryResultBuilder.build(rows)

    def descriptor(self) -> ToolDescriptor:
        return ToolDescriptor(
            name=RUN_QUERY_TOOL_NAME,
            description=RUN_QUERY_DESCRIPTION,
            arguments_model=RunQueryArguments,
            handler=self,
        )


def register_run_query_tool(registry: ToolRegistry, tool: RunQueryTool) -> None:
    """Register ``run_query`` on the bridge's tool registry."""
    registry.register(tool.descriptor())


def register_run_query_mcp_tool(mcp: FastMCP, tool: RunQueryTool) -> None:
    """Expose ``run_query`` on a FastMCP server for standard MCP clients."""

    @mcp.tool(name=RUN_QUERY_TOOL_NAME, description=RUN_QUERY_DESCRIPTION)
    async def run_query(
        sql: Annotated[str, Field(description="Read-only SQL to run on the warehouse")],
    ) -> list[dict[str, Any]]:  # pyright: ignore[reportUnusedFunction]
        try:
            return await tool.rows(sql)
        except ToolExecutionError as exc:
            raise ToolError(exc.message or "Tool failed") from exc

    _ = run_query
