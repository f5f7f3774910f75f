"""Execute tool package for read-only SQL execution.

Exports the statement safety filter, the query execution gateway and the
run_query registration helpers.
"""

from __future__ import annotations

from .gateway import (
    QueryExecutionGateway,
    SessionFactory,
    SqlAlchemySession,
    WarehouseSession,
    driver_message,
    unique_labels,
)
from .mcp_tools import (
    RUN_QUERY_TOOL_NAME,
    RunQueryTool,
    register_run_query_mcp_tool,
    register_run_query_tool,
)
from .models import RunQueryArguments
from .safety import Allowed, Rejected, StatementSafetyFilter, Verdict

__all__ = [
    "RUN_QUERY_TOOL_NAME",
    "Allowed",
    "QueryExecutionGateway",
    "Rejected",
    "RunQueryArguments",
    "RunQueryTool",
    "SessionFactory",
    "SqlAlchemySession",
    "StatementSafetyFilter",
    "Verdict",
    "WarehouseSession",
    "driver_message",
    "register_run_query_mcp_tool",
    "register_run_query_tool",
    "unique_labels",
]
