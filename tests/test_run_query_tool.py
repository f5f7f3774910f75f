"""Tests for the run_query tool, its result payload and the FastMCP transport."""

from __future__ import annotations

import asyncio
from datetime import date, datetime
from decimal import Decimal
import json
from uuid import UUID

from fastmcp import Client
from fastmcp.exceptions import ToolError
import pytest

from snowflake_mcp.builders import QueryResultBuilder, serialize_rows
from snowflake_mcp.cli import _parse_args
from snowflake_mcp.exceptions import PolicyError
from snowflake_mcp.execute import QueryExecutionGateway, RunQueryArguments, RunQueryTool, StatementSafetyFilter
from snowflake_mcp.server import build_mcp, build_registry
from tests.fakes import FakeSessionFactory


def _reject_constant(name: str) -> None:
    msg = f"non-standard JSON constant {name}"
    raise AssertionError(msg)


def test_serialize_rows_is_compact_and_ordered() -> None:
    assert serialize_rows([{"1": 1}]) == '[{"1":1}]'
    assert serialize_rows([]) == "[]"
    assert serialize_rows([{"b": 1, "a": 2}]) == '[{"b":1,"a":2}]'


def test_serialize_driver_types() -> None:
    row = {
        "N": Decimal("42"),
        "P": Decimal("3.14"),
        "D": date(2024, 5, 1),
        "TS": datetime(2024, 5, 1, 12, 30),
        "B": b"\x01\xff",
        "U": UUID("12345678-1234-5678-1234-567812345678"),
        "NULL": None,
        "F": 1.5,
        "NAN": float("nan"),
        "INF": float("inf"),
        "NINF": float("-inf"),
        "V": {"nested": [float("nan"), 2.0]},
    }
    text = serialize_rows([row])
    assert json.loads(text, parse_constant=_reject_constant) == [
        {
            "N": 42,
            "P": "3.14",
            "D": "2024-05-01",
            "TS": "2024-05-01T12:30:00",
            "B": "01ff",
            "U": "12345678-1234-5678-1234-567812345678",
            "NULL": None,
            "F": 1.5,
            "NAN": "NaN",
            "INF": "Infinity",
            "NINF": "-Infinity",
            "V": {"nested": ["NaN", 2.0]},
        }
    ]


def test_query_result_builder() -> None:
    result = QueryResultBuilder.build([{"X": "y"}])
    assert result.model_dump() == {"content": [{"type": "text", "text": '[{"X":"y"}]'}]}


def test_tool_rejects_before_gateway() -> None:
    factory = FakeSessionFactory()
    tool = RunQueryTool(QueryExecutionGateway(factory), StatementSafetyFilter())

    with pytest.raises(PolicyError):
        asyncio.run(tool(RunQueryArguments(sql="insert into t values (1)")))
    assert factory.sessions == []


def test_build_registry_is_frozen(sqlite_tool: RunQueryTool) -> None:
    registry = build_registry(sqlite_tool)
    assert registry.frozen
    assert registry.names() == ["run_query"]


def test_fastmcp_transport_runs_query(sqlite_tool: RunQueryTool) -> None:
    mcp = build_mcp(sqlite_tool)

    async def _run() -> str:
        async with Client(mcp) as client:
            result = await client.call_tool("run_query", {"sql": "SELECT name FROM t ORDER BY id"})
            return result.content[0].text  # type: ignore[union-attr]

    assert json.loads(asyncio.run(_run())) == [{"name": "Alice"}, {"name": "Bob"}, {"name": "Charlie"}]


def test_fastmcp_transport_reports_policy_error(sqlite_tool: RunQueryTool) -> None:
    mcp = build_mcp(sqlite_tool)

    async def _run() -> None:
        async with Client(mcp) as client:
            await client.call_tool("run_query", {"sql": "DROP TABLE t"})

    with pytest.raises(ToolError, match="Only SELECT queries are allowed"):
        asyncio.run(_run())


def test_cli_arguments() -> None:
    args = _parse_args([])
    assert args.transport == "bridge"
    assert args.host is None
    assert args.port is None

    args = _parse_args(["--transport", "mcp", "--port", "9000"])
    assert args.transport == "mcp"
    assert args.port == 9000
