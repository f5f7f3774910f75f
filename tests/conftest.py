from __future__ import annotations

from pathlib import Path

import pytest
import sqlalchemy as sa
from sqlalchemy.pool import NullPool

from snowflake_mcp.execute import QueryExecutionGateway, RunQueryTool, StatementSafetyFilter


@pytest.fixture
def sqlite_engine(tmp_path: Path) -> sa.Engine:
    """File-backed SQLite engine so every NullPool connection sees the same data."""
    engine = sa.create_engine(f"sqlite+pysqlite:///{tmp_path / 'warehouse.db'}", poolclass=NullPool)
    with engine.begin() as conn:
        conn.execute(sa.text("CREATE TABLE t(id INTEGER PRIMARY KEY, name TEXT, updated_at TEXT)"))
        conn.execute(
            sa.text(
                "INSERT INTO t(name, updated_at) VALUES "
                "('Alice', '2024-01-01'), ('Bob', '2024-01-02'), ('Charlie', '2024-01-03')"
            )
        )
    return engine


@pytest.fixture
def sqlite_tool(sqlite_engine: sa.Engine) -> RunQueryTool:
    return RunQueryTool(QueryExecutionGateway.from_engine(sqlite_engine), StatementSafetyFilter())
