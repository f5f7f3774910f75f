"""Query execution gateway: one warehouse session per query.

Lifecycle for every call, strictly in order:

1. Acquire a fresh session from the session factory
2. Open it (failure -> ``WarehouseConnectionError``)
3. Execute the statement and buffer every row (failure -> ``QueryExecutionError``)
4. Release the session, whatever happened above

Release failures are logged and swallowed so they never mask the outcome of
steps 2-3. Blocking driver calls run in worker threads; the event loop yields
only while opening, executing and releasing.

SQL text goes to the driver untouched. Row keys follow the result columns in
order; a label that repeats gets a numeric suffix (``ID``, ``ID_2``).
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, Protocol

from fastmcp.utilities.logging import get_logger
import sqlalchemy as sa
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from snowflake_mcp.exceptions import QueryExecutionError, WarehouseConnectionError

_logger = get_logger(__name__)

Row = dict[str, Any]


class WarehouseSession(Protocol):
    """Single-use warehouse session handle."""

    def open(self) -> None: ...

    def execute(self, sql: str) -> list[Row]: ...

    def close(self) -> None: ...


SessionFactory = Callable[[], WarehouseSession]


def driver_message(exc: BaseException) -> str:
    """Best human-readable message for a driver failure.

    SQLAlchemy wraps DBAPI errors and appends the statement and a docs link;
    the original driver exception carries the message worth showing.
    """
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        text = str(exc.orig)
    elif isinstance(exc, SQLAlchemyError):
        text = str(exc.args[0]) if exc.args else str(exc)
    else:
        text = str(exc)
    return text.strip()


def unique_labels(keys: list[str]) -> list[str]:
    """Column labels with repeats suffixed, e.g. ``["ID", "ID_2"]``.

    Joins that select the same column name twice would otherwise lose all
    but the last value once rows become mappings.
    """
    originals = set(keys)
    used: set[str] = set()
    labels: list[str] = []
    for key in keys:
        label, n = key, 1
        # A suffix never takes the name of a real column.
        while label in used or (label != key and label in originals):
            n += 1
            label = f"{key}_{n}"
        used.add(label)
        labels.append(label)
    return labels


class SqlAlchemySession:
    """:class:`WarehouseSession` backed by one SQLAlchemy connection.

    The engine is expected to use ``NullPool`` so that opening creates a new
    driver connection and closing really disconnects it.
    """

    def __init__(self, engine: sa.Engine) -> None:
        self._engine = engine
        self._conn: sa.Connection | None = None
        self._closed = False

    def open(self) -> None:
        if self._closed:
            msg = "Session already released"
            raise RuntimeError(msg)
        self._conn = self._engine.connect()

    def execute(self, sql: str) -> list[Row]:
        if self._conn is None:
            msg = "Session is not open"
            raise RuntimeError(msg)
        # Sent verbatim: no bind-parameter parsing of ``:name`` or ``%`` text.
        result = self._conn.exec_driver_sql(
            sql, execution_options={"no_parameters": True}
        )
        if not result.returns_rows:
            return []
        labels = unique_labels(list(result.keys()))
        return [dict(zip(labels, row, strict=True)) for row in result]

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        conn, self._conn = self._conn, None
        if conn is not None:
            conn.close()


class QueryExecutionGateway:
    """Runs one statement per call on a session of its own."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    @classmethod
    def from_engine(cls, engine: sa.Engine) -> QueryExecutionGateway:
        return cls(lambda: SqlAlchemySession(engine))

    async def execute(self, sql: str) -> list[Row]:
        """Execute ``sql`` and return all rows as ordered column->value dicts.

        Raises:
            WarehouseConnectionError: If the session cannot be opened
            QueryExecutionError: If the warehouse fails the statement
        """
        session = self._session_factory()
        try:
            try:
                await asyncio.to_thread(session.open)
            except SQLAlchemyError as exc:
                _logger.warning("Warehouse connection failed: %s", exc)
                raise WarehouseConnectionError(driver_message(exc)) from exc

            try:
                rows = await asyncio.to_thread(session.execute, sql)
            except SQLAlchemyError as exc:
                _logger.warning("Query failed: %s", exc)
                raise QueryExecutionError(driver_message(exc)) from exc
        finally:
            await self._release(session)

        return rows

    @staticmethod
    async def _release(session: WarehouseSession) -> None:
        try:
            await asyncio.to_thread(session.close)
        except Exception as exc:  # noqa: BLE001 - release must not mask the outcome
            _logger.warning("Failed to release warehouse session: %s", exc)
