"""Response builders for snowflake-mcp.

Turns buffered warehouse rows into the text payload of a tool result. Rows are
serialized as compact JSON with column order and row order preserved; values
JSON cannot represent natively are converted to strings. Non-finite floats
(Snowflake FLOAT 'NaN', 'inf', '-inf') become the strings ``"NaN"``, ``"Infinity"``
and ``"-Infinity"`` so the payload stays strict JSON.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, time, timedelta
from decimal import Decimal
import json
import math
from typing import Any
from uuid import UUID

from snowflake_mcp.protocol.models import ToolResult


def _json_default(value: object) -> Any:
    """Fallback encoder for driver value types."""
    if isinstance(value, Decimal):
        # Integral decimals (Snowflake NUMBER(38,0)) stay numeric.
        if value.is_finite() and value == value.to_integral_value():
            return int(value)
        return str(value)
    if isinstance(value, datetime | date | time):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, bytes | bytearray | memoryview):
        return bytes(value).hex()
    if isinstance(value, UUID):
        return str(value)
    return str(value)


def _finite(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"
    if isinstance(value, dict):
        return {k: _finite(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_finite(v) for v in value]
    return value


def serialize_rows(rows: Sequence[dict[str, Any]]) -> str:
    """Serialize rows as compact JSON text, e.g. ``[{"1":1}]``."""
    return json.dumps(
        [_finite(row) for row in rows],
        separators=(",", ":"),
        default=_json_default,
        allow_nan=False,
    )


class QueryResultBuilder:
    """Builder for the ``run_query`` tool result."""

    @staticmethod
    def build(rows: Sequence[dict[str, Any]]) -> ToolResult:
        return ToolResult.from_text(serialize_rows(rows))
