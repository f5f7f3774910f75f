"""Response builders package for snowflake-mcp.

This package contains builders that construct tool results from warehouse
outcomes.
"""

from .response_builders import QueryResultBuilder, serialize_rows

__all__ = [
    "QueryResultBuilder",
    "serialize_rows",
]
