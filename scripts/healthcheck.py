"""Docker HEALTHCHECK wrapper; see ``snowflake_mcp.healthcheck``."""

from __future__ import annotations

from snowflake_mcp.healthcheck import main

if __name__ == "__main__":
    raise SystemExit(main())
