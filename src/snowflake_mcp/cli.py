"""Command-line entrypoint for the snowflake-mcp server.

Runs the JSON-RPC/event-stream bridge under uvicorn by default. With
``--transport mcp`` the same tool is served by FastMCP over streamable HTTP.
"""

from __future__ import annotations

import argparse
import traceback

from fastmcp.utilities.logging import get_logger
import uvicorn

from snowflake_mcp.exceptions import ConfigurationError
from snowflake_mcp.server import build_app, build_mcp
from snowflake_mcp.services.config_service import ConfigService

# Configure a module-level logger for local server logs.
_logger = get_logger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="snowflake-mcp", description=__doc__)
    parser.add_argument(
        "--transport",
        choices=("bridge", "mcp"),
        default="bridge",
        help="bridge: JSON-RPC over event-stream (default); mcp: FastMCP streamable HTTP",
    )
    parser.add_argument("--host", default=None, help="Bind host (default: SNOWFLAKE_MCP_HOST)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: PORT)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Start the snowflake-mcp server via CLI."""
    args = _parse_args(argv)
    host = args.host or ConfigService.server_host()
    port = args.port or ConfigService.server_port()

    try:
        if args.transport == "mcp":
            build_mcp().run(transport="http", host=host, port=port)
        else:
            app = build_app()
            _logger.info("MCP server running on port %d", port)
            uvicorn.run(app, host=host, port=port)
    except ConfigurationError as exc:
        _logger.error("Configuration error: %s", exc)  # noqa: TRY400
        raise SystemExit(2) from exc
    except KeyboardInterrupt:
        _logger.info("Interrupted by user. Exiting cleanly.")
    except Exception:  # noqa: BLE001
        traceback.print_exc(limit=1)
        raise SystemExit(1) from None


if __name__ == "__main__":
    main()
