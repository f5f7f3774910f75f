"""Container healthcheck for a running snowflake-mcp server.

Requests ``/health`` and exits 0 only when the server answers 200 with
``{"status": "healthy"}``. Host and port default to the server's own settings
(``PORT``), and ``--host``/``--port`` override them the way ``snowflake-mcp``
flags do.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any
from urllib.request import Request, urlopen

from snowflake_mcp.protocol.transport import SERVICE_NAME
from snowflake_mcp.services.config_service import ConfigService

DEFAULT_HOST = "127.0.0.1"
DEFAULT_TIMEOUT = 4.0
HEALTH_PATH = "/health"


def health_url(host: str, port: int) -> str:
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    return f"http://{host}:{port}{HEALTH_PATH}"


def problem(status: int, payload: Any) -> str | None:
    """Describe what is wrong with a health response, or ``None`` if healthy."""
    if status != 200:
        return f"unexpected status: {status}"
    if not isinstance(payload, dict) or payload.get("status") != "healthy":
        return f"payload not healthy: {payload}"
    return None


def check(url: str, timeout: float = DEFAULT_TIMEOUT) -> str | None:
    req = Request(url, headers={"User-Agent": f"{SERVICE_NAME}/healthcheck"})  # noqa: S310
    try:
        with urlopen(req, timeout=timeout) as resp:  # noqa: S310 - http to a local port
            status = resp.status
            body = resp.read().decode("utf-8")
    except OSError as exc:
        return f"healthcheck error: {exc}"
    try:
        payload = json.loads(body)
    except ValueError:
        return f"payload is not JSON: {body[:100]}"
    return problem(status, payload)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog=f"{SERVICE_NAME}-healthcheck", description=__doc__)
    parser.add_argument("--host", default=DEFAULT_HOST, help=f"Server host (default: {DEFAULT_HOST})")
    parser.add_argument("--port", type=int, default=None, help="Server port (default: PORT or 3000)")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="Seconds to wait")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    port = args.port or ConfigService.server_port()
    error = check(health_url(args.host, port), timeout=args.timeout)
    if error is not None:
        print(error, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
