"""Configuration service for snowflake-mcp.

This module centralizes environment variable handling and warehouse engine
creation. Credentials are validated here, once, while the server starts; request
handling never reads the environment.
"""

from __future__ import annotations

import os
from pathlib import Path

import sqlalchemy as sa
from snowflake.sqlalchemy import URL
from sqlalchemy.pool import NullPool

from snowflake_mcp.exceptions import ConfigurationError
from snowflake_mcp.services.credentials import (
    CredentialProvider,
    KeyPairCredentials,
    PasswordCredentials,
    SnowflakeSettings,
)

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})

REQUIRED_SETTINGS: tuple[str, ...] = (
    "SNOWFLAKE_ACCOUNT",
    "SNOWFLAKE_USER",
    "SNOWFLAKE_WAREHOUSE",
    "SNOWFLAKE_DATABASE",
    "SNOWFLAKE_SCHEMA",
)


def _env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


class ConfigService:
    """Service for managing configuration and warehouse connections."""

    @staticmethod
    def get_database_url() -> str | None:
        """Optional SQLAlchemy URL overriding the Snowflake credentials.

        Useful for pointing the server at a local database during development.
        """
        return _env("SNOWFLAKE_MCP_DATABASE_URL")

    @staticmethod
    def load_credentials() -> CredentialProvider:
        """Build the credential provider from ``SNOWFLAKE_*`` variables.

        A private key path selects key-pair authentication; otherwise a password
        is required.

        Raises:
            ConfigurationError: Listing every missing variable
        """
        values = {name: _env(name) for name in REQUIRED_SETTINGS}
        missing = [name for name, value in values.items() if value is None]

        password = _env("SNOWFLAKE_PASSWORD")
        key_path = _env("SNOWFLAKE_PRIVATE_KEY_PATH")
        if password is None and key_path is None:
            missing.append("SNOWFLAKE_PASSWORD or SNOWFLAKE_PRIVATE_KEY_PATH")

        if missing:
            msg = f"Missing required Snowflake configuration: {', '.join(missing)}"
            raise ConfigurationError(msg)

        settings = SnowflakeSettings(
            account=values["SNOWFLAKE_ACCOUNT"] or "",
            user=values["SNOWFLAKE_USER"] or "",
            warehouse=values["SNOWFLAKE_WAREHOUSE"] or "",
            database=values["SNOWFLAKE_DATABASE"] or "",
            schema=values["SNOWFLAKE_SCHEMA"] or "",
            role=_env("SNOWFLAKE_ROLE"),
        )
        if key_path is not None:
            return KeyPairCredentials(
                settings=settings,
                private_key_path=Path(key_path).expanduser(),
                passphrase=_env("SNOWFLAKE_PRIVATE_KEY_PASSPHRASE"),
            )
        return PasswordCredentials(settings=settings, password=password or "")

    @staticmethod
    def create_warehouse_engine() -> sa.Engine:
        """Create the engine used by the execution gateway.

        ``NullPool`` makes every gateway session a fresh driver connection that
        is fully closed on release.

        Raises:
            ConfigurationError: If credentials are missing or unusable
        """
        url = ConfigService.get_database_url()
        if url is not None:
            return sa.create_engine(url, poolclass=NullPool)

        credentials = ConfigService.load_credentials()
        return sa.create_engine(
            URL(**credentials.url_params()),
            connect_args=credentials.connect_args(),
            poolclass=NullPool,
        )

    # ---- Server settings ---------------------------------------------------
    @staticmethod
    def invocation_path() -> str:
        path = _env("SNOWFLAKE_MCP_PATH") or "/mcp"
        return path if path.startswith("/") else f"/{path}"

    @staticmethod
    def server_host() -> str:
        return _env("SNOWFLAKE_MCP_HOST") or "0.0.0.0"  # noqa: S104 - container default

    @staticmethod
    def server_port() -> int:
        val = _env("PORT") or "3000"
        try:
            port = int(val)
        except ValueError:
            port = 3000
        return port if 0 < port < 65536 else 3000

    # ---- Policy ------------------------------------------------------------
    @staticmethod
    def reject_multi_statement() -> bool:
        """Whether batches of several statements are rejected."""
        val = _env("SNOWFLAKE_MCP_REJECT_MULTI_STATEMENT") or "false"
        return val.lower() in _TRUE_VALUES
