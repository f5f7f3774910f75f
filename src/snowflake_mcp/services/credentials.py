"""Credential providers for Snowflake access.

Password and key-pair authentication are interchangeable: each provider turns
the shared connection settings into SQLAlchemy URL parameters plus driver
``connect_args``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from cryptography.hazmat.primitives import serialization

from snowflake_mcp.exceptions import ConfigurationError


@dataclass(frozen=True)
class SnowflakeSettings:
    """Account, identity and default context shared by every provider."""

    account: str
    user: str
    warehouse: str
    database: str
    schema: str
    role: str | None = None

    def url_params(self) -> dict[str, str]:
        params = {
            "account": self.account,
            "user": self.user,
            "warehouse": self.warehouse,
            "database": self.database,
            "schema": self.schema,
        }
        if self.role:
            params["role"] = self.role
        return params


class CredentialProvider(Protocol):
    """Supplies everything needed to build a warehouse engine."""

    settings: SnowflakeSettings

    def url_params(self) -> dict[str, str]: ...

    def connect_args(self) -> dict[str, Any]: ...


@dataclass(frozen=True)
class PasswordCredentials:
    """User/password authentication."""

    settings: SnowflakeSettings
    password: str

    def url_params(self) -> dict[str, str]:
        return {**self.settings.url_params(), "password": self.password}

    def connect_args(self) -> dict[str, Any]:
        return {}


@dataclass(frozen=True)
class KeyPairCredentials:
    """Key-pair authentication with a PEM private key file."""

    settings: SnowflakeSettings
    private_key_path: Path
    passphrase: str | None = None

    def url_params(self) -> dict[str, str]:
        return self.settings.url_params()

    def connect_args(self) -> dict[str, Any]:
        return {"private_key": self.private_key_der()}

    def private_key_der(self) -> bytes:
        """Load the PEM key and return it as unencrypted DER (PKCS#8).

        Raises:
            ConfigurationError: If the key file is missing or cannot be decrypted
        """
        try:
            pem = self.private_key_path.read_bytes()
        except OSError as exc:
            msg = f"Cannot read Snowflake private key file {self.private_key_path}: {exc}"
            raise ConfigurationError(msg) from exc

        password = self.passphrase.encode() if self.passphrase else None
        try:
            key = serialization.load_pem_private_key(pem, password=password)
        except (ValueError, TypeError) as exc:
            msg = f"Cannot load Snowflake private key {self.private_key_path}: {exc}"
            raise ConfigurationError(msg) from exc

        return key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
