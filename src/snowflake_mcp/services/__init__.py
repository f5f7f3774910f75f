"""Services package for snowflake-mcp.

Main Components:
- ConfigService: Configuration and warehouse engine management
- Credential providers: password and key-pair authentication
"""

from .config_service import ConfigService
from .credentials import (
    CredentialProvider,
    KeyPairCredentials,
    PasswordCredentials,
    SnowflakeSettings,
)

__all__ = [
    "ConfigService",
    "CredentialProvider",
    "KeyPairCredentials",
    "PasswordCredentials",
    "SnowflakeSettings",
]
