"""
Shared configuration management for the Unit Protection Service.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProtectionConfig(BaseSettings):
    """Settings read from PROTECTION_* environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="PROTECTION_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")
    service_name: str = Field(default="protection")

    # Request-scoped identity headers
    user_id_header: str = Field(default="x-okapi-user-id")
    tenant_header: str = Field(default="x-okapi-tenant")
    request_id_header: str = Field(default="x-okapi-request-id")

    # Observability
    enable_tracing: bool = Field(default=False)
    enable_console_tracing: bool = Field(default=False)


def get_config() -> ProtectionConfig:
    """Get configuration for the protection service."""
    return ProtectionConfig()


@lru_cache(maxsize=1)
def get_cached_config() -> ProtectionConfig:
    """Process-wide configuration, read from the environment once."""
    return get_config()
