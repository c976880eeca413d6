"""
Client configuration using Pydantic Settings.

All settings can be overridden via environment variables with the prefix
"PNAME_CLIENT_" (e.g., PNAME_CLIENT_BASE_URL).
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Connection settings for :class:`client.src.pname_client.PnameClient`."""

    base_url: str = Field(
        default="http://localhost:8080",
        description="Scheme, host and port of the pname service"
    )
    context_root: str = Field(
        default="/",
        description="Base path under which the service is deployed"
    )
    timeout_seconds: float = Field(
        default=30.0,
        description="Total request timeout in seconds",
        gt=0
    )

    csrf_header: Optional[str] = Field(
        default=None,
        description="Name of the header carrying the CSRF token"
    )
    csrf_parameter: Optional[str] = Field(
        default=None,
        description="Name of the form field carrying the CSRF token"
    )
    csrf_token: Optional[str] = Field(
        default=None,
        description="CSRF token value"
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got: {v}")
        return v

    model_config = SettingsConfigDict(
        env_prefix="PNAME_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_client_settings() -> ClientSettings:
    """Get cached client settings instance."""
    return ClientSettings()
