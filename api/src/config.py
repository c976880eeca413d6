"""
FastAPI application configuration using Pydantic Settings.

Provides centralized configuration for:
- API settings (context root, host/port, CORS)
- CSRF protection
- Word dictionary source
- Request limits
- Security headers
- Logging, metrics and tracing

All settings support environment variable overrides and .env file loading.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import List, Optional
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables with the
    prefix "PNAME_API_" (e.g., PNAME_API_CONTEXT_ROOT).

    Environment variables are loaded from:
    1. System environment
    2. .env file in the current directory
    3. Default values defined below
    """

    # =========================================================================
    # API Settings
    # =========================================================================

    app_name: str = Field(
        default="Physical Name Generator",
        description="Application name"
    )
    app_version: str = Field(
        default="0.1.0",
        description="API version"
    )
    context_root: str = Field(
        default="/",
        description="Base path under which the application is deployed"
    )

    debug: bool = Field(
        default=False,
        description="Debug mode - enables verbose logging and error traces"
    )
    environment: str = Field(
        default="production",
        description="Environment: development|staging|production"
    )

    host: str = Field(
        default="0.0.0.0",
        description="API bind host"
    )
    port: int = Field(
        default=8080,
        description="API bind port",
        gt=0,
        lt=65536
    )

    # =========================================================================
    # Conversion Settings
    # =========================================================================

    max_lines: int = Field(
        default=10000,
        description="Maximum number of logical names per request",
        gt=0
    )

    # =========================================================================
    # Dictionary Settings
    # =========================================================================

    dictionary_path: Optional[str] = Field(
        default=None,
        description="Word dictionary loaded at startup (optional)"
    )
    dictionary_format: Optional[str] = Field(
        default=None,
        description="Dictionary format: CSV|TSV|JSON|YAML (inferred from suffix when unset)"
    )
    dictionary_delimiter: Optional[str] = Field(
        default=None,
        description="Separator between physical words in CSV/TSV dictionaries (whitespace when unset)"
    )
    dictionary_encoding: str = Field(
        default="utf-8",
        description="Dictionary file encoding"
    )

    # =========================================================================
    # CSRF Settings
    # =========================================================================

    csrf_enabled: bool = Field(
        default=False,
        description="Require a CSRF token on unsafe methods"
    )
    csrf_header_name: str = Field(
        default="X-CSRF-TOKEN",
        description="Header carrying the CSRF token"
    )
    csrf_parameter_name: str = Field(
        default="_csrf",
        description="Form field carrying the CSRF token"
    )
    csrf_token: Optional[str] = Field(
        default=None,
        description="Expected CSRF token value",
        min_length=16
    )

    # =========================================================================
    # CORS Settings
    # =========================================================================

    cors_enabled: bool = Field(
        default=False,
        description="Enable CORS middleware"
    )
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins"
    )
    cors_allow_credentials: bool = Field(
        default=True,
        description="Allow credentials (cookies, authorization headers) in CORS"
    )
    cors_allow_methods: List[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        description="Allowed HTTP methods"
    )
    cors_allow_headers: List[str] = Field(
        default=["*"],
        description="Allowed HTTP headers"
    )

    # =========================================================================
    # Security Settings
    # =========================================================================

    security_headers_enabled: bool = Field(
        default=True,
        description="Enable security headers (X-Frame-Options, etc.)"
    )
    security_require_https: bool = Field(
        default=False,
        description="Send HSTS header (enable behind TLS)"
    )
    security_hsts_max_age: int = Field(
        default=31536000,  # 1 year
        description="HSTS max age (seconds)"
    )

    # =========================================================================
    # Monitoring and Observability
    # =========================================================================

    metrics_enabled: bool = Field(
        default=True,
        description="Enable Prometheus metrics"
    )

    tracing_enabled: bool = Field(
        default=False,
        description="Enable OpenTelemetry tracing"
    )
    tracing_otlp_endpoint: Optional[str] = Field(
        default=None,
        description="OTLP/HTTP traces endpoint (console export when unset)"
    )
    tracing_sample_rate: float = Field(
        default=0.1,
        description="Trace sampling rate (0.0-1.0, where 1.0 = 100%)",
        ge=0.0,
        le=1.0
    )

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level: DEBUG|INFO|WARNING|ERROR|CRITICAL"
    )
    log_format: str = Field(
        default="json",
        description="Log format: json|text"
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of {allowed}, got: {v}")
        return v_upper

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is one of the allowed values."""
        allowed = ["development", "staging", "production"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"environment must be one of {allowed}, got: {v}")
        return v_lower

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        allowed = ["json", "text"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"log_format must be one of {allowed}, got: {v}")
        return v_lower

    @field_validator("dictionary_format")
    @classmethod
    def validate_dictionary_format(cls, v: Optional[str]) -> Optional[str]:
        """Validate dictionary format."""
        if v is None:
            return v
        allowed = ["CSV", "TSV", "JSON", "YAML"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"dictionary_format must be one of {allowed}, got: {v}")
        return v_upper

    @field_validator("context_root")
    @classmethod
    def validate_context_root(cls, v: str) -> str:
        """Normalize the context root to a leading-slash path without trailing slash."""
        v = v.strip() or "/"
        if not v.startswith("/"):
            v = "/" + v
        if v.endswith("/"):
            v = v[:-1]
        return v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def csrf_active(self) -> bool:
        """CSRF is enforced only when enabled and a token is configured."""
        return self.csrf_enabled and bool(self.csrf_token)

    # =========================================================================
    # Model Config
    # =========================================================================

    model_config = SettingsConfigDict(
        env_prefix="PNAME_API_",  # Environment variable prefix
        env_file=".env",           # Load from .env file
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",            # Ignore extra environment variables
        validate_default=True,     # Validate default values
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once and shared
    across the application.

    Returns:
        Settings: Cached settings instance
    """
    return Settings()


def clear_settings_cache():
    """
    Clear the settings cache.

    Useful for testing when you need to reload settings with different
    environment variables.
    """
    get_settings.cache_clear()
