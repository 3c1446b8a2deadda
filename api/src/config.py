"""
FastAPI application configuration using Pydantic Settings.

Provides centralized configuration for:
- API settings (name, environment, bind address, workers)
- MongoDB connection and driver options
- Read-through cache TTLs and capacity
- Password hashing (argon2id cost parameters)
- HTTP hardening (compression, security headers, body size)
- Logging and metrics

All settings support environment variable overrides and .env file loading.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables with the
    prefix "CATALOG_API_" (e.g., CATALOG_API_MONGODB_URI).

    Environment variables are loaded from:
    1. System environment
    2. .env file in the current directory
    3. Default values defined below
    """

    # =========================================================================
    # API Settings
    # =========================================================================

    app_name: str = Field(
        default="Catalog API",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="API version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode - enables verbose logging and error traces"
    )
    environment: str = Field(
        default="development",
        description="Environment: development|test|production"
    )

    host: str = Field(
        default="0.0.0.0",
        description="API bind host"
    )
    port: int = Field(
        default=3000,
        description="API bind port",
        gt=0,
        lt=65536
    )
    workers: int = Field(
        default=1,
        description="Number of Uvicorn worker processes",
        gt=0,
        le=32
    )

    # =========================================================================
    # MongoDB Settings
    # =========================================================================

    mongodb_uri: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    mongodb_database: str = Field(
        default="catalog",
        description="MongoDB database name"
    )
    mongodb_max_pool_size: int = Field(
        default=100,
        description="Maximum connections in the driver pool",
        gt=0
    )
    mongodb_min_pool_size: int = Field(
        default=10,
        description="Connections kept open in the driver pool",
        ge=0
    )
    mongodb_socket_timeout_ms: int = Field(
        default=45000,
        description="Socket timeout (milliseconds)",
        gt=0
    )
    mongodb_connect_timeout_ms: int = Field(
        default=30000,
        description="Connect timeout (milliseconds)",
        gt=0
    )
    mongodb_server_selection_timeout_ms: int = Field(
        default=30000,
        description="Server selection timeout (milliseconds)",
        gt=0
    )
    mongodb_heartbeat_frequency_ms: int = Field(
        default=10000,
        description="Heartbeat frequency (milliseconds)",
        ge=500
    )
    mongodb_read_preference: str = Field(
        default="secondaryPreferred",
        description="Read preference for queries"
    )
    mongodb_write_concern: str = Field(
        default="majority",
        description="Write concern 'w' value"
    )
    mongodb_write_timeout_ms: int = Field(
        default=10000,
        description="Write concern timeout (milliseconds)",
        gt=0
    )

    # =========================================================================
    # Cache Settings
    # =========================================================================

    user_cache_ttl: int = Field(
        default=300,
        description="TTL for cached users (seconds)",
        ge=0
    )
    item_cache_ttl: int = Field(
        default=600,
        description="TTL for cached items (seconds)",
        ge=0
    )
    item_list_cache_ttl: int = Field(
        default=300,
        description="TTL for the cached item listing (seconds)",
        ge=0
    )
    cache_max_keys: int = Field(
        default=10000,
        description="Maximum number of keys per cache",
        gt=0
    )
    cache_check_period: int = Field(
        default=60,
        description="Interval between expired-entry sweeps (seconds), 0 disables",
        ge=0
    )

    # =========================================================================
    # Password Hashing Settings
    # =========================================================================

    argon2_memory_cost: int = Field(
        default=4096,
        description="Argon2 memory cost (KiB)",
        ge=8
    )
    argon2_time_cost: int = Field(
        default=3,
        description="Argon2 time cost (iterations)",
        ge=1
    )
    argon2_parallelism: int = Field(
        default=2,
        description="Argon2 parallelism (lanes)",
        ge=1
    )
    argon2_digest_size: int = Field(
        default=32,
        description="Argon2 hash length (bytes)",
        ge=16
    )
    password_min_length: int = Field(
        default=8,
        description="Minimum password length",
        ge=1,
        le=128
    )

    # =========================================================================
    # HTTP Settings
    # =========================================================================

    gzip_minimum_size: int = Field(
        default=1000,
        description="Minimum response size for gzip compression (bytes)",
        ge=0
    )
    security_headers_enabled: bool = Field(
        default=True,
        description="Enable security headers (X-Frame-Options, etc.)"
    )
    max_request_body_bytes: int = Field(
        default=1024 * 1024,  # 1 MB
        description="Maximum request body size in bytes",
        gt=0
    )

    # =========================================================================
    # Logging and Monitoring
    # =========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level: DEBUG|INFO|WARNING|ERROR|CRITICAL"
    )
    log_format: str = Field(
        default="json",
        description="Log format: json|text"
    )
    metrics_enabled: bool = Field(
        default=True,
        description="Expose Prometheus metrics"
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
    def validate_environment(cls, v: Optional[str]) -> str:
        """Validate environment, treating empty values as development."""
        if not v or v == "undefined":
            return "development"
        allowed = ["development", "test", "production"]
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

    @field_validator("mongodb_read_preference")
    @classmethod
    def validate_read_preference(cls, v: str) -> str:
        """Validate read preference mode name."""
        allowed = [
            "primary",
            "primaryPreferred",
            "secondary",
            "secondaryPreferred",
            "nearest",
        ]
        if v not in allowed:
            raise ValueError(f"mongodb_read_preference must be one of {allowed}, got: {v}")
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
    def json_logs(self) -> bool:
        """Whether logs are rendered as JSON."""
        return self.log_format == "json"

    # =========================================================================
    # Model Config
    # =========================================================================

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_API_",  # Environment variable prefix
        env_file=".env",             # Load from .env file
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",              # Ignore extra environment variables
        validate_default=True,       # Validate default values
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once and shared across the application. Sources:
    1. Environment variables with CATALOG_API_ prefix
    2. .env file in the current directory
    3. Default values

    Returns:
        Settings: Cached settings instance

    Example:
        >>> from api.src.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.mongodb_database)
        catalog
    """
    return Settings()


def clear_settings_cache():
    """
    Clear the settings cache.

    Useful for testing when you need to reload settings with different
    environment variables.
    """
    get_settings.cache_clear()
