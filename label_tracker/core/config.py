"""Application configuration management using Pydantic Settings."""

import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic Settings for type validation and automatic loading
    from .env files and environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database settings
    database_url: str = Field(
        default="sqlite+aiosqlite:///./label_tracker.db",
        description="Async SQLAlchemy database URL (postgresql+asyncpg or sqlite+aiosqlite)"
    )
    database_echo: bool = Field(default=False, description="Enable SQLAlchemy SQL logging")
    database_pool_size: int = Field(default=5, ge=1, description="Database connection pool size")
    database_pool_recycle: int = Field(default=3600, ge=300, description="Database pool recycle time in seconds")

    # API server settings
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API server port")

    # CORS settings (using string for environment variable compatibility)
    cors_origins_str: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="Comma-separated CORS origins",
        alias="CORS_ORIGINS"
    )

    # Logging settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or console)")

    # Development settings
    debug: bool = Field(default=False, description="Enable debug mode")
    reload: bool = Field(default=False, description="Enable auto-reload (development)")
    environment: str = Field(default="production", description="Application environment")

    # Security settings
    secret_key: str = Field(
        default="Zr4m0xV1Kq8sPbT2wLdE9hYcN6uJ3aGf_label-tracker",
        min_length=32,
        description="Secret key used as HMAC pepper for API tokens"
    )
    auth_api_key_header: str = Field(default="X-API-Key", description="Header carrying the login token")
    login_max_attempts: int = Field(default=5, ge=1, description="Failed logins allowed per window")
    login_lockout_seconds: int = Field(default=60, ge=1, description="Login throttle window in seconds")
    default_password_prefix: str = Field(
        default="Peruri",
        description="Default passwords are this prefix followed by the upper-cased NP"
    )

    # SIRINE specification system
    sirine_api_url: str = Field(
        default="https://sirine.peruri.co.id/sirine/api",
        description="Base URL of the SIRINE specification API"
    )
    sirine_timeout: float = Field(default=10.0, gt=0, description="SIRINE request timeout in seconds")
    sirine_verify_ssl: bool = Field(
        default=False,
        description="Verify TLS certificates when calling SIRINE (internal network uses self-signed certs)"
    )
    sirine_verify_on_register: bool = Field(
        default=True,
        description="Require the PO to exist in SIRINE when registering an order"
    )

    # Startup seed (only runs against an empty users table)
    seed_initial_data: bool = Field(default=True, description="Create default workstations and admin on first start")
    seed_admin_np: str = Field(default="ADMIN", max_length=5, description="NP of the seeded admin")

    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from the string configuration."""
        if not self.cors_origins_str.strip():
            return ["http://localhost:5173", "http://localhost:3000"]
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.debug or self.reload or os.getenv("DEV_MODE", "false").lower() == "true"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are loaded only once
    and cached for subsequent calls.
    """
    return Settings()
