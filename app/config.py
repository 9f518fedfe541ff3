# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance, or via
    get_settings() where a fresh import-time value would be too early.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key (used for admin sign-in)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 secret used to verify Supabase access tokens"
    )

    # -------------------------------------------------------------------------
    # Realtime / Change Notifications
    # -------------------------------------------------------------------------

    REALTIME_BACKEND: Literal["local", "redis"] = Field(
        default="local",
        description="'local' dispatches change events in-process, 'redis' fans out over pub/sub"
    )

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for the change-notification channel"
    )

    REALTIME_CHANNEL: str = Field(
        default="storefront:changes",
        description="Redis pub/sub channel carrying table change events"
    )

    REALTIME_WEBHOOK_SECRET: str = Field(
        default="",
        description="Shared secret expected in X-Webhook-Secret for database webhooks"
    )

    QUERY_CACHE_TTL_SECONDS: int = Field(
        default=0,
        ge=0,
        description="Seconds a cached query stays fresh (0 = until invalidated)"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:5173",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Image Relay Settings
    # -------------------------------------------------------------------------

    MAX_IMAGE_SIZE_MB: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Maximum image upload size in MB"
    )

    IMAGE_CONVERSION_ENABLED: bool = Field(
        default=True,
        description="Re-encode uploads before transfer (disable to relay bytes unchanged)"
    )

    IMAGE_OUTPUT_FORMAT: Literal["webp", "png", "jpeg"] = Field(
        default="webp",
        description="Format uploads are re-encoded to"
    )

    IMAGE_QUALITY: int = Field(
        default=80,
        ge=1,
        le=100,
        description="Encoder quality for lossy output formats"
    )

    FTP_HOST: str = Field(
        default="",
        description="Remote file server receiving uploaded images"
    )

    FTP_PORT: int = Field(
        default=21,
        ge=1,
        le=65535,
        description="FTP control port"
    )

    FTP_USER: str = Field(
        default="",
        description="FTP username"
    )

    FTP_PASS: str = Field(
        default="",
        description="FTP password"
    )

    FTP_UPLOAD_DIR: str = Field(
        default="/upload",
        description="Remote directory uploads are stored in"
    )

    FTP_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        gt=0,
        description="Socket timeout for the FTP connection"
    )

    PUBLIC_IMAGE_BASE_URL: str = Field(
        default="http://localhost/upload",
        description="Public URL prefix under which FTP_UPLOAD_DIR is served"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:5173, https://shop.example" -> ["http://localhost:5173", "https://shop.example"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def max_image_size_bytes(self) -> int:
        """Convert MB to bytes for upload size validation."""
        return self.MAX_IMAGE_SIZE_MB * 1024 * 1024

    @property
    def ftp_configured(self) -> bool:
        """Whether enough FTP settings are present to attempt a transfer."""
        return bool(self.FTP_HOST and self.FTP_USER)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
