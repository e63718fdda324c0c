# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.GEMINI_MODEL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

import tempfile
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance, or via
    `get_settings()` when a dependency needs to be overridden in tests.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # Database (daily_logs, follow_ups, users) and auth token issuer

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
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
    # Gemini / Analysis Configuration
    # -------------------------------------------------------------------------

    GOOGLE_API_KEY: str = Field(
        ...,
        description="Google AI Studio API key for the Gemini Files and Models APIs"
    )

    GEMINI_MODEL: str = Field(
        default="gemini-2.0-flash",
        description="Model used for video check-in analysis (must accept video input)"
    )

    GEMINI_POLL_INTERVAL_SECONDS: float = Field(
        default=1.0,
        gt=0.0,
        le=30.0,
        description="Delay between file state polls while the upload is PROCESSING"
    )

    GEMINI_MAX_POLL_ATTEMPTS: int = Field(
        default=60,
        ge=1,
        le=600,
        description="Maximum number of file state polls before giving up"
    )

    GEMINI_POLL_TIMEOUT_SECONDS: float = Field(
        default=60.0,
        gt=0.0,
        le=600.0,
        description="Overall deadline for the uploaded file to become ACTIVE"
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
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Check-in Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=100,
        ge=1,
        le=500,
        description="Maximum check-in video size in MB"
    )

    ALLOWED_VIDEO_TYPES: str = Field(
        default="video/mp4,video/webm,video/quicktime",
        description="Allowed video content types (comma-separated)"
    )

    TEMP_DIR: str = Field(
        default_factory=tempfile.gettempdir,
        description="Directory for transient video staging (contents never outlive a request)"
    )

    REQUIRE_CHECK_IN_ELIGIBILITY: bool = Field(
        default=True,
        description="Require an active follow-up and at most one check-in per day"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Don't fail if .env doesn't exist (production sets env vars directly)
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def allowed_video_types_list(self) -> list[str]:
        """
        Parse ALLOWED_VIDEO_TYPES string into a list.

        Example: "video/mp4, video/webm" -> ["video/mp4", "video/webm"]
        """
        return [t.strip().lower() for t in self.ALLOWED_VIDEO_TYPES.split(",") if t.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        """
        Convert MB to bytes for file size validation.
        """
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

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

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
