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

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration (database + object storage)
    # -------------------------------------------------------------------------

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    STORAGE_BUCKET: str = Field(
        default="todo-attachments",
        min_length=1,
        description="Storage bucket holding todo image attachments"
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

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Sessions & Passwords
    # -------------------------------------------------------------------------

    SECRET_KEY: str = Field(
        default="dev-secret-key-change-in-production",
        min_length=16,
        description="Secret key for signing session tokens"
    )

    SESSION_COOKIE_NAME: str = Field(
        default="todo.session-token",
        min_length=1,
        description="Session cookie name (the __Secure- prefixed variant is also accepted)"
    )

    SESSION_MAX_AGE_SECONDS: int = Field(
        default=30 * 24 * 3600,
        ge=60,
        description="Lifetime of a session token and its cookie"
    )

    BCRYPT_ROUNDS: int = Field(
        default=10,
        ge=4,
        le=16,
        description="bcrypt cost factor for password hashes"
    )

    # -------------------------------------------------------------------------
    # Attachment Settings
    # -------------------------------------------------------------------------

    MAX_IMAGE_SIZE_MB: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum attachment size in MB"
    )

    ALLOWED_IMAGE_TYPES: str = Field(
        default="image/png,image/jpeg,image/gif,image/webp",
        description="Allowed attachment MIME types (comma-separated)"
    )

    SIGNED_URL_TTL_SECONDS: int = Field(
        default=3600,
        ge=1,
        le=7 * 24 * 3600,
        description="Default lifetime of signed attachment URLs"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS string into a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def allowed_image_types_list(self) -> list[str]:
        """
        Parse ALLOWED_IMAGE_TYPES string into a list.

        Example: "image/png, image/jpeg" -> ["image/png", "image/jpeg"]
        """
        return [t.strip().lower() for t in self.ALLOWED_IMAGE_TYPES.split(",") if t.strip()]

    @property
    def max_image_size_bytes(self) -> int:
        return self.MAX_IMAGE_SIZE_MB * 1024 * 1024

    @property
    def secure_session_cookie_name(self) -> str:
        """Cookie name used when cookies are issued with the Secure flag."""
        return f"__Secure-{self.SESSION_COOKIE_NAME}"

    @property
    def session_cookie_names(self) -> tuple[str, str]:
        """Both cookie names accepted as proof of an existing session."""
        return (self.SESSION_COOKIE_NAME, self.secure_session_cookie_name)

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
settings = get_settings()
