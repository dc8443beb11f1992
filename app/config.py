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
#
# The Settings class validates all values at startup, catching configuration
# errors early rather than at runtime.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Placeholder used in development; production must set its own key
DEFAULT_SECRET_KEY = "dev-secret-key-change-in-production"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,  # ... means required (no default)
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key (used for Auth calls)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret for verifying access tokens"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (Celery broker + OTP store)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for Celery broker and pending signups"
    )

    # -------------------------------------------------------------------------
    # Razorpay Configuration
    # -------------------------------------------------------------------------
    # Empty keys mean payments are not configured; order creation fails
    # with RAZORPAY_ENV_MISSING instead of the app refusing to start.

    RAZORPAY_KEY_ID: str = Field(
        default="",
        description="Razorpay key id (also returned to the checkout widget)"
    )

    RAZORPAY_KEY_SECRET: str = Field(
        default="",
        description="Razorpay key secret (Basic auth + signature verification)"
    )

    RAZORPAY_API_URL: str = Field(
        default="https://api.razorpay.com/v1",
        description="Razorpay REST API base URL"
    )

    RAZORPAY_CURRENCY: str = Field(
        default="INR",
        description="Currency for all orders"
    )

    # -------------------------------------------------------------------------
    # Email (Resend)
    # -------------------------------------------------------------------------

    RESEND_API_KEY: str = Field(
        default="",
        description="Resend API key for transactional email"
    )

    RESEND_API_URL: str = Field(
        default="https://api.resend.com/emails",
        description="Resend send-email endpoint"
    )

    EMAIL_FROM: str = Field(
        default="Skin Sense <onboarding@resend.dev>",
        description="Sender shown on OTP emails"
    )

    # -------------------------------------------------------------------------
    # OTP Settings
    # -------------------------------------------------------------------------

    OTP_LENGTH: int = Field(
        default=6,
        ge=4,
        le=10,
        description="Number of digits in a verification code"
    )

    OTP_TTL_SECONDS: int = Field(
        default=600,
        ge=60,
        description="How long a verification code stays valid"
    )

    OTP_RESEND_COOLDOWN_SECONDS: int = Field(
        default=60,
        ge=0,
        le=600,
        description="Minimum wait between two code emails to the same address"
    )

    OTP_MAX_ATTEMPTS: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Wrong guesses allowed before a code is discarded"
    )

    # -------------------------------------------------------------------------
    # Analysis Settings
    # -------------------------------------------------------------------------

    ANALYSIS_DELAY_SECONDS: float = Field(
        default=3.0,
        ge=0.0,
        le=60.0,
        description="Simulated processing time for a skin analysis"
    )

    FREE_DAILY_SCAN_LIMIT: int = Field(
        default=1,
        ge=0,
        description="Analyses per UTC day for free accounts"
    )

    PREMIUM_DAILY_SCAN_LIMIT: int = Field(
        default=3,
        ge=1,
        description="Analyses per UTC day for active subscribers"
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

    FRONTEND_URL: str = Field(
        default="http://localhost:5173",
        description="Public URL of the web client (email and OAuth redirects)"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    SECRET_KEY: str = Field(
        default=DEFAULT_SECRET_KEY,
        min_length=16,
        description="Secret key used to hash verification codes"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:5173",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # File Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum image upload size in MB"
    )

    ALLOWED_IMAGE_TYPES: str = Field(
        default="image/jpeg,image/png,image/webp,image/heic",
        description="Accepted image content types (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in project root
        env_file=".env",
        env_file_encoding="utf-8",
        # Don't fail if .env doesn't exist (useful for production where
        # env vars are set directly)
        env_ignore_empty=True,
        # Case-sensitive environment variable names
        case_sensitive=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def check_production_secret(self) -> "Settings":
        """
        Refuse to start production with the development SECRET_KEY.

        Verification codes are hashed with this key, so a public default
        would let anyone who reads the store brute-force codes offline.

        Raises:
            ValueError: If ENVIRONMENT is production and SECRET_KEY is unset
        """
        if self.ENVIRONMENT == "production" and self.SECRET_KEY == DEFAULT_SECRET_KEY:
            raise ValueError("SECRET_KEY must be set to a private value in production")
        return self

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:5173, https://skinsense.ai" -> ["http://localhost:5173", "https://skinsense.ai"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def allowed_image_types_list(self) -> list[str]:
        """
        Parse ALLOWED_IMAGE_TYPES string into a list.

        Example: "image/jpeg, image/png" -> ["image/jpeg", "image/png"]
        """
        return [t.strip().lower() for t in self.ALLOWED_IMAGE_TYPES.split(",") if t.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        """
        Convert MB to bytes for file size validation.
        """
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def razorpay_configured(self) -> bool:
        """Both Razorpay keys are present."""
        return bool(self.RAZORPAY_KEY_ID and self.RAZORPAY_KEY_SECRET)

    @property
    def resend_configured(self) -> bool:
        """Resend API key is present."""
        return bool(self.RESEND_API_KEY)

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
