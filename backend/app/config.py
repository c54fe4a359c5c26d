"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field, field_validator, ConfigDict


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./runlog.db",
        description="Database connection URL"
    )

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins"
    )

    # === Strava ===
    strava_client_id: Optional[str] = Field(default=None)
    strava_client_secret: Optional[str] = Field(default=None)
    strava_redirect_uri: Optional[str] = Field(
        default=None,
        description="OAuth redirect URI registered with Strava"
    )
    strava_webhook_verify_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "strava_webhook_verify_token",
            "strava_verify_token",  # Also accept STRAVA_VERIFY_TOKEN
        )
    )
    strava_http_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for outbound Strava calls"
    )

    # === Token storage ===
    encryption_key: Optional[str] = Field(
        default=None,
        description="32-byte key for AES-256-GCM token encryption"
    )
    token_refresh_skew_seconds: int = Field(
        default=300,
        description="Refresh access tokens this long before they expire"
    )

    @field_validator('database_url')
    @classmethod
    def fix_postgres_url(cls, v: str) -> str:
        """Fix Render/Railway postgres:// URL to postgresql://"""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Global settings instance
settings = Settings()
