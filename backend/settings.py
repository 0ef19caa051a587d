"""
Centralized settings configuration using Pydantic BaseSettings.

All environment variables are defined here with types, defaults, and validation.
Use get_settings() for dependency injection compatibility in FastAPI.

Usage:
    from backend.settings import get_settings, Settings

    # In FastAPI endpoints (dependency injection)
    @app.get("/")
    def read_root(settings: Settings = Depends(get_settings)):
        return {"environment": settings.environment}

    # Direct access (module-level)
    settings = get_settings()
    print(settings.supabase_url)
"""

import json
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )

    # -------------------------------------------------------------------------
    # Supabase Database
    # -------------------------------------------------------------------------
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL",
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key (bypasses RLS)",
    )
    supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Supabase anon key, used only when no service role key is set",
    )

    @property
    def supabase_key(self) -> Optional[str]:
        """Get the Supabase key, preferring the service role key."""
        return self.supabase_service_role_key or self.supabase_anon_key

    # -------------------------------------------------------------------------
    # Generation Backend
    # -------------------------------------------------------------------------
    openai_api_key: Optional[str] = Field(
        default=None,
        description="OpenAI API key for text generation",
    )
    openai_model: str = Field(
        default="gpt-3.5-turbo-0125",
        description="Chat completion model used for all operations",
    )
    openai_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for a single generation call",
    )

    # -------------------------------------------------------------------------
    # Checkout - LemonSqueezy
    # -------------------------------------------------------------------------
    lemonsqueezy_api_key: Optional[str] = Field(
        default=None,
        description="LemonSqueezy API key",
    )
    lemonsqueezy_store_id: Optional[str] = Field(
        default=None,
        description="LemonSqueezy store ID",
    )
    lemonsqueezy_api_url: str = Field(
        default="https://api.lemonsqueezy.com/v1",
        description="LemonSqueezy API base URL",
    )

    # -------------------------------------------------------------------------
    # CORS
    # -------------------------------------------------------------------------
    allowed_origins: str = Field(
        default="",
        description="Allowed CORS origins as a JSON array or comma-separated list. If empty, all origins are allowed.",
    )

    # -------------------------------------------------------------------------
    # Observability - Sentry / OpenTelemetry
    # -------------------------------------------------------------------------
    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking",
    )
    render_git_commit: Optional[str] = Field(
        default=None,
        description="Git commit SHA provided by the host (RENDER_GIT_COMMIT)",
    )
    otel_enabled: bool = Field(
        default=False,
        description="Enable OpenTelemetry tracing and metrics",
    )
    otel_service_name: str = Field(
        default="startupstack-ai",
        description="Service name reported to the collector",
    )
    otel_exporter_otlp_endpoint: Optional[str] = Field(
        default=None,
        description="OTLP HTTP endpoint. Console exporter is used when unset.",
    )
    otel_traces_sample_rate: float = Field(
        default=0.1,
        description="Fraction of traces to sample",
    )

    # -------------------------------------------------------------------------
    # Client Request Orchestrator
    # -------------------------------------------------------------------------
    client_base_url: str = Field(
        default="http://localhost:8000",
        description="Base URL the client uses to reach the dispatch endpoint",
    )
    client_attempt_timeout_seconds: float = Field(
        default=12.0,
        description="Timeout budget for one dispatch attempt",
    )
    client_max_attempts: int = Field(
        default=2,
        description="Maximum attempts for one logical operation call",
    )
    client_backoff_base_seconds: float = Field(
        default=1.0,
        description="Linear backoff step between attempts",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def allowed_origins_list(self) -> List[str]:
        """CORS origins, falling back to a wildcard when none are configured."""
        value = self.allowed_origins.strip()
        if value.startswith("["):
            origins = json.loads(value)
        else:
            origins = [origin.strip() for origin in value.split(",") if origin.strip()]
        return origins or ["*"]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"

    @property
    def checkout_configured(self) -> bool:
        """True when every credential the checkout flow needs is present."""
        return bool(
            self.supabase_url
            and self.supabase_key
            and self.lemonsqueezy_api_key
            and self.lemonsqueezy_store_id
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Application settings instance
    """
    return Settings()
