"""Application Settings - Pydantic Settings for environment configuration."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings are loaded from .env file or environment variables.
    Validation is automatic via Pydantic.
    """

    # Database (Supabase)
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_key: str = ""

    # Sessions (Redis)
    redis_url: str = "redis://localhost:6379"
    session_ttl_seconds: int = 8 * 3600

    # Observability
    otlp_endpoint: str = "http://localhost:4318/v1/traces"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    api_port: int = 8000
    api_host: str = "0.0.0.0"

    # Business rules
    business_name: str = "Equipe Pet Shop"
    low_stock_threshold: int = 10
    reminder_timezone: str = "America/Sao_Paulo"

    # Feature Flags
    enable_tracing: bool = True
    enforce_status_transitions: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache for performance - settings are loaded once.
    """
    return Settings()
