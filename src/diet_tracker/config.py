"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
MISSING_BACKEND_MESSAGE = "Server missing SUPABASE_URL or SUPABASE_SERVICE_KEY"


class MissingSettingsError(RuntimeError):
    """Raised when a request needs backend settings that are not configured."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str | None = None
    supabase_service_key: str | None = None
    nutrient_function_name: str = "GetNutr_POST"
    upstream_timeout_seconds: float = 30
    api_base_url: str = "http://localhost:8000"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def missing_backend_settings(self) -> list[str]:
        """Return the names of backend settings that are absent."""
        missing = []
        if not self.supabase_url:
            missing.append("SUPABASE_URL")
        if not self.supabase_service_key:
            missing.append("SUPABASE_SERVICE_KEY")
        return missing
