"""Application settings and configuration."""

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "propsearch"
    env: str = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["console", "json"] = "console"

    # Language-model backend (used by the edge gateway)
    ai_gateway_url: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    ai_gateway_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("AI_GATEWAY_API_KEY", "LOVABLE_API_KEY"),
    )
    ai_model: str = "google/gemini-2.5-flash-lite"
    ai_request_timeout_seconds: float = 30.0

    # Query interpreter (client of the edge gateway)
    interpret_gateway_url: str = "http://localhost:8000/api/v1/interpret-search"
    gateway_anon_key: str | None = None
    interpret_timeout_seconds: float = 7.0
    interpret_cache_ttl_seconds: float = 300.0  # 5 minutes
    interpret_cache_max_entries: int = 500

    # Rate limiting on the gateway endpoint
    interpret_rate_limit: str = "30/minute"
    # Key rate limits on the first X-Forwarded-For hop
    rate_limit_trust_forwarded_for: bool = False
    interpret_max_query_length: int = 500


# Global settings instance
settings = Settings()
